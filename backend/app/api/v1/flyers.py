"""
Public flyer API endpoints.

Anyone can read flyers. Creating, editing and deleting them is reserved to
the superadmin; likes, comments and replies need a signed-in account and are
attributed to the token's user.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import Field
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.api.deps import AuthContext, get_auth_context, parse_id, require_superadmin
from app.api.schemas import CamelModel, CommentOut, FileInfo, FlyerOut, ReplyOut
from app.core.errors import AuthorizationError, NotFoundError, ValidationError
from app.db.session import get_db
from app.models import Flyer, FlyerComment, FlyerReply
from app.models.user import ROLE_SUPERADMIN
from app.services.pagination import normalize

logger = logging.getLogger("flyers")

router = APIRouter()


# ============== Pydantic Schemas ==============


class FlyerIn(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    url: Optional[str] = None
    starts_on: Optional[date] = Field(default=None, alias="from")
    ends_on: Optional[date] = Field(default=None, alias="end")
    image: Optional[FileInfo] = None


class CommentIn(CamelModel):
    comment: Optional[str] = None


# ============== Helper Functions ==============


def get_flyer_or_404(db: Session, flyer_id: str) -> Flyer:
    flyer_id = parse_id(flyer_id, "Flyer")
    flyer = db.query(Flyer).filter(Flyer.id == flyer_id).first()
    if not flyer:
        raise NotFoundError("Flyer not found")
    return flyer


def get_comment_or_404(flyer: Flyer, comment_id: str) -> FlyerComment:
    comment = next((c for c in flyer.comments if c.id == comment_id), None)
    if comment is None:
        raise NotFoundError("Comment not found")
    return comment


def get_reply_or_404(comment: FlyerComment, reply_id: str) -> FlyerReply:
    reply = next((r for r in comment.replies if r.id == reply_id), None)
    if reply is None:
        raise NotFoundError("Reply not found")
    return reply


def ensure_author(auth: AuthContext, user_id: Optional[str]) -> None:
    if auth.role != ROLE_SUPERADMIN and auth.id != user_id:
        raise AuthorizationError("Access Denied: You can only modify your own comments")


def comment_text(data: CommentIn, empty_message: str) -> str:
    text = (data.comment or "").strip()
    if not text:
        raise ValidationError(empty_message)
    return text


def comments_out(flyer: Flyer):
    return [CommentOut.model_validate(c) for c in flyer.comments]


# ============== Flyers ==============


@router.get("")
async def list_flyers(
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db),
):
    """Newest first; `search` matches title or description, case-insensitive."""
    page, limit = normalize(page, limit)
    query = db.query(Flyer)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Flyer.title.ilike(pattern), Flyer.description.ilike(pattern)))

    total = query.count()
    flyers = query.order_by(Flyer.created_at.desc()).offset((page - 1) * limit).limit(limit).all()
    return {
        "data": [FlyerOut.model_validate(f) for f in flyers],
        "page": page,
        "limit": limit,
        "totalResult": total,
    }


@router.get("/{flyer_id}")
async def get_flyer(flyer_id: str, db: Session = Depends(get_db)):
    flyer = get_flyer_or_404(db, flyer_id)
    return {"data": FlyerOut.model_validate(flyer)}


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_superadmin)])
async def create_flyer(data: FlyerIn, db: Session = Depends(get_db)):
    if not data.title or not data.url:
        raise ValidationError("Please provide title and url")

    flyer = Flyer(
        title=data.title,
        description=data.description,
        url=data.url,
        starts_on=data.starts_on,
        ends_on=data.ends_on,
        image=data.image.to_record() if data.image else None,
        likes=[],
    )
    db.add(flyer)
    db.commit()
    db.refresh(flyer)
    logger.info("Flyer %s created", flyer.id)
    return {"message": "Public Flyer is Created Successfully", "publicFlyer": FlyerOut.model_validate(flyer)}


@router.put("/{flyer_id}", dependencies=[Depends(require_superadmin)])
async def update_flyer(flyer_id: str, data: FlyerIn, db: Session = Depends(get_db)):
    """Only non-empty fields are applied."""
    flyer = get_flyer_or_404(db, flyer_id)
    for field in ("title", "description", "url", "starts_on", "ends_on"):
        value = getattr(data, field)
        if value:
            setattr(flyer, field, value)
    if data.image:
        flyer.image = data.image.to_record()

    db.commit()
    db.refresh(flyer)
    return {"message": "Flyer Updated Successfully", "flyer": FlyerOut.model_validate(flyer)}


@router.delete("/{flyer_id}", dependencies=[Depends(require_superadmin)])
async def delete_flyer(flyer_id: str, db: Session = Depends(get_db)):
    flyer = get_flyer_or_404(db, flyer_id)
    db.delete(flyer)
    db.commit()
    logger.info("Flyer %s deleted", flyer_id)
    return {"message": "Flyer deleted successfully"}


@router.post("/{flyer_id}/like")
async def toggle_like(
    flyer_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    flyer = get_flyer_or_404(db, flyer_id)
    likes = list(flyer.likes or [])
    already_liked = auth.id in likes
    if already_liked:
        likes = [user_id for user_id in likes if user_id != auth.id]
    else:
        likes.append(auth.id)

    # JSON column: assign a new list so the change is tracked
    flyer.likes = likes
    db.commit()
    return {"message": "Unliked" if already_liked else "Liked", "likes": len(likes)}


# ============== Comments ==============


@router.post("/{flyer_id}/comments", status_code=status.HTTP_201_CREATED)
async def add_comment(
    flyer_id: str,
    data: CommentIn,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    text = comment_text(data, "Comment cannot be empty")
    flyer = get_flyer_or_404(db, flyer_id)
    flyer.comments.append(FlyerComment(user_id=auth.id, comment=text))
    db.commit()
    db.refresh(flyer)
    return {"message": "Comment added", "comments": comments_out(flyer)}


@router.delete("/{flyer_id}/comments/{comment_id}")
async def delete_comment(
    flyer_id: str,
    comment_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    flyer = get_flyer_or_404(db, flyer_id)
    comment = get_comment_or_404(flyer, comment_id)
    ensure_author(auth, comment.user_id)

    flyer.comments.remove(comment)
    db.commit()
    db.refresh(flyer)
    return {"message": "Comment deleted", "comments": comments_out(flyer)}


# ============== Replies ==============


@router.get("/{flyer_id}/comments/{comment_id}/replies")
async def list_replies(flyer_id: str, comment_id: str, db: Session = Depends(get_db)):
    flyer = get_flyer_or_404(db, flyer_id)
    comment = get_comment_or_404(flyer, comment_id)
    return {"replies": [ReplyOut.model_validate(r) for r in comment.replies]}


@router.post("/{flyer_id}/comments/{comment_id}/replies", status_code=status.HTTP_201_CREATED)
async def add_reply(
    flyer_id: str,
    comment_id: str,
    data: CommentIn,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    text = comment_text(data, "Reply cannot be empty")
    flyer = get_flyer_or_404(db, flyer_id)
    comment = get_comment_or_404(flyer, comment_id)

    comment.replies.append(FlyerReply(user_id=auth.id, comment=text))
    db.commit()
    db.refresh(comment)
    return {"message": "Reply added", "comment": CommentOut.model_validate(comment)}


@router.patch("/{flyer_id}/comments/{comment_id}/replies/{reply_id}")
async def update_reply(
    flyer_id: str,
    comment_id: str,
    reply_id: str,
    data: CommentIn,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    text = comment_text(data, "Reply cannot be empty")
    flyer = get_flyer_or_404(db, flyer_id)
    comment = get_comment_or_404(flyer, comment_id)
    reply = get_reply_or_404(comment, reply_id)
    ensure_author(auth, reply.user_id)

    reply.comment = text
    db.commit()
    db.refresh(comment)
    return {
        "message": "Reply updated successfully",
        "replies": [ReplyOut.model_validate(r) for r in comment.replies],
    }


@router.delete("/{flyer_id}/comments/{comment_id}/replies/{reply_id}")
async def delete_reply(
    flyer_id: str,
    comment_id: str,
    reply_id: str,
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    flyer = get_flyer_or_404(db, flyer_id)
    comment = get_comment_or_404(flyer, comment_id)
    reply = get_reply_or_404(comment, reply_id)
    ensure_author(auth, reply.user_id)

    comment.replies.remove(reply)
    db.commit()
    db.refresh(comment)
    return {
        "message": "Reply deleted successfully",
        "replies": [ReplyOut.model_validate(r) for r in comment.replies],
    }
