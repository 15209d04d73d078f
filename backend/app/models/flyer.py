from sqlalchemy import Column, Date, DateTime, ForeignKey, JSON, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base, generate_uuid, utcnow


class Flyer(Base):
    """Public announcement with a validity window, likes and comments."""

    __tablename__ = "flyers"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    url = Column(String, nullable=False)
    image = Column(JSON, nullable=True)
    starts_on = Column(Date, nullable=True)
    ends_on = Column(Date, nullable=True)

    likes = Column(JSON, default=list)  # user ids

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    comments = relationship(
        "FlyerComment",
        back_populates="flyer",
        cascade="all, delete-orphan",
        order_by="FlyerComment.created_at",
    )


class FlyerComment(Base):
    __tablename__ = "flyer_comments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    flyer_id = Column(String(36), ForeignKey("flyers.id", ondelete="CASCADE"), index=True, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    flyer = relationship("Flyer", back_populates="comments")
    user = relationship("User")
    replies = relationship(
        "FlyerReply",
        back_populates="parent",
        cascade="all, delete-orphan",
        order_by="FlyerReply.created_at",
    )


class FlyerReply(Base):
    __tablename__ = "flyer_replies"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    comment_id = Column(String(36), ForeignKey("flyer_comments.id", ondelete="CASCADE"), index=True, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow)

    parent = relationship("FlyerComment", back_populates="replies")
    user = relationship("User")
