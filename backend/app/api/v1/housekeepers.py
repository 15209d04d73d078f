"""
Housekeeper API endpoints.

Housekeepers are managed records, not accounts. Location, work preferences
and background are accepted either nested or as flat top-level fields.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import parse_id, require_superadmin
from app.api.schemas import CamelModel, FileInfo, HousekeeperOut, LocationIn
from app.core.errors import NotFoundError, ValidationError
from app.db.session import get_db
from app.models import Housekeeper
from app.models.housekeeping import HOUSEKEEPER_STATUSES, LOCATION_FIELDS

logger = logging.getLogger("housekeepers")

router = APIRouter()

BACKGROUND_FIELDS = (
    "has_parents",
    "father_name",
    "father_phone",
    "mother_name",
    "mother_phone",
    "has_studied",
    "education_level",
    "church",
)


# ============== Pydantic Schemas ==============


class WorkPreferencesIn(CamelModel):
    work_district: Optional[str] = None
    work_sector: Optional[str] = None
    willing_to_work_with_children: Optional[bool] = None


class BackgroundIn(CamelModel):
    has_parents: Optional[bool] = None
    father_name: Optional[str] = None
    father_phone: Optional[str] = None
    mother_name: Optional[str] = None
    mother_phone: Optional[str] = None
    has_studied: Optional[bool] = None
    education_level: Optional[str] = None
    church: Optional[str] = None


class HousekeeperIn(BackgroundIn, WorkPreferencesIn, LocationIn):
    """Create/update body. Nested objects win over the flat fields."""

    full_name: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    gender: Optional[str] = None
    id_number: Optional[str] = None
    phone_number: Optional[str] = None
    status: Optional[str] = None

    location: Optional[LocationIn] = None
    work_preferences: Optional[WorkPreferencesIn] = None
    background: Optional[BackgroundIn] = None

    passport_image: Optional[FileInfo] = None
    full_body_image: Optional[FileInfo] = None


# ============== Helper Functions ==============


def merged(data: CamelModel, nested: Optional[CamelModel], fields) -> Dict[str, Any]:
    """Values of `fields`, taken from `nested` when set there, else from the flat body."""
    values = {}
    for field in fields:
        value = getattr(nested, field, None) if nested is not None else None
        if value is None:
            value = getattr(data, field, None)
        values[field] = value
    return values


def location_values(data) -> Dict[str, Optional[str]]:
    return merged(data, data.location, LOCATION_FIELDS)


def background_record(data: HousekeeperIn) -> Dict[str, Any]:
    values = merged(data, data.background, BACKGROUND_FIELDS)
    return BackgroundIn(**values).model_dump(by_alias=True, exclude_none=True)


def touches_location(data) -> bool:
    return data.location is not None or any(f in data.model_fields_set for f in LOCATION_FIELDS)


def apply_work_preferences(housekeeper: Housekeeper, data: HousekeeperIn) -> None:
    prefs = merged(data, data.work_preferences, WorkPreferencesIn.model_fields)
    housekeeper.work_district = prefs["work_district"]
    housekeeper.work_sector = prefs["work_sector"]
    housekeeper.willing_to_work_with_children = prefs["willing_to_work_with_children"]


def get_housekeeper_or_404(db: Session, housekeeper_id: str) -> Housekeeper:
    housekeeper_id = parse_id(housekeeper_id, "housekeeper")
    housekeeper = db.query(Housekeeper).filter(Housekeeper.id == housekeeper_id).first()
    if not housekeeper:
        raise NotFoundError("Housekeeper not found")
    return housekeeper


# ============== API Endpoints ==============


@router.post("/housekeepers", status_code=status.HTTP_201_CREATED)
async def create_housekeeper(data: HousekeeperIn, db: Session = Depends(get_db)):
    location = location_values(data)
    if not data.full_name or not data.id_number or not all(location.values()):
        raise ValidationError("Please provide fullName, idNumber and a complete location")

    housekeeper = Housekeeper(
        full_name=data.full_name,
        date_of_birth=data.date_of_birth,
        gender=data.gender,
        id_number=data.id_number,
        phone_number=data.phone_number,
        background=background_record(data),
        passport_image=data.passport_image.to_record() if data.passport_image else None,
        full_body_image=data.full_body_image.to_record() if data.full_body_image else None,
        **location,
    )
    apply_work_preferences(housekeeper, data)

    db.add(housekeeper)
    db.commit()
    db.refresh(housekeeper)
    logger.info("Housekeeper %s created", housekeeper.id)
    return {"message": "Housekeeper created successfully", "housekeeper": HousekeeperOut.model_validate(housekeeper)}


@router.get("/housekeepers")
async def list_housekeepers(db: Session = Depends(get_db)):
    housekeepers = db.query(Housekeeper).order_by(Housekeeper.created_at.desc()).all()
    return {
        "message": "Housekeepers retrieved successfully",
        "housekeepers": [HousekeeperOut.model_validate(h) for h in housekeepers],
    }


@router.get("/housekeepers/{housekeeper_id}")
async def get_housekeeper(housekeeper_id: str, db: Session = Depends(get_db)):
    housekeeper = get_housekeeper_or_404(db, housekeeper_id)
    return {"message": "Housekeeper retrieved successfully", "housekeeper": HousekeeperOut.model_validate(housekeeper)}


@router.put("/housekeepers/{housekeeper_id}")
async def update_housekeeper(housekeeper_id: str, data: HousekeeperIn, db: Session = Depends(get_db)):
    housekeeper = get_housekeeper_or_404(db, housekeeper_id)
    fields = data.model_fields_set

    for field in ("full_name", "id_number"):
        value = getattr(data, field)
        if field in fields and value:
            setattr(housekeeper, field, value)
    for field in ("date_of_birth", "gender", "phone_number"):
        if field in fields:
            setattr(housekeeper, field, getattr(data, field))

    if "status" in fields and data.status is not None:
        if data.status not in HOUSEKEEPER_STATUSES:
            raise ValidationError("Invalid status value")
        housekeeper.status = data.status

    if touches_location(data):
        for field, value in location_values(data).items():
            if value:
                setattr(housekeeper, field, value)

    if data.work_preferences is not None or fields & set(WorkPreferencesIn.model_fields):
        apply_work_preferences(housekeeper, data)

    if data.background is not None or fields & set(BACKGROUND_FIELDS):
        housekeeper.background = background_record(data)

    if data.passport_image:
        housekeeper.passport_image = data.passport_image.to_record()
    if data.full_body_image:
        housekeeper.full_body_image = data.full_body_image.to_record()

    db.commit()
    db.refresh(housekeeper)
    return {"message": "Housekeeper updated successfully", "housekeeper": HousekeeperOut.model_validate(housekeeper)}


@router.delete("/housekeepers/{housekeeper_id}", dependencies=[Depends(require_superadmin)])
async def delete_housekeeper(housekeeper_id: str, db: Session = Depends(get_db)):
    housekeeper = get_housekeeper_or_404(db, housekeeper_id)
    db.delete(housekeeper)
    db.commit()
    logger.info("Housekeeper %s deleted", housekeeper_id)
    return {"message": "Housekeeper deleted successfully"}
