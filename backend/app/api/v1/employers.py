"""
Employer API endpoints.

Household employers: registration, listing, housekeeper matching by
location and the selection of at most two available housekeepers.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import parse_id, require_superadmin
from app.api.schemas import CamelModel, EmployerOut, FileInfo, HousekeeperOut, LocationIn
from app.api.v1.housekeepers import location_values, touches_location
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.db.session import get_db
from app.models import Employer, Housekeeper
from app.models.housekeeping import EMPLOYER_STATUSES
from app.services.matching import matching_housekeepers
from app.services.pagination import paginate

logger = logging.getLogger("employers")

router = APIRouter()

MAX_SELECTED_HOUSEKEEPERS = 2
REQUIRED_EMPLOYER_FIELDS = (
    "name",
    "national_id",
    "village_leader_number",
    "partner_number",
    "church_name",
    "salary_range_min",
    "salary_range_max",
)


# ============== Pydantic Schemas ==============


class EmployerIn(LocationIn):
    name: Optional[str] = None
    email: Optional[str] = None
    national_id: Optional[str] = None
    village_leader_number: Optional[str] = None
    partner_number: Optional[str] = None
    church_name: Optional[str] = None
    salary_range_min: Optional[float] = None
    salary_range_max: Optional[float] = None
    location: Optional[LocationIn] = None
    profile_image: Optional[FileInfo] = None


class HousekeeperSelection(CamelModel):
    housekeeper_ids: Any = None


class EmployerStatusUpdate(CamelModel):
    status: Optional[str] = None


# ============== Helper Functions ==============


def get_employer_or_404(db: Session, employer_id: str) -> Employer:
    employer_id = parse_id(employer_id, "employer")
    employer = db.query(Employer).filter(Employer.id == employer_id).first()
    if not employer:
        raise NotFoundError("Employer not found")
    return employer


def check_salary_range(low: float, high: float) -> None:
    if low > high:
        raise ValidationError("salaryRangeMin cannot exceed salaryRangeMax")


def commit_employer(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Employer with this national ID already exists")


# ============== API Endpoints ==============


@router.post("/employers", status_code=status.HTTP_201_CREATED)
async def create_employer(data: EmployerIn, db: Session = Depends(get_db)):
    location = location_values(data)
    if any(getattr(data, field) in (None, "") for field in REQUIRED_EMPLOYER_FIELDS) or not all(location.values()):
        raise ValidationError("Please provide all required employer fields")
    check_salary_range(data.salary_range_min, data.salary_range_max)

    if db.query(Employer).filter(Employer.national_id == data.national_id).first():
        raise ConflictError("Employer with this national ID already exists")

    employer = Employer(
        name=data.name,
        email=data.email,
        national_id=data.national_id,
        village_leader_number=data.village_leader_number,
        partner_number=data.partner_number,
        church_name=data.church_name,
        salary_range_min=data.salary_range_min,
        salary_range_max=data.salary_range_max,
        profile_image=data.profile_image.to_record() if data.profile_image else None,
        **location,
    )
    db.add(employer)
    commit_employer(db)
    db.refresh(employer)
    logger.info("Employer %s created", employer.id)
    return {"message": "Employer created successfully", "employer": EmployerOut.model_validate(employer)}


@router.get("/employers")
async def list_employers(page: int = 1, limit: int = 10, db: Session = Depends(get_db)):
    query = db.query(Employer).filter(Employer.is_active.is_(True)).order_by(Employer.created_at.desc())
    employers, pagination = paginate(query, page, limit)
    return {
        "message": "Employers retrieved successfully",
        "employers": [EmployerOut.model_validate(e) for e in employers],
        "pagination": pagination,
    }


@router.get("/employers/{employer_id}")
async def get_employer(employer_id: str, db: Session = Depends(get_db)):
    employer = get_employer_or_404(db, employer_id)
    return {"message": "Employer retrieved successfully", "employer": EmployerOut.model_validate(employer)}


@router.put("/employers/{employer_id}")
async def update_employer(employer_id: str, data: EmployerIn, db: Session = Depends(get_db)):
    """Update profile fields. The housekeeper selection only changes through /select."""
    employer = get_employer_or_404(db, employer_id)
    fields = data.model_fields_set

    for field in REQUIRED_EMPLOYER_FIELDS:
        value = getattr(data, field)
        if field in fields and value not in (None, ""):
            setattr(employer, field, value)
    if "email" in fields:
        employer.email = data.email
    check_salary_range(employer.salary_range_min, employer.salary_range_max)

    if touches_location(data):
        for field, value in location_values(data).items():
            if value:
                setattr(employer, field, value)

    if data.profile_image:
        employer.profile_image = data.profile_image.to_record()

    commit_employer(db)
    db.refresh(employer)
    return {"message": "Employer updated successfully", "employer": EmployerOut.model_validate(employer)}


@router.delete("/employers/{employer_id}", dependencies=[Depends(require_superadmin)])
async def delete_employer(employer_id: str, db: Session = Depends(get_db)):
    """Soft delete: the employer disappears from the listing but keeps its history."""
    employer = get_employer_or_404(db, employer_id)
    employer.is_active = False
    db.commit()
    logger.info("Employer %s deleted", employer.id)
    return {"message": "Employer deleted successfully"}


@router.get("/employers/{employer_id}/matches")
async def employer_matches(
    employer_id: str,
    salary_range: Optional[str] = Query(None, alias="salaryRange"),
    work_with_children: Optional[str] = Query(None, alias="workWithChildren"),
    db: Session = Depends(get_db),
):
    employer = get_employer_or_404(db, employer_id)
    housekeepers = matching_housekeepers(
        db,
        employer,
        salary_range=salary_range == "true",
        work_with_children=work_with_children == "true",
    )
    return {
        "message": "Matching housekeepers retrieved successfully",
        "housekeepers": [HousekeeperOut.model_validate(h) for h in housekeepers],
        "totalMatches": len(housekeepers),
    }


@router.post("/employers/{employer_id}/select")
async def select_housekeepers(employer_id: str, data: HousekeeperSelection, db: Session = Depends(get_db)):
    """Pick up to two available housekeepers; they become hired and the employer active."""
    employer_id = parse_id(employer_id, "employer")
    ids = data.housekeeper_ids
    if not isinstance(ids, list) or not ids:
        raise ValidationError("housekeeperIds must be a non-empty array")
    if len(ids) > MAX_SELECTED_HOUSEKEEPERS:
        raise ValidationError(f"Cannot select more than {MAX_SELECTED_HOUSEKEEPERS} housekeepers")

    try:
        ids = list(dict.fromkeys(parse_id(value, "housekeeper") for value in ids))
    except ValidationError:
        raise ValidationError("Invalid housekeeper ID(s) provided")

    housekeepers = (
        db.query(Housekeeper)
        .filter(
            Housekeeper.id.in_(ids),
            Housekeeper.status == "available",
            Housekeeper.is_active.is_(True),
        )
        .all()
    )
    if len(housekeepers) != len(ids):
        raise ValidationError("Some housekeepers are not available or do not exist")

    employer = db.query(Employer).filter(Employer.id == employer_id).first()
    if not employer:
        raise NotFoundError("Employer not found")

    employer.selected_housekeepers = housekeepers
    employer.status = "active"
    for housekeeper in housekeepers:
        housekeeper.status = "hired"

    db.commit()
    db.refresh(employer)
    logger.info("Employer %s selected %d housekeeper(s)", employer.id, len(housekeepers))
    return {
        "message": "Housekeepers selected successfully",
        "employer": EmployerOut.model_validate(employer),
        "selectedHousekeepers": [HousekeeperOut.model_validate(h) for h in housekeepers],
    }


@router.patch("/employers/{employer_id}/status")
async def update_employer_status(employer_id: str, data: EmployerStatusUpdate, db: Session = Depends(get_db)):
    employer_id = parse_id(employer_id, "employer")
    if data.status not in EMPLOYER_STATUSES:
        raise ValidationError("Status must be one of: " + ", ".join(EMPLOYER_STATUSES))

    employer = get_employer_or_404(db, employer_id)
    employer.status = data.status
    db.commit()
    db.refresh(employer)
    return {"message": "Employer status updated successfully", "employer": EmployerOut.model_validate(employer)}
