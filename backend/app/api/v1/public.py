"""
Public API endpoints. No authentication required.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import parse_id
from app.api.schemas import EmployeeOut, JobOut
from app.core.config import settings
from app.core.errors import NotFoundError
from app.db.base import utcnow
from app.db.session import get_db
from app.models import Employee, Job
from app.services.matching import open_jobs

router = APIRouter()


@router.get("/jobs")
async def list_public_jobs(category: Optional[str] = None, db: Session = Depends(get_db)):
    """Open jobs, newest first, optionally filtered by category."""
    jobs = open_jobs(db, category).all()
    return {"message": "Jobs retrieved successfully", "jobs": [JobOut.model_validate(j) for j in jobs]}


@router.get("/jobs/{job_id}")
async def get_public_job(job_id: str, db: Session = Depends(get_db)):
    job_id = parse_id(job_id, "Job")
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")
    return {"message": "Job retrieved successfully", "job": JobOut.model_validate(job)}


@router.get("/users")
async def list_public_users(db: Session = Depends(get_db)):
    """Active employee profiles. Companies and admins are never listed here."""
    employees = (
        db.query(Employee)
        .filter(Employee.is_active.is_(True))
        .order_by(Employee.created_at.desc())
        .all()
    )
    return {"message": "Users retrieved successfully", "users": [EmployeeOut.model_validate(e) for e in employees]}


@router.get("/users/{user_id}")
async def get_public_user(user_id: str, db: Session = Depends(get_db)):
    user_id = parse_id(user_id, "User")
    employee = (
        db.query(Employee)
        .filter(Employee.id == user_id, Employee.is_active.is_(True))
        .first()
    )
    if not employee:
        raise NotFoundError("User not found")
    return {"message": "User retrieved successfully", "user": EmployeeOut.model_validate(employee)}


@router.get("/health")
async def health():
    return {
        "message": "Server is healthy",
        "timestamp": utcnow().isoformat(),
        "environment": "development" if settings.DEBUG else "production",
    }
