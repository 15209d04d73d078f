"""
Employee API endpoints.

Profile and password management, job browsing and suggestions,
applications, notifications, work requests and the account lifecycle.
Mutations require an active account.
"""

import logging
from datetime import datetime
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, status
from pydantic import field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import current_employee, ensure_employee_active, parse_id
from app.api.schemas import (
    ApplicationOut,
    CamelModel,
    EmployeeApplicationOut,
    EmployeeOut,
    FileInfo,
    JobOut,
    NotificationOut,
    WorkRequestOut,
    as_string_list,
)
from app.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from app.core.security import get_password_hash, verify_password
from app.db.base import utcnow
from app.db.session import get_db
from app.models import Application, Employee, Job, Notification, WorkRequest
from app.models.application import APPLIED_VIA
from app.models.notification import AUDIENCE_COMPANY
from app.services.matching import open_jobs, suggested_jobs
from app.services.notifications import employee_feed, notify_application, notify_work_request

logger = logging.getLogger("employee")

router = APIRouter(dependencies=[Depends(current_employee)])


# ============== Pydantic Schemas ==============


class EmployeeProfileUpdate(CamelModel):
    """Editable profile fields. Email, role and password are not among them."""

    name: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    phone_number: Optional[str] = None
    province: Optional[str] = None
    district: Optional[str] = None
    gender: Optional[str] = None
    about: Optional[str] = None
    experience: Optional[str] = None
    education: Optional[str] = None
    skills: Optional[List[str]] = None
    job_preferences: Optional[List[str]] = None
    documents: Optional[Union[List[FileInfo], FileInfo]] = None
    profile_image: Optional[FileInfo] = None

    @field_validator("skills", "job_preferences", mode="before")
    @classmethod
    def coerce_lists(cls, v):
        return as_string_list(v)


class PasswordReset(CamelModel):
    old_password: Optional[str] = None
    new_password: Optional[str] = None


class ApplyRequest(CamelModel):
    skills: Optional[List[str]] = None
    experience: Optional[str] = None
    resume: Optional[str] = None
    applied_via: Optional[str] = None

    @field_validator("skills", mode="before")
    @classmethod
    def coerce_lists(cls, v):
        return as_string_list(v)


class WorkRequestResponse(CamelModel):
    action: Optional[str] = None


# ============== Helper Functions ==============


def get_feed_notification(db: Session, employee: Employee, notification_id: str) -> Notification:
    notification_id = parse_id(notification_id, "notification")
    note = employee_feed(db, employee.id).filter(Notification.id == notification_id).first()
    if not note:
        raise NotFoundError("Notification not found")
    return note


def get_own_work_request(db: Session, employee: Employee, request_id: str) -> WorkRequest:
    request_id = parse_id(request_id, "request")
    work = db.query(WorkRequest).filter(WorkRequest.id == request_id).first()
    if not work:
        raise NotFoundError("Work request not found")
    if work.employee_id != employee.id:
        raise AuthorizationError("Access Denied")
    return work


def employee_response(db: Session, employee: Employee, message: str) -> dict:
    db.commit()
    db.refresh(employee)
    return {"message": message, "employee": EmployeeOut.model_validate(employee)}


# ============== Profile ==============


@router.get("/profile")
async def get_profile(employee: Employee = Depends(current_employee)):
    return {"message": "Employee profile retrieved successfully", "employee": EmployeeOut.model_validate(employee)}


@router.patch("/profile")
async def update_profile(
    data: EmployeeProfileUpdate,
    employee: Employee = Depends(ensure_employee_active),
    db: Session = Depends(get_db),
):
    updates = data.model_dump(exclude_unset=True, exclude={"documents", "profile_image"})
    for field, value in updates.items():
        if field == "name" and not value:
            continue
        if field in ("skills", "job_preferences") and value is None:
            value = []
        setattr(employee, field, value)

    if "documents" in data.model_fields_set:
        documents = data.documents or []
        if isinstance(documents, FileInfo):
            documents = [documents]
        employee.documents = [doc.to_record() for doc in documents]

    if "profile_image" in data.model_fields_set:
        employee.profile_image = data.profile_image.to_record() if data.profile_image else None

    return employee_response(db, employee, "Employee profile updated successfully")


@router.patch("/reset-password")
async def reset_password(
    data: PasswordReset,
    employee: Employee = Depends(current_employee),
    db: Session = Depends(get_db),
):
    if not data.old_password or not data.new_password:
        raise ValidationError("Please provide old and new passwords")
    if not verify_password(data.old_password, employee.hashed_password):
        raise ValidationError("Invalid old password")

    employee.hashed_password = get_password_hash(data.new_password)
    db.commit()
    logger.info("Employee %s reset password", employee.id)
    return {"message": "Password reset successfully"}


# ============== Jobs ==============


@router.get("/jobs")
async def list_jobs(category: Optional[str] = None, db: Session = Depends(get_db)):
    jobs = open_jobs(db, category).all()
    return {"message": "Jobs retrieved successfully", "jobs": [JobOut.model_validate(j) for j in jobs]}


@router.get("/suggestions")
async def job_suggestions(
    category: Optional[str] = None,
    employee: Employee = Depends(current_employee),
    db: Session = Depends(get_db),
):
    """Open jobs matching the employee's job preferences by category or title."""
    jobs = suggested_jobs(db, employee, category).all()
    return {"message": "Job suggestions retrieved successfully", "jobs": [JobOut.model_validate(j) for j in jobs]}


# ============== Applications ==============


@router.post("/apply/{job_id}", status_code=status.HTTP_201_CREATED)
async def apply_for_job(
    job_id: str,
    data: ApplyRequest,
    employee: Employee = Depends(ensure_employee_active),
    db: Session = Depends(get_db),
):
    job_id = parse_id(job_id, "Job")
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")
    if not job.is_active:
        raise ValidationError("This job is no longer accepting applications")

    applied_via = data.applied_via or "normal"
    if applied_via not in APPLIED_VIA:
        raise ValidationError("Invalid appliedVia value")

    existing = (
        db.query(Application)
        .filter(Application.job_id == job.id, Application.employee_id == employee.id)
        .first()
    )
    if existing:
        raise ConflictError("You have already applied for this job")

    application = Application(
        job_id=job.id,
        employee_id=employee.id,
        skills=data.skills or [],
        experience=data.experience,
        resume=data.resume,
        applied_via=applied_via,
        status="pending",
    )
    db.add(application)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise ConflictError("You have already applied for this job")

    notify_application(db, application.id, f"New application from {employee.name} for {job.title}", AUDIENCE_COMPANY)
    db.commit()
    db.refresh(application)
    return {"message": "Application submitted successfully", "application": ApplicationOut.model_validate(application)}


@router.get("/check-application/{job_id}")
async def check_application(
    job_id: str,
    employee: Employee = Depends(current_employee),
    db: Session = Depends(get_db),
):
    job_id = parse_id(job_id, "Job")
    application = (
        db.query(Application)
        .filter(Application.job_id == job_id, Application.employee_id == employee.id)
        .first()
    )
    return {
        "hasApplied": application is not None,
        "application": ApplicationOut.model_validate(application) if application else None,
    }


@router.get("/applications")
async def list_applications(employee: Employee = Depends(current_employee), db: Session = Depends(get_db)):
    applications = (
        db.query(Application)
        .filter(Application.employee_id == employee.id)
        .order_by(Application.created_at.desc())
        .all()
    )
    return {
        "message": "Applications retrieved successfully",
        "applications": [EmployeeApplicationOut.model_validate(a) for a in applications],
    }


# ============== Notifications ==============


@router.get("/notifications")
async def list_notifications(employee: Employee = Depends(current_employee), db: Session = Depends(get_db)):
    notifications = employee_feed(db, employee.id).all()
    return {
        "message": "Notifications retrieved successfully",
        "notifications": [NotificationOut.model_validate(n) for n in notifications],
    }


@router.patch("/notifications/{notification_id}/read")
async def mark_notification_read(
    notification_id: str,
    employee: Employee = Depends(current_employee),
    db: Session = Depends(get_db),
):
    note = get_feed_notification(db, employee, notification_id)
    note.read = True
    db.commit()
    return {"message": "Notification marked as read"}


@router.delete("/notifications/{notification_id}")
async def delete_notification(
    notification_id: str,
    employee: Employee = Depends(current_employee),
    db: Session = Depends(get_db),
):
    note = get_feed_notification(db, employee, notification_id)
    db.delete(note)
    db.commit()
    return {"message": "Notification deleted successfully"}


# ============== Work requests ==============


@router.get("/work-requests")
async def list_work_requests(employee: Employee = Depends(current_employee), db: Session = Depends(get_db)):
    requests = (
        db.query(WorkRequest)
        .filter(WorkRequest.employee_id == employee.id)
        .order_by(WorkRequest.created_at.desc())
        .all()
    )
    return {"message": "Work requests retrieved", "requests": [WorkRequestOut.model_validate(r) for r in requests]}


@router.patch("/work-requests/{request_id}/respond")
async def respond_work_request(
    request_id: str,
    data: WorkRequestResponse,
    employee: Employee = Depends(ensure_employee_active),
    db: Session = Depends(get_db),
):
    """Accept or reject a company's work request; the company is notified."""
    if data.action not in ("accept", "reject"):
        raise ValidationError("Action must be 'accept' or 'reject'")

    work = get_own_work_request(db, employee, request_id)
    work.status = "accepted" if data.action == "accept" else "rejected"
    notify_work_request(db, work.id, f"Employee has {work.status} your request", AUDIENCE_COMPANY)
    db.commit()
    db.refresh(work)
    return {"message": "Response saved", "request": WorkRequestOut.model_validate(work)}


@router.delete("/work-requests/{request_id}")
async def delete_work_request(
    request_id: str,
    employee: Employee = Depends(current_employee),
    db: Session = Depends(get_db),
):
    work = get_own_work_request(db, employee, request_id)
    db.delete(work)
    db.commit()
    return {"message": "Work request deleted successfully"}


# ============== Account lifecycle ==============


@router.patch("/deactivate")
async def deactivate_account(employee: Employee = Depends(current_employee), db: Session = Depends(get_db)):
    if employee.deleted_at is not None:
        raise ValidationError("Cannot deactivate a deleted account")
    employee.is_active = False
    return employee_response(db, employee, "Account deactivated")


@router.patch("/activate")
async def activate_account(employee: Employee = Depends(current_employee), db: Session = Depends(get_db)):
    if employee.deleted_at is not None:
        raise ValidationError("Cannot activate a deleted account")
    employee.is_active = True
    return employee_response(db, employee, "Account activated")


@router.delete("/delete")
async def delete_account(employee: Employee = Depends(current_employee), db: Session = Depends(get_db)):
    """Soft delete: the account is kept but can no longer be activated."""
    employee.is_active = False
    if employee.deleted_at is None:
        employee.deleted_at = utcnow()
    logger.info("Employee %s deleted their account", employee.id)
    return employee_response(db, employee, "Account deleted")
