"""
Company API endpoints.

Profile management and review submission, logo / document metadata, job
postings, applicants, work requests, notifications and the company's own
account lifecycle.

Gating per route:
- profile, files and self-service lifecycle: any non-deleted company
- notifications: active companies, approved or not
- jobs, applicants, employees and work requests: approved companies only
"""

import logging
from datetime import datetime
from typing import Any, List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, status
from pydantic import field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import authorize_company, parse_id
from app.api.schemas import (
    ApplicantOut,
    ApplicationOut,
    CamelModel,
    CompanyOut,
    EmployeeOut,
    FileInfo,
    JobOut,
    NotificationOut,
    TeamMember,
    WorkRequestOut,
    as_string_list,
)
from app.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from app.core.security import get_password_hash, verify_password
from app.db.session import get_db
from app.models import Application, Company, Employee, Job, Notification, WorkRequest
from app.models.application import APPLICATION_STATUSES
from app.models.job import EMPLOYMENT_TYPES
from app.models.notification import AUDIENCE_EMPLOYEE
from app.services import company_lifecycle, mailer
from app.services.matching import employees_for_category
from app.services.notifications import company_feed, notify_admin, notify_application, notify_work_request
from app.services.pagination import envelope, normalize, paginate

logger = logging.getLogger("company")

router = APIRouter()

profile_access = authorize_company(require_approval=False, allow_disabled=True)
notification_access = authorize_company(require_approval=False)
approved_company = authorize_company(require_approval=True)

STRING_LIST_FIELDS = ("skills", "responsibilities", "benefits", "other_benefits")
REQUIRED_JOB_FIELDS = ("title", "description", "category", "employment_type")


# ============== Pydantic Schemas ==============


class ProfileUpdate(CamelModel):
    """Editable profile fields. Email, role and approval state are not among them."""

    company_name: Optional[str] = None
    province: Optional[str] = None
    district: Optional[str] = None
    phone_number: Optional[str] = None
    website: Optional[str] = None
    about: Optional[str] = None
    team_members: Optional[List[TeamMember]] = None
    old_password: Optional[str] = None
    new_password: Optional[str] = None


class CompleteProfile(CamelModel):
    about: Optional[str] = None
    logo: Optional[FileInfo] = None
    documents: Optional[List[FileInfo]] = None


class LogoUpload(CamelModel):
    logo: Optional[FileInfo] = None


class DocumentsUpload(CamelModel):
    documents: Optional[List[FileInfo]] = None


class JobCreate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    employment_type: Optional[str] = None
    province: Optional[str] = None
    district: Optional[str] = None
    experience: Optional[str] = None
    salary: Optional[str] = None
    skills: Optional[List[str]] = None
    responsibilities: Optional[List[str]] = None
    benefits: Optional[List[str]] = None
    other_benefits: Optional[List[str]] = None
    image: Optional[FileInfo] = None
    application_deadline: Optional[str] = None

    @field_validator(*STRING_LIST_FIELDS, mode="before")
    @classmethod
    def coerce_lists(cls, v):
        return as_string_list(v)


class JobUpdate(JobCreate):
    """Partial job update. `image: null` removes the image."""


class JobStatusUpdate(CamelModel):
    is_active: Any = None


class ApplicationStatusUpdate(CamelModel):
    status: Optional[str] = None
    message: Optional[str] = None


class WorkRequestCreate(CamelModel):
    employee_id: Optional[str] = None
    message: Optional[str] = None


# ============== Helper Functions ==============


def parse_deadline(value: Optional[str]) -> Optional[datetime]:
    """Best-effort parse of a client-supplied deadline; unparseable values yield None."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def get_owned_job(db: Session, company: Company, job_id: str) -> Job:
    job_id = parse_id(job_id, "Job")
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        raise NotFoundError("Job not found")
    if job.company_id != company.id:
        raise AuthorizationError("Access Denied: You do not own this job")
    return job


def ensure_documents_editable(company: Company) -> None:
    if company.is_approved and company.status == company_lifecycle.APPROVED:
        raise AuthorizationError("Documents cannot be modified after approval")


def get_feed_notification(db: Session, company: Company, notification_id: str) -> Notification:
    notification_id = parse_id(notification_id, "notification")
    note = company_feed(db, company.id).filter(Notification.id == notification_id).first()
    if not note:
        raise NotFoundError("Notification not found")
    return note


def company_response(db: Session, company: Company, message: str) -> dict:
    db.commit()
    db.refresh(company)
    return {"message": message, "company": CompanyOut.model_validate(company)}


# ============== Profile ==============


@router.get("/profile")
async def get_profile(company: Company = Depends(profile_access)):
    """Company profile plus a banner describing where the review stands."""
    return {
        "message": "Company profile retrieved successfully",
        "company": CompanyOut.model_validate(company),
        "statusNotice": company_lifecycle.status_notice(company),
    }


@router.patch("/profile")
async def update_profile(
    data: ProfileUpdate,
    company: Company = Depends(profile_access),
    db: Session = Depends(get_db),
):
    if data.new_password:
        if not data.old_password:
            raise ValidationError("Old password is required")
        if not verify_password(data.old_password, company.hashed_password):
            raise ValidationError("Invalid old password")
        company.hashed_password = get_password_hash(data.new_password)

    updates = data.model_dump(
        exclude_unset=True,
        exclude={"team_members", "old_password", "new_password"},
    )
    for field, value in updates.items():
        if field == "company_name" and not value:
            continue
        setattr(company, field, value)

    if data.team_members is not None:
        company.team_members = [member.to_record() for member in data.team_members]

    company_lifecycle.recompute_profile_completion(company)
    return company_response(db, company, "Company profile updated successfully")


@router.patch("/complete-profile")
async def complete_profile(
    data: CompleteProfile,
    background_tasks: BackgroundTasks,
    company: Company = Depends(profile_access),
    db: Session = Depends(get_db),
):
    """
    Submit the profile for review.

    Never marks the profile complete; once about and documents are present it
    becomes pending_review and the admin is told about it.
    """
    if data.about is not None:
        company.about = data.about
    if data.logo:
        company.logo = data.logo.to_record()
    if data.documents:
        company.documents = [doc.to_record() for doc in data.documents]

    previous = company.profile_completion_status
    current = company_lifecycle.recompute_profile_completion(company)

    if previous != company_lifecycle.PENDING_REVIEW and current == company_lifecycle.PENDING_REVIEW:
        notify_admin(db, f"Company profile completed: {company.company_name}")
        mailer.queue_email(
            background_tasks,
            mailer.admin_recipient(),
            "company_profile_completed",
            {"companyName": company.company_name},
        )
        logger.info("Company %s submitted its profile for review", company.id)

    return company_response(db, company, "Company profile submitted for review")


# ============== Logo & documents ==============


@router.post("/upload/logo")
async def upload_logo(
    data: LogoUpload,
    company: Company = Depends(profile_access),
    db: Session = Depends(get_db),
):
    if not data.logo:
        raise ValidationError("No logo file uploaded")
    company.logo = data.logo.to_record()
    return company_response(db, company, "Logo uploaded successfully")


@router.patch("/update/logo")
async def update_logo(
    data: LogoUpload,
    company: Company = Depends(profile_access),
    db: Session = Depends(get_db),
):
    if not data.logo:
        raise ValidationError("No logo file uploaded")
    company.logo = data.logo.to_record()
    return company_response(db, company, "Logo updated successfully")


@router.delete("/delete/logo")
async def delete_logo(company: Company = Depends(profile_access), db: Session = Depends(get_db)):
    company.logo = None
    return company_response(db, company, "Logo deleted successfully")


@router.post("/upload/documents")
async def upload_documents(
    data: DocumentsUpload,
    company: Company = Depends(profile_access),
    db: Session = Depends(get_db),
):
    """Append documents. Locked once the company is approved."""
    ensure_documents_editable(company)
    if not data.documents:
        raise ValidationError("No documents uploaded")

    company.documents = list(company.documents or []) + [doc.to_record() for doc in data.documents]
    company_lifecycle.recompute_profile_completion(company)
    return company_response(db, company, "Documents uploaded successfully")


@router.patch("/update/documents")
async def update_documents(
    data: DocumentsUpload,
    company: Company = Depends(profile_access),
    db: Session = Depends(get_db),
):
    """Replace all documents. Locked once the company is approved."""
    ensure_documents_editable(company)
    if not data.documents:
        raise ValidationError("No documents provided")

    company.documents = [doc.to_record() for doc in data.documents]
    company_lifecycle.recompute_profile_completion(company)
    return company_response(db, company, "Documents updated successfully")


@router.delete("/delete/document/{index}")
async def delete_document(
    index: str,
    company: Company = Depends(profile_access),
    db: Session = Depends(get_db),
):
    ensure_documents_editable(company)
    try:
        position = int(index)
    except ValueError:
        raise ValidationError("Invalid document index")
    if position < 0:
        raise ValidationError("Invalid document index")

    documents = list(company.documents or [])
    if position >= len(documents):
        raise ValidationError("Document index out of range")

    del documents[position]
    company.documents = documents
    company_lifecycle.recompute_profile_completion(company)
    return company_response(db, company, "Document deleted successfully")


# ============== Jobs ==============


@router.post("/job", status_code=status.HTTP_201_CREATED)
async def post_job(
    data: JobCreate,
    company: Company = Depends(approved_company),
    db: Session = Depends(get_db),
):
    """Post a job and return the employees whose preferences match its category."""
    if not data.title or not data.description or not data.employment_type or not data.category:
        raise ValidationError("Please provide title, description, employment type, and category")
    if data.employment_type not in EMPLOYMENT_TYPES:
        raise ValidationError("Invalid employment type")

    job = Job(
        company_id=company.id,
        title=data.title,
        description=data.description,
        category=data.category,
        employment_type=data.employment_type,
        province=data.province,
        district=data.district,
        experience=data.experience,
        salary=data.salary,
        skills=data.skills or [],
        responsibilities=data.responsibilities or [],
        benefits=data.benefits or [],
        other_benefits=data.other_benefits or [],
        image=data.image.to_record() if data.image else None,
        application_deadline=data.application_deadline,
        application_deadline_at=parse_deadline(data.application_deadline),
        is_active=True,
    )
    db.add(job)
    db.commit()
    db.refresh(job)

    matched = employees_for_category(db, job.category)
    logger.info("Company %s posted job %s", company.id, job.id)
    return {
        "message": "Job posted successfully",
        "job": JobOut.model_validate(job),
        "matchedEmployees": [EmployeeOut.model_validate(e) for e in matched],
    }


@router.get("/jobs")
async def list_jobs(company: Company = Depends(approved_company), db: Session = Depends(get_db)):
    jobs = db.query(Job).filter(Job.company_id == company.id).order_by(Job.created_at.desc()).all()
    return {"message": "Jobs retrieved successfully", "jobs": [JobOut.model_validate(j) for j in jobs]}


@router.get("/job/{job_id}")
async def get_job(job_id: str, company: Company = Depends(approved_company), db: Session = Depends(get_db)):
    job = get_owned_job(db, company, job_id)
    return {"message": "Job retrieved successfully", "job": JobOut.model_validate(job)}


@router.patch("/job/{job_id}")
async def update_job(
    job_id: str,
    data: JobUpdate,
    company: Company = Depends(approved_company),
    db: Session = Depends(get_db),
):
    job = get_owned_job(db, company, job_id)
    updates = data.model_dump(exclude_unset=True)

    if "employment_type" in updates and updates["employment_type"] not in EMPLOYMENT_TYPES:
        raise ValidationError("Invalid employment type")

    if "image" in updates:
        job.image = data.image.to_record() if data.image else None
        updates.pop("image")

    if "application_deadline" in updates:
        job.application_deadline_at = parse_deadline(updates["application_deadline"])

    for field, value in updates.items():
        if field in REQUIRED_JOB_FIELDS and not value:
            continue
        if field in STRING_LIST_FIELDS and value is None:
            value = []
        setattr(job, field, value)

    db.commit()
    db.refresh(job)
    return {"message": "Job updated successfully", "job": JobOut.model_validate(job)}


@router.delete("/job/{job_id}")
async def delete_job(job_id: str, company: Company = Depends(approved_company), db: Session = Depends(get_db)):
    """Delete a job together with its applications."""
    job = get_owned_job(db, company, job_id)
    db.delete(job)
    db.commit()
    logger.info("Company %s deleted job %s", company.id, job_id)
    return {"message": "Job deleted successfully"}


@router.patch("/job/{job_id}/status")
async def toggle_job_status(
    job_id: str,
    data: JobStatusUpdate,
    company: Company = Depends(approved_company),
    db: Session = Depends(get_db),
):
    if not isinstance(data.is_active, bool):
        raise ValidationError("isActive must be a boolean")
    job = get_owned_job(db, company, job_id)
    job.is_active = data.is_active
    db.commit()
    db.refresh(job)
    return {"message": "Job status updated", "job": JobOut.model_validate(job)}


@router.get("/job/{job_id}/matched-employees")
async def matched_employees(
    job_id: str,
    company: Company = Depends(approved_company),
    db: Session = Depends(get_db),
):
    job = get_owned_job(db, company, job_id)
    matched = employees_for_category(db, job.category)
    return {"matchedEmployees": [EmployeeOut.model_validate(e) for e in matched]}


# ============== Applicants ==============


@router.get("/applicants/{job_id}")
async def list_applicants(
    job_id: str,
    page: int = 1,
    limit: int = 10,
    company: Company = Depends(approved_company),
    db: Session = Depends(get_db),
):
    job = get_owned_job(db, company, job_id)
    query = db.query(Application).filter(Application.job_id == job.id).order_by(Application.created_at.desc())
    applicants, pagination = paginate(query, page, limit)
    return {
        "message": "Applicants retrieved successfully",
        "applicants": [ApplicantOut.model_validate(a) for a in applicants],
        "pagination": pagination,
    }


@router.patch("/applications/{application_id}/status")
async def update_application_status(
    application_id: str,
    data: ApplicationStatusUpdate,
    background_tasks: BackgroundTasks,
    company: Company = Depends(approved_company),
    db: Session = Depends(get_db),
):
    """
    Move an application to a new status.

    The company's message is mandatory: it is stored as the applicant's
    notification and emailed to them.
    """
    application_id = parse_id(application_id, "Application")
    if not data.status or data.status not in APPLICATION_STATUSES:
        raise ValidationError("Invalid status value")
    custom_message = (data.message or "").strip()
    if not custom_message:
        raise ValidationError("A custom message is required")

    application = db.query(Application).filter(Application.id == application_id).first()
    if not application:
        raise NotFoundError("Application not found")
    job = application.job
    if not job:
        raise NotFoundError("Job not found")
    if job.company_id != company.id:
        raise AuthorizationError("Access Denied: You do not own this job")

    application.status = data.status
    notify_application(db, application.id, custom_message, AUDIENCE_EMPLOYEE)
    db.commit()
    db.refresh(application)

    employee = application.employee
    if employee is not None:
        mail_data = {
            "employeeName": employee.name,
            "companyName": company.company_name,
            "jobTitle": job.title,
            "status": data.status,
            "message": custom_message,
        }
        template = "hired" if data.status == "hired" else "application_status"
        mailer.queue_email(background_tasks, employee.email, template, mail_data)

    return {"message": "Application status updated", "application": ApplicationOut.model_validate(application)}


# ============== Employees & work requests ==============


@router.get("/employees")
async def browse_employees(
    category: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    company: Company = Depends(approved_company),
    db: Session = Depends(get_db),
):
    """Directory of active employees, optionally limited to a job preference."""
    if category:
        page, limit = normalize(page, limit)
        matched = employees_for_category(db, category)
        start = (page - 1) * limit
        employees, pagination = matched[start:start + limit], envelope(page, limit, len(matched))
    else:
        query = db.query(Employee).filter(Employee.is_active.is_(True)).order_by(Employee.created_at.desc())
        employees, pagination = paginate(query, page, limit)

    return {
        "message": "Employees retrieved",
        "employees": [EmployeeOut.model_validate(e) for e in employees],
        "pagination": pagination,
    }


@router.post("/work-requests", status_code=status.HTTP_201_CREATED)
async def send_work_request(
    data: WorkRequestCreate,
    background_tasks: BackgroundTasks,
    company: Company = Depends(approved_company),
    db: Session = Depends(get_db),
):
    """Offer work to an employee directly. One request per company and employee."""
    employee_id = parse_id(data.employee_id or "", "employee")

    existing = (
        db.query(WorkRequest)
        .filter(WorkRequest.company_id == company.id, WorkRequest.employee_id == employee_id)
        .first()
    )
    if existing:
        raise ConflictError("You have already sent a work request to this employee")

    employee = db.query(Employee).filter(Employee.id == employee_id).first()
    if not employee:
        raise NotFoundError("Employee not found")

    work = WorkRequest(company_id=company.id, employee_id=employee.id, message=data.message, status="pending")
    db.add(work)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise ConflictError("You have already sent a work request to this employee")

    notify_work_request(db, work.id, "New work request received", AUDIENCE_EMPLOYEE)
    db.commit()
    db.refresh(work)

    mailer.queue_email(
        background_tasks,
        employee.email,
        "job_offer",
        {"employeeName": employee.name, "companyName": company.company_name, "message": data.message},
    )
    return {"message": "Work request sent", "work": WorkRequestOut.model_validate(work)}


@router.get("/work-requests")
async def list_work_requests(company: Company = Depends(approved_company), db: Session = Depends(get_db)):
    requests = (
        db.query(WorkRequest)
        .filter(WorkRequest.company_id == company.id)
        .order_by(WorkRequest.created_at.desc())
        .all()
    )
    return {
        "message": "All work requests retrieved successfully",
        "requests": [WorkRequestOut.model_validate(r) for r in requests],
    }


@router.delete("/work-requests/{request_id}")
async def delete_work_request(
    request_id: str,
    company: Company = Depends(approved_company),
    db: Session = Depends(get_db),
):
    request_id = parse_id(request_id, "request")
    work = db.query(WorkRequest).filter(WorkRequest.id == request_id).first()
    if not work:
        raise NotFoundError("Work request not found")
    if work.company_id != company.id:
        raise AuthorizationError("Access Denied")
    db.delete(work)
    db.commit()
    return {"message": "Work request deleted successfully"}


# ============== Notifications ==============


@router.get("/notifications")
async def list_notifications(
    page: int = 1,
    limit: int = 10,
    company: Company = Depends(notification_access),
    db: Session = Depends(get_db),
):
    """Company, work-request and applicant notifications, newest first."""
    notifications, pagination = paginate(company_feed(db, company.id), page, limit)
    return {
        "message": "Company notifications retrieved successfully",
        "notifications": [NotificationOut.model_validate(n) for n in notifications],
        "pagination": pagination,
    }


@router.patch("/notifications/{notification_id}/read")
async def mark_notification_read(
    notification_id: str,
    company: Company = Depends(notification_access),
    db: Session = Depends(get_db),
):
    note = get_feed_notification(db, company, notification_id)
    note.read = True
    db.commit()
    return {"message": "Notification marked as read"}


@router.delete("/notifications/{notification_id}")
async def delete_notification(
    notification_id: str,
    company: Company = Depends(notification_access),
    db: Session = Depends(get_db),
):
    note = get_feed_notification(db, company, notification_id)
    db.delete(note)
    db.commit()
    return {"message": "Notification deleted successfully"}


# ============== Account lifecycle ==============


@router.patch("/deactivate")
async def deactivate_account(company: Company = Depends(profile_access), db: Session = Depends(get_db)):
    company_lifecycle.deactivate(company)
    return company_response(db, company, "Company deactivated")


@router.patch("/activate")
async def activate_account(company: Company = Depends(profile_access), db: Session = Depends(get_db)):
    company_lifecycle.activate(company)
    return company_response(db, company, "Company activated")


@router.delete("/delete")
async def delete_account(company: Company = Depends(profile_access), db: Session = Depends(get_db)):
    company_lifecycle.soft_delete(company)
    return company_response(db, company, "Company account deleted")
