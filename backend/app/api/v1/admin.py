"""
Admin API endpoints.

Superadmin login plus the company review workflow: approve, reject,
disable, enable and delete accounts, review submitted profiles, and manage
system notifications. Every route except login requires the superadmin role.
"""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from app.api.deps import AuthContext, parse_id, require_superadmin
from app.api.schemas import (
    AdminNotificationOut,
    CamelModel,
    CompanyOut,
    EmployeeOut,
    account_out,
)
from app.core.errors import NotFoundError, ValidationError
from app.core.security import create_access_token, get_password_hash, verify_password
from app.db.session import get_db
from app.models import AdminNotification, Company, Employee, User
from app.models.user import ROLE_SUPERADMIN
from app.services import company_lifecycle, mailer
from app.services.notifications import notify_company

logger = logging.getLogger("admin")

router = APIRouter()
protected = APIRouter(dependencies=[Depends(require_superadmin)])


# ============== Pydantic Schemas ==============


class AdminLogin(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class PasswordUpdate(CamelModel):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class RejectionRequest(CamelModel):
    rejection_reason: Optional[str] = None


# ============== Helper Functions ==============


def get_company_or_404(db: Session, company_id: str) -> Company:
    company_id = parse_id(company_id, "Company")
    company = db.query(Company).filter(Company.id == company_id).first()
    if not company:
        raise NotFoundError("Company not found")
    return company


def get_admin_notification_or_404(db: Session, notification_id: str) -> AdminNotification:
    if not notification_id:
        raise ValidationError("Notification ID is required")
    notification_id = parse_id(notification_id, "notification")
    note = db.query(AdminNotification).filter(AdminNotification.id == notification_id).first()
    if not note:
        raise NotFoundError("Notification not found")
    return note


def _commit_transition(db: Session, company: Company, message: Optional[str]) -> None:
    if message:
        notify_company(db, company.id, message)
    db.commit()
    db.refresh(company)


# ============== API Endpoints ==============


@router.post("/login")
async def admin_login(data: AdminLogin, db: Session = Depends(get_db)):
    """Superadmin login. Other roles get the generic invalid-credentials answer."""
    if not data.email or not data.password:
        raise ValidationError("Please provide email and password")

    admin = (
        db.query(User)
        .filter(User.email == data.email.strip().lower(), User.role == ROLE_SUPERADMIN)
        .first()
    )
    if not admin or not verify_password(data.password, admin.hashed_password):
        raise ValidationError("Invalid credentials")

    token = create_access_token({"id": admin.id, "role": admin.role})
    return {"message": "Admin login successful", "token": token, "role": admin.role}


@protected.patch("/update-password")
async def update_admin_password(
    data: PasswordUpdate,
    auth: AuthContext = Depends(require_superadmin),
    db: Session = Depends(get_db),
):
    if not data.current_password or not data.new_password:
        raise ValidationError("Please provide current and new passwords")

    admin = db.query(User).filter(User.id == auth.id, User.role == ROLE_SUPERADMIN).first()
    if not admin:
        raise NotFoundError("Admin user not found")
    if not verify_password(data.current_password, admin.hashed_password):
        raise ValidationError("Invalid current password")

    admin.hashed_password = get_password_hash(data.new_password)
    db.commit()
    logger.info("Superadmin %s changed password", admin.id)
    return {"message": "Password updated successfully"}


@protected.get("/employees")
async def list_employees(db: Session = Depends(get_db)):
    employees = db.query(Employee).order_by(Employee.created_at.desc()).all()
    return {
        "message": "Employees retrieved successfully",
        "employees": [EmployeeOut.model_validate(e) for e in employees],
    }


@protected.get("/companies")
async def list_companies(status: Optional[str] = None, db: Session = Depends(get_db)):
    """All companies, soft-deleted ones included. `status` narrows the list."""
    query = db.query(Company)
    if status:
        if status not in company_lifecycle.COMPANY_STATUSES:
            raise ValidationError("Invalid status filter")
        query = query.filter(Company.status == status)
    companies = query.order_by(Company.created_at.desc()).all()
    return {
        "message": "Companies retrieved successfully",
        "companies": [CompanyOut.model_validate(c) for c in companies],
    }


@protected.get("/companies/pending-review")
async def list_companies_pending_review(db: Session = Depends(get_db)):
    companies = (
        db.query(Company)
        .filter(Company.profile_completion_status == company_lifecycle.PENDING_REVIEW)
        .order_by(Company.updated_at.desc())
        .all()
    )
    return {
        "message": "Companies pending review retrieved successfully",
        "companies": [CompanyOut.model_validate(c) for c in companies],
    }


@protected.get("/company/{company_id}")
async def get_company_details(company_id: str, db: Session = Depends(get_db)):
    company = get_company_or_404(db, company_id)
    return {
        "message": "Company details retrieved successfully",
        "company": CompanyOut.model_validate(company),
    }


@protected.patch("/company/{company_id}/approve")
async def approve_company(
    company_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    company = get_company_or_404(db, company_id)
    company_lifecycle.approve(company)
    _commit_transition(db, company, "Your company has been approved. You can now post jobs.")

    mailer.queue_email(background_tasks, company.email, "company_approved", {"companyName": company.company_name})
    return {"message": "Company approved successfully", "company": CompanyOut.model_validate(company)}


@protected.patch("/company/{company_id}/reject")
async def reject_company(
    company_id: str,
    data: RejectionRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    company = get_company_or_404(db, company_id)
    company_lifecycle.reject(company, data.rejection_reason)
    _commit_transition(db, company, f"Your company registration was rejected: {company.rejection_reason}")

    mailer.queue_email(
        background_tasks,
        company.email,
        "company_rejected",
        {"companyName": company.company_name, "reason": company.rejection_reason},
    )
    return {"message": "Company rejected successfully", "company": CompanyOut.model_validate(company)}


@protected.patch("/company/{company_id}/disable")
async def disable_company(company_id: str, db: Session = Depends(get_db)):
    company = get_company_or_404(db, company_id)
    company_lifecycle.disable(company)
    _commit_transition(db, company, "Your company account has been disabled by an administrator.")
    return {"message": "Company disabled successfully", "company": CompanyOut.model_validate(company)}


@protected.patch("/company/{company_id}/enable")
async def enable_company(company_id: str, db: Session = Depends(get_db)):
    company = get_company_or_404(db, company_id)
    company_lifecycle.enable(company)
    _commit_transition(db, company, "Your company account has been enabled.")
    return {"message": "Company enabled successfully", "company": CompanyOut.model_validate(company)}


@protected.delete("/company/{company_id}/delete")
async def delete_company(company_id: str, db: Session = Depends(get_db)):
    company = get_company_or_404(db, company_id)
    company_lifecycle.soft_delete(company)
    _commit_transition(db, company, None)
    return {"message": "Company deleted successfully"}


@protected.patch("/company/{company_id}/approve-profile")
async def approve_company_profile(
    company_id: str,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    company = get_company_or_404(db, company_id)
    company_lifecycle.approve_profile(company)
    _commit_transition(db, company, "Your company profile has been approved.")

    mailer.queue_email(background_tasks, company.email, "company_approved", {"companyName": company.company_name})
    return {"message": "Company profile approved successfully", "company": CompanyOut.model_validate(company)}


@protected.patch("/company/{company_id}/reject-profile")
async def reject_company_profile(
    company_id: str,
    data: RejectionRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    company = get_company_or_404(db, company_id)
    company_lifecycle.reject_profile(company, data.rejection_reason)
    _commit_transition(db, company, f"Your company profile was rejected: {company.rejection_reason}")

    mailer.queue_email(
        background_tasks,
        company.email,
        "company_rejected",
        {"companyName": company.company_name, "reason": company.rejection_reason},
    )
    return {"message": "Company profile rejected successfully", "company": CompanyOut.model_validate(company)}


@protected.get("/users-all")
async def list_all_users(db: Session = Depends(get_db)):
    users = db.query(User).order_by(User.created_at.desc()).all()
    return {"message": "Users retrieved successfully", "users": [account_out(u) for u in users]}


@protected.get("/notifications")
async def list_admin_notifications(db: Session = Depends(get_db)):
    notifications = db.query(AdminNotification).order_by(AdminNotification.created_at.desc()).all()
    return {
        "message": "Admin notifications retrieved successfully",
        "notifications": [AdminNotificationOut.model_validate(n) for n in notifications],
    }


@protected.patch("/notifications/{notification_id}/read")
async def mark_admin_notification_read(notification_id: str, db: Session = Depends(get_db)):
    note = get_admin_notification_or_404(db, notification_id)
    note.read = True
    db.commit()
    return {"message": "Notification marked as read"}


@protected.delete("/notifications/{notification_id}")
async def delete_admin_notification(notification_id: str, db: Session = Depends(get_db)):
    note = get_admin_notification_or_404(db, notification_id)
    db.delete(note)
    db.commit()
    return {"message": "Notification deleted successfully"}


router.include_router(protected)
