"""
In-app notifications.

Writers are best-effort: each one runs inside a SAVEPOINT, and a database
failure there is logged and rolled back without touching the caller's
pending changes. Readers build the per-account notification feed.
"""

import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.models import AdminNotification, Application, Job, Notification, WorkRequest
from app.models.notification import AUDIENCE_COMPANY, AUDIENCE_EMPLOYEE

logger = logging.getLogger("notifications")


def _add_best_effort(db: Session, record, label: str):
    try:
        with db.begin_nested():
            db.add(record)
    except SQLAlchemyError:
        logger.exception("Failed to create %s notification", label)
        return None
    return record


def notify_admin(db: Session, message: str) -> Optional[AdminNotification]:
    return _add_best_effort(db, AdminNotification(message=message, read=False), "admin")


def notify_company(db: Session, company_id: str, message: str) -> Optional[Notification]:
    note = Notification(message=message, audience=AUDIENCE_COMPANY, company_id=company_id)
    return _add_best_effort(db, note, "company")


def notify_application(db: Session, application_id: str, message: str, audience: str) -> Optional[Notification]:
    note = Notification(message=message, audience=audience, application_id=application_id)
    return _add_best_effort(db, note, "application")


def notify_work_request(db: Session, work_request_id: str, message: str, audience: str) -> Optional[Notification]:
    note = Notification(message=message, audience=audience, work_request_id=work_request_id)
    return _add_best_effort(db, note, "work request")


# ============== Feeds ==============


def company_feed(db: Session, company_id: str) -> Query:
    """Notifications a company should see, newest first.

    Covers the company's own notifications plus those on its work requests
    and on applications to its jobs.
    """
    job_ids = select(Job.id).where(Job.company_id == company_id)
    application_ids = select(Application.id).where(Application.job_id.in_(job_ids))
    work_request_ids = select(WorkRequest.id).where(WorkRequest.company_id == company_id)

    return (
        db.query(Notification)
        .filter(Notification.audience == AUDIENCE_COMPANY)
        .filter(
            or_(
                Notification.company_id == company_id,
                Notification.work_request_id.in_(work_request_ids),
                Notification.application_id.in_(application_ids),
            )
        )
        .order_by(Notification.created_at.desc())
    )


def employee_feed(db: Session, employee_id: str) -> Query:
    """Notifications on an employee's applications and work requests, newest first."""
    application_ids = select(Application.id).where(Application.employee_id == employee_id)
    work_request_ids = select(WorkRequest.id).where(WorkRequest.employee_id == employee_id)

    return (
        db.query(Notification)
        .filter(Notification.audience == AUDIENCE_EMPLOYEE)
        .filter(
            or_(
                Notification.application_id.in_(application_ids),
                Notification.work_request_id.in_(work_request_ids),
            )
        )
        .order_by(Notification.created_at.desc())
    )
