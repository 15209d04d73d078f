"""
Startup database steps.

Run from the application lifespan after the tables exist:
- backfill_company_status: give legacy company rows a valid approval state
- seed_superadmin: make sure the configured superadmin account exists
"""

import logging

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import get_password_hash
from app.models import Company, User
from app.models.user import ROLE_SUPERADMIN

logger = logging.getLogger("init_db")


def seed_superadmin(db: Session) -> User:
    """
    Create the default superadmin if it is not there yet.

    Idempotent: looks the account up by email and role first.
    """
    existing_admin = (
        db.query(User)
        .filter(User.email == settings.SUPERADMIN_EMAIL, User.role == ROLE_SUPERADMIN)
        .first()
    )
    if existing_admin:
        logger.info("SuperAdmin user already exists.")
        return existing_admin

    admin = User(
        email=settings.SUPERADMIN_EMAIL,
        hashed_password=get_password_hash(settings.SUPERADMIN_PASSWORD),
        role=ROLE_SUPERADMIN,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Default SuperAdmin user seeded successfully.")
    return admin


def backfill_company_status(db: Session) -> int:
    """Fill missing status / isApproved / isActive on existing companies. Returns rows touched."""
    companies = (
        db.query(Company)
        .filter(
            (Company.status.is_(None))
            | (Company.is_approved.is_(None))
            | (Company.is_active.is_(None))
        )
        .all()
    )

    for company in companies:
        if company.is_approved is None:
            company.is_approved = False
        if company.status is None:
            company.status = "approved" if company.is_approved else "pending"
        if company.is_active is None:
            company.is_active = company.status not in ("disabled", "deleted")

    if companies:
        db.commit()
        logger.info("Backfilled approval state on %d companies", len(companies))
    return len(companies)
