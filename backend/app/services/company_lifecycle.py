"""
Company account lifecycle.

Every change to a company's approval state goes through this module so the
account invariants hold after each transition:

- status == "approved"            => is_approved
- status in ("disabled", "deleted") => not is_active
- profile_completion_status == "complete" only via approval
- status == "rejected"            => a rejection reason was supplied

Functions mutate the ORM object in place; callers own the commit.
"""

from __future__ import annotations

import logging
from typing import Optional

from app.core.errors import InvalidTransition, ValidationError
from app.db.base import utcnow
from app.models import Company

logger = logging.getLogger("company_lifecycle")

# Account status
PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"
DISABLED = "disabled"
DELETED = "deleted"

COMPANY_STATUSES = (PENDING, APPROVED, REJECTED, DISABLED, DELETED)

# Profile completion status
INCOMPLETE = "incomplete"
PENDING_REVIEW = "pending_review"
COMPLETE = "complete"

PROFILE_STATUSES = (INCOMPLETE, PENDING_REVIEW, COMPLETE)

# Who switched a disabled account off
DISABLED_BY_ADMIN = "admin"
DISABLED_BY_COMPANY = "company"

# Admin action -> statuses it may start from
ALLOWED_SOURCES = {
    "approve": {PENDING, REJECTED, APPROVED},
    "reject": {PENDING, REJECTED},
    "disable": {PENDING, APPROVED, REJECTED, DISABLED},
    "enable": {DISABLED},
    "delete": set(COMPANY_STATUSES),
}

# Statuses that can never pass the admissibility check
BLOCKED_STATUSES = {REJECTED, DISABLED, DELETED}


def _check_transition(company: Company, action: str) -> None:
    current = company.status or PENDING
    if current not in ALLOWED_SOURCES[action]:
        raise InvalidTransition(f"Cannot {action} a company with status '{current}'")


def initialize(company: Company) -> Company:
    """Force the registration state regardless of what the caller supplied."""
    company.is_approved = False
    company.status = PENDING
    company.is_active = True
    company.profile_completion_status = INCOMPLETE
    return company


def approve(company: Company) -> Company:
    _check_transition(company, "approve")
    now = utcnow()
    company.is_approved = True
    company.status = APPROVED
    company.is_active = True
    company.profile_completion_status = COMPLETE
    company.profile_completed_at = now
    company.rejection_reason = None
    company.rejected_at = None
    logger.info("Company %s approved", company.id)
    return company


def reject(company: Company, reason: Optional[str]) -> Company:
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("Rejection reason is required")
    _check_transition(company, "reject")
    company.is_approved = False
    company.status = REJECTED
    company.is_active = False
    company.rejection_reason = reason
    company.rejected_at = utcnow()
    company.profile_completion_status = INCOMPLETE
    logger.info("Company %s rejected: %s", company.id, reason)
    return company


def disable(company: Company) -> Company:
    _check_transition(company, "disable")
    company.is_active = False
    company.status = DISABLED
    company.disabled_at = utcnow()
    company.disabled_by = DISABLED_BY_ADMIN
    logger.info("Company %s disabled", company.id)
    return company


def enable(company: Company) -> Company:
    """Restore a disabled company to approved or pending, depending on is_approved."""
    _check_transition(company, "enable")
    company.is_active = True
    company.disabled_at = None
    company.disabled_by = None
    if company.is_approved:
        company.status = APPROVED
        company.profile_completion_status = COMPLETE
    else:
        company.status = PENDING
    logger.info("Company %s enabled as %s", company.id, company.status)
    return company


def soft_delete(company: Company) -> Company:
    _check_transition(company, "delete")
    company.status = DELETED
    company.is_active = False
    if company.deleted_at is None:
        company.deleted_at = utcnow()
    logger.info("Company %s deleted", company.id)
    return company


def approve_profile(company: Company) -> Company:
    """Admin accepts a submitted profile. Same effect as approving the account."""
    return approve(company)


def reject_profile(company: Company, reason: Optional[str]) -> Company:
    """Admin sends a submitted profile back. Same effect as rejecting the account."""
    return reject(company, reason)


# ============== Self-service ==============


def deactivate(company: Company) -> Company:
    """The company pauses its own account. An admin disable stays an admin disable."""
    if company.status == DELETED:
        raise InvalidTransition("Cannot deactivate a deleted company")
    if company.status != DISABLED:
        company.disabled_by = DISABLED_BY_COMPANY
        company.disabled_at = utcnow()
    company.is_active = False
    company.status = DISABLED
    return company


def activate(company: Company) -> Company:
    """
    The company resumes its own account.

    Only a pause the company made itself can be lifted here; an account an
    admin disabled stays off until the admin enables it.
    """
    if company.status == DELETED:
        raise InvalidTransition("Cannot activate a deleted company")
    if company.status == DISABLED and company.disabled_by != DISABLED_BY_COMPANY:
        raise InvalidTransition("Company account was disabled by an administrator")
    if company.is_approved:
        company.status = APPROVED
    elif company.rejection_reason:
        company.status = REJECTED
    else:
        company.status = PENDING
    company.is_active = True
    company.disabled_at = None
    company.disabled_by = None
    return company


# ============== Profile completion ==============


def is_profile_ready_for_review(about: Optional[str], documents: Optional[list]) -> bool:
    has_about = isinstance(about, str) and len(about.strip()) > 0
    has_docs = isinstance(documents, list) and len(documents) > 0
    return has_about and has_docs


def recompute_profile_completion(company: Company) -> str:
    """
    Derive profile_completion_status from the current profile.

    Returns the new status. Only an approved account is ever complete; a
    filled-in profile alone is pending_review.
    """
    if company.is_approved and company.status == APPROVED:
        next_status = COMPLETE
    elif is_profile_ready_for_review(company.about, company.documents):
        next_status = PENDING_REVIEW
    else:
        next_status = INCOMPLETE

    if company.profile_completion_status != next_status:
        company.profile_completion_status = next_status
        if next_status == COMPLETE:
            company.profile_completed_at = utcnow()
    return next_status


# ============== Admissibility ==============


def is_admissible(company: Optional[Company]) -> bool:
    """True when the company may use approval-gated routes."""
    if company is None:
        return False
    return bool(
        company.is_approved
        and company.is_active
        and company.status not in BLOCKED_STATUSES
    )


def status_notice(company: Company) -> Optional[str]:
    """Banner text describing where the company stands in the review process."""
    if company.status == APPROVED and company.profile_completion_status == COMPLETE:
        return "Your company is approved. You can now post jobs."
    if company.profile_completion_status == COMPLETE and company.status == PENDING:
        return "Congratulations! You have completed your profile. Please wait for admin approval."
    if company.profile_completion_status == PENDING_REVIEW:
        return "Your profile has been submitted and is pending admin review."
    if company.profile_completion_status == INCOMPLETE:
        return "Complete your profile to unlock job posting and other features."
    return None
