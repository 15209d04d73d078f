"""
Authorization gate.

FastAPI dependencies that turn the bearer token into an AuthContext and then
check role membership and, for companies, the account state loaded fresh
from the database on every request. Token claims are never trusted for
account state: a company disabled after login is refused on its next call.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core.errors import (
    AuthenticationError,
    AuthorizationError,
    InvalidTokenError,
    NotFoundError,
    ValidationError,
)
from app.core.security import decode_access_token
from app.db.session import get_db
from app.models import Company, Employee
from app.models.user import ROLE_COMPANY, ROLE_EMPLOYEE, ROLE_SUPERADMIN
from app.services import company_lifecycle

# auto_error=False so a missing header maps to our own 401 body
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Identity carried by a verified session token."""

    id: str
    role: str
    is_approved: Optional[bool] = None


def get_auth_context(token: Optional[str] = Depends(oauth2_scheme)) -> AuthContext:
    if not token:
        raise AuthenticationError("Access Denied: No token provided")

    payload = decode_access_token(token)
    if payload is None:
        raise InvalidTokenError("Access Denied: Invalid token")

    return AuthContext(
        id=str(payload["id"]),
        role=str(payload["role"]),
        is_approved=payload.get("isApproved"),
    )


def company_denial(
    company: Optional[Company],
    require_approval: bool = True,
    allow_disabled: bool = False,
) -> Optional[str]:
    """Reason a company may not proceed, or None when it may."""
    if company is None:
        return "Access Denied: Company not found"
    if company.status == company_lifecycle.DELETED:
        return "Access Denied: Company account has been deleted"
    if not allow_disabled and (company.status == company_lifecycle.DISABLED or not company.is_active):
        if company.status == company_lifecycle.REJECTED:
            return "Access Denied: Company registration was rejected"
        return "Access Denied: Company account is disabled"
    if require_approval and not company_lifecycle.is_admissible(company):
        if company.status == company_lifecycle.REJECTED:
            return "Access Denied: Company registration was rejected"
        return "Access Denied: Company not approved by admin"
    return None


def authorize_roles(*allowed_roles: str):
    """
    Dependency factory: the caller's role must be one of `allowed_roles`.

    A company additionally has to be approved, active and not rejected,
    disabled or deleted.
    """

    def dependency(
        auth: AuthContext = Depends(get_auth_context),
        db: Session = Depends(get_db),
    ) -> AuthContext:
        if auth.role not in allowed_roles:
            raise AuthorizationError("Access Denied: Insufficient permissions")

        if auth.role == ROLE_COMPANY:
            company = db.query(Company).filter(Company.id == auth.id).first()
            reason = company_denial(company, require_approval=True)
            if reason:
                raise AuthorizationError(reason)

        return auth

    return dependency


def authorize_company(require_approval: bool = True, allow_disabled: bool = False):
    """
    Dependency factory for company-only routes. Yields the loaded Company.

    require_approval=False lets a pending company finish its profile;
    allow_disabled=True lets a paused company read its profile and
    reactivate itself. A deleted company is always refused.
    """

    def dependency(
        auth: AuthContext = Depends(get_auth_context),
        db: Session = Depends(get_db),
    ) -> Company:
        if auth.role != ROLE_COMPANY:
            raise AuthorizationError("Access Denied: Insufficient permissions")

        company = db.query(Company).filter(Company.id == auth.id).first()
        reason = company_denial(company, require_approval=require_approval, allow_disabled=allow_disabled)
        if reason:
            raise AuthorizationError(reason)
        return company

    return dependency


def current_employee(
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
) -> Employee:
    if auth.role != ROLE_EMPLOYEE:
        raise AuthorizationError("Access Denied: Insufficient permissions")

    employee = db.query(Employee).filter(Employee.id == auth.id).first()
    if employee is None:
        raise NotFoundError("Employee not found")
    return employee


def ensure_employee_active(employee: Employee = Depends(current_employee)) -> Employee:
    if not employee.is_active:
        raise AuthorizationError("Access Denied: Your account is deactivated")
    return employee


require_superadmin = authorize_roles(ROLE_SUPERADMIN)


def parse_id(value: str, label: str) -> str:
    """Validate a path id, raising 400 "Invalid <label> ID" when it is not a uuid."""
    try:
        return str(uuid.UUID(str(value)))
    except ValueError:
        raise ValidationError(f"Invalid {label} ID")
