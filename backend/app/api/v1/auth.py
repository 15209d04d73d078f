"""
Authentication API endpoints.

Handles employee / company registration, login with JWT token generation
and the current-account lookup.
"""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, status
from pydantic import field_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import AuthContext, get_auth_context
from app.api.schemas import (
    CamelModel,
    CompanyOut,
    EmployeeOut,
    UserOut,
    normalize_email,
)
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.core.security import create_access_token, get_password_hash, verify_password
from app.db.session import get_db
from app.models import Company, Employee, User
from app.models.user import ROLE_COMPANY, ROLE_EMPLOYEE, ROLE_SUPERADMIN
from app.services import company_lifecycle, mailer
from app.services.notifications import notify_admin

logger = logging.getLogger("auth")

router = APIRouter()


# ============== Pydantic Schemas ==============


class _EmailField(CamelModel):
    email: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        """Validate email format."""
        if v is None or v == "":
            return None
        return normalize_email(v)


class EmployeeRegister(_EmailField):
    """Schema for employee registration."""

    name: Optional[str] = None
    password: Optional[str] = None
    phone_number: Optional[str] = None
    province: Optional[str] = None
    district: Optional[str] = None
    gender: Optional[str] = None


class CompanyRegister(_EmailField):
    """Schema for company registration. Approval fields are not accepted."""

    company_name: Optional[str] = None
    password: Optional[str] = None
    phone_number: Optional[str] = None
    province: Optional[str] = None
    district: Optional[str] = None
    website: Optional[str] = None


class LoginRequest(CamelModel):
    """Login body. The email is only normalized so every unknown address fails alike."""

    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("email")
    @classmethod
    def clean_email(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else v


# ============== Helper Functions ==============


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get an account by email address."""
    return db.query(User).filter(User.email == email).first()


def authenticate_user(db: Session, email: Optional[str], password: Optional[str]) -> Optional[User]:
    """Authenticate an account by email and password."""
    if not email or not password:
        raise ValidationError("Please provide email and password")
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def token_claims(db: Session, user: User) -> Optional[dict]:
    """
    Build the session claims for an account.

    Companies carry isApproved; a company account whose profile row is
    missing gets no token at all.
    """
    claims = {"id": user.id, "role": user.role}
    if user.role == ROLE_COMPANY:
        company = db.query(Company).filter(Company.id == user.id).first()
        if company is None:
            return None
        claims["isApproved"] = bool(company.is_approved)
    return claims


def save_new_account(db: Session, account: User) -> None:
    """Insert a new account; the unique email index settles concurrent sign-ups."""
    db.add(account)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email already registered")


# ============== API Endpoints ==============


@router.post("/register/employee", status_code=status.HTTP_201_CREATED)
async def register_employee(
    data: EmployeeRegister,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """Register a job seeker."""
    if not data.name or not data.email or not data.password:
        raise ValidationError("Please provide name, email, and password")

    if get_user_by_email(db, data.email):
        raise ConflictError("Email already registered")

    employee = Employee(
        email=data.email,
        hashed_password=get_password_hash(data.password),
        name=data.name,
        phone_number=data.phone_number,
        province=data.province,
        district=data.district,
        gender=data.gender,
        is_active=True,
    )
    save_new_account(db, employee)

    notify_admin(db, f"New employee registered: {employee.name} ({employee.email})")
    db.commit()

    mailer.queue_email(background_tasks, employee.email, "employee_registration", {"name": employee.name})
    logger.info("Employee registered: %s", employee.email)

    return {
        "message": "Employee registered successfully",
        "employee": EmployeeOut.model_validate(employee),
    }


@router.post("/register/company", status_code=status.HTTP_201_CREATED)
async def register_company(
    data: CompanyRegister,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    """
    Register a company.

    The account always starts pending and unapproved, whatever the client
    sends; an admin has to approve it before it can post jobs.
    """
    if not data.company_name or not data.email or not data.password:
        raise ValidationError("Please provide company name, email, and password")

    if get_user_by_email(db, data.email):
        raise ConflictError("Email already registered")

    company = Company(
        email=data.email,
        hashed_password=get_password_hash(data.password),
        company_name=data.company_name,
        phone_number=data.phone_number,
        province=data.province,
        district=data.district,
        website=data.website,
    )
    company_lifecycle.initialize(company)
    save_new_account(db, company)

    notify_admin(db, f"New company registered: {company.company_name} ({company.email})")
    db.commit()

    mailer.queue_email(
        background_tasks,
        mailer.admin_recipient(),
        "company_registration",
        {"companyName": company.company_name, "email": company.email},
    )
    logger.info("Company registered: %s", company.email)

    return {
        "message": "Company registered successfully. Awaiting admin approval.",
        "company": CompanyOut.model_validate(company),
    }


@router.post("/login")
async def login(data: LoginRequest, db: Session = Depends(get_db)):
    """
    Login and get a JWT session token.

    Unknown email and wrong password produce the same response.
    """
    user = authenticate_user(db, data.email, data.password)
    if not user:
        raise ValidationError("Invalid credentials")

    claims = token_claims(db, user)
    if claims is None:
        logger.warning("Company account %s has no company profile", user.id)
        raise ValidationError("Invalid credentials")

    response = {
        "message": "Login successful",
        "token": create_access_token(claims),
        "role": user.role,
    }
    if user.role == ROLE_COMPANY:
        response["isApproved"] = claims["isApproved"]
    return response


@router.get("/me")
async def get_me(
    auth: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """Current account, without its password hash."""
    if auth.role == ROLE_EMPLOYEE:
        employee = db.query(Employee).filter(Employee.id == auth.id).first()
        if not employee:
            raise NotFoundError("Employee profile not found")
        return {"user": EmployeeOut.model_validate(employee)}

    if auth.role == ROLE_COMPANY:
        company = db.query(Company).filter(Company.id == auth.id).first()
        if not company:
            raise NotFoundError("Company profile not found")
        return {"user": CompanyOut.model_validate(company)}

    if auth.role == ROLE_SUPERADMIN:
        admin = db.query(User).filter(User.id == auth.id).first()
        if not admin:
            raise NotFoundError("User not found")
        return {"user": UserOut.model_validate(admin)}

    raise ValidationError("Invalid role")
