"""
Shared response schemas.

Every model serializes with camelCase keys (companyName, isApproved, ...)
and reads straight from ORM objects. Request bodies live next to the
routes that accept them.
"""

import math
import re
from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

EMAIL_PATTERN = r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$"


def normalize_email(value: str) -> str:
    """Validate email format and lower-case it."""
    value = (value or "").strip()
    if not re.match(EMAIL_PATTERN, value):
        raise ValueError("Invalid email format")
    return value.lower()


def _empty_if_none(value):
    return [] if value is None else value


def as_string_list(value):
    """Coerce a single string or a mixed list into a list of strings. None stays None."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        return [value] if value else []
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str)]
    return []


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============== File metadata ==============


class FileInfo(BaseModel):
    """Metadata of a file already uploaded to storage."""

    model_config = ConfigDict(extra="allow")

    url: str
    public_id: Optional[str] = None
    format: Optional[str] = None
    size: Optional[int] = None
    name: Optional[str] = None
    type: Optional[str] = None
    time: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class TeamMember(CamelModel):
    position: str
    phone_number: str

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


# ============== Accounts ==============


class UserOut(CamelModel):
    id: str
    email: str
    role: str
    image: Optional[str] = None
    is_active: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EmployeeOut(UserOut):
    name: str
    date_of_birth: Optional[datetime] = None
    phone_number: Optional[str] = None
    province: Optional[str] = None
    district: Optional[str] = None
    gender: Optional[str] = None
    about: Optional[str] = None
    experience: Optional[str] = None
    education: Optional[str] = None
    skills: List[str] = []
    job_preferences: List[str] = []
    documents: List[Dict[str, Any]] = []
    profile_image: Optional[Dict[str, Any]] = None
    deleted_at: Optional[datetime] = None

    @field_validator("skills", "job_preferences", "documents", mode="before")
    @classmethod
    def empty_lists(cls, v):
        return _empty_if_none(v)


class CompanySummary(CamelModel):
    id: str
    company_name: str
    email: Optional[str] = None
    logo: Optional[Dict[str, Any]] = None


class CompanyOut(UserOut):
    company_name: str
    province: Optional[str] = None
    district: Optional[str] = None
    phone_number: Optional[str] = None
    website: Optional[str] = None
    about: Optional[str] = None
    logo: Optional[Dict[str, Any]] = None
    documents: List[Dict[str, Any]] = []
    team_members: List[Dict[str, Any]] = []

    is_approved: bool = False
    status: Optional[str] = None
    rejection_reason: Optional[str] = None
    rejected_at: Optional[datetime] = None
    disabled_at: Optional[datetime] = None
    disabled_by: Optional[str] = None
    deleted_at: Optional[datetime] = None
    profile_completion_status: Optional[str] = None
    profile_completed_at: Optional[datetime] = None

    @field_validator("documents", "team_members", mode="before")
    @classmethod
    def empty_lists(cls, v):
        return _empty_if_none(v)


# ============== Jobs & applications ==============


class NotificationOut(CamelModel):
    id: str
    message: str
    read: bool = False
    audience: Optional[str] = None
    created_at: Optional[datetime] = None


class AdminNotificationOut(CamelModel):
    id: str
    message: str
    read: bool = False
    created_at: Optional[datetime] = None


class JobOut(CamelModel):
    id: str
    company_id: str
    title: str
    description: str
    category: str
    employment_type: str
    province: Optional[str] = None
    district: Optional[str] = None
    experience: Optional[str] = None
    salary: Optional[str] = None
    skills: List[str] = []
    responsibilities: List[str] = []
    benefits: List[str] = []
    other_benefits: List[str] = []
    image: Optional[Dict[str, Any]] = None
    application_deadline: Optional[str] = None
    application_deadline_at: Optional[datetime] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    company: Optional[CompanySummary] = None

    @field_validator("skills", "responsibilities", "benefits", "other_benefits", mode="before")
    @classmethod
    def empty_lists(cls, v):
        return _empty_if_none(v)


class ApplicationOut(CamelModel):
    id: str
    job_id: str
    employee_id: str
    resume: Optional[str] = None
    skills: List[str] = []
    experience: Optional[str] = None
    applied_via: str = "normal"
    status: str = "pending"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    notifications: List[NotificationOut] = []

    @field_validator("skills", mode="before")
    @classmethod
    def empty_lists(cls, v):
        return _empty_if_none(v)


class EmployeeApplicationOut(ApplicationOut):
    """An application as its employee sees it, with the job attached."""

    job: Optional[JobOut] = None


class ApplicantOut(ApplicationOut):
    """An application as the hiring company sees it, with the applicant attached."""

    employee: Optional[EmployeeOut] = None


class WorkRequestOut(CamelModel):
    id: str
    company_id: str
    employee_id: str
    message: Optional[str] = None
    status: str = "pending"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    notifications: List[NotificationOut] = []
    company: Optional[CompanySummary] = None
    employee: Optional[EmployeeOut] = None


# ============== Housekeeping ==============


class HousekeeperOut(CamelModel):
    id: str
    full_name: str
    date_of_birth: Optional[datetime] = None
    gender: Optional[str] = None
    id_number: str
    phone_number: Optional[str] = None
    location: Dict[str, Optional[str]]
    work_preferences: Dict[str, Any]
    background: Dict[str, Any] = {}
    passport_image: Optional[Dict[str, Any]] = None
    full_body_image: Optional[Dict[str, Any]] = None
    status: str = "available"
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("background", mode="before")
    @classmethod
    def background_dict(cls, v):
        return v or {}


class EmployerOut(CamelModel):
    id: str
    name: str
    email: Optional[str] = None
    national_id: str
    location: Dict[str, Optional[str]]
    village_leader_number: str
    partner_number: str
    church_name: str
    salary_range_min: float
    salary_range_max: float
    profile_image: Optional[Dict[str, Any]] = None
    status: str = "pending"
    is_active: bool = True
    selected_housekeepers: List[HousekeeperOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============== Flyers ==============


class UserBrief(CamelModel):
    id: str
    email: str
    role: str


class ReplyOut(CamelModel):
    id: str
    user_id: Optional[str] = None
    comment: str
    created_at: Optional[datetime] = None
    user: Optional[UserBrief] = None


class CommentOut(ReplyOut):
    replies: List[ReplyOut] = []


class FlyerOut(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    url: str
    image: Optional[Dict[str, Any]] = None
    starts_on: Optional[date] = Field(default=None, alias="from")
    ends_on: Optional[date] = Field(default=None, alias="end")
    likes: List[str] = []
    comments: List[CommentOut] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Derived from ends_on
    status: str = "end"
    remaining_days: int = 0

    @field_validator("likes", mode="before")
    @classmethod
    def likes_list(cls, v):
        return _empty_if_none(v)

    @model_validator(mode="after")
    def derive_status(self):
        self.remaining_days = remaining_days(self.ends_on)
        self.status = "active" if self.remaining_days > 0 else "end"
        return self


def remaining_days(ends_on: Optional[date], now: Optional[datetime] = None) -> int:
    """Whole days until midnight UTC of `ends_on`, rounded up, never negative."""
    if ends_on is None:
        return 0
    now = now or datetime.now(timezone.utc)
    end_at = datetime.combine(ends_on, time.min, tzinfo=timezone.utc)
    return max(math.ceil((end_at - now).total_seconds() / 86400), 0)


def account_out(user) -> UserOut:
    """Serialize an account with the fields of its role."""
    if user.role == "employee":
        return EmployeeOut.model_validate(user)
    if user.role == "company":
        return CompanyOut.model_validate(user)
    return UserOut.model_validate(user)


class LocationIn(CamelModel):
    """Administrative location as submitted; every level is optional on input."""

    province: Optional[str] = None
    district: Optional[str] = None
    sector: Optional[str] = None
    cell: Optional[str] = None
    village: Optional[str] = None
