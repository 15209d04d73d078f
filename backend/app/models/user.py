from sqlalchemy import Boolean, Column, DateTime, ForeignKey, JSON, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base, generate_uuid, utcnow

# Account roles
ROLE_EMPLOYEE = "employee"
ROLE_COMPANY = "company"
ROLE_SUPERADMIN = "superadmin"

ROLES = (ROLE_EMPLOYEE, ROLE_COMPANY, ROLE_SUPERADMIN)


class User(Base):
    """Base account used for authentication and authorization."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String(20), nullable=False, index=True)  # 'employee' | 'company' | 'superadmin'
    image = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    __mapper_args__ = {
        "polymorphic_on": role,
        "polymorphic_identity": ROLE_SUPERADMIN,
    }


class Employee(User):
    """Job seeker profile."""

    __tablename__ = "employees"

    id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    name = Column(String, nullable=False)
    date_of_birth = Column(DateTime, nullable=True)
    phone_number = Column(String, nullable=True)
    province = Column(String, nullable=True)
    district = Column(String, nullable=True)
    gender = Column(String, nullable=True)
    about = Column(Text, nullable=True)
    experience = Column(String, nullable=True)
    education = Column(String, nullable=True)

    # Lists stored as JSON, e.g. ["Driver", "Cook"]
    skills = Column(JSON, default=list)
    job_preferences = Column(JSON, default=list)

    # File info objects: {url, public_id, format, size, name, type, time}
    documents = Column(JSON, default=list)
    profile_image = Column(JSON, nullable=True)

    deleted_at = Column(DateTime, nullable=True)

    applications = relationship("Application", back_populates="employee", cascade="all, delete-orphan")
    work_requests = relationship("WorkRequest", back_populates="employee", cascade="all, delete-orphan")

    __mapper_args__ = {"polymorphic_identity": ROLE_EMPLOYEE}


class Company(User):
    """
    Company account with the approval / activation / profile-review state.

    status:                    pending | approved | rejected | disabled | deleted
    profile_completion_status: incomplete | pending_review | complete
    """

    __tablename__ = "companies"

    id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    company_name = Column(String, nullable=False)
    province = Column(String, nullable=True)
    district = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    website = Column(String, nullable=True)
    about = Column(Text, nullable=True)

    logo = Column(JSON, nullable=True)
    documents = Column(JSON, default=list)
    team_members = Column(JSON, default=list)  # [{"position", "phoneNumber"}]

    # Approval state
    is_approved = Column(Boolean, default=False)
    status = Column(String(20), default="pending", index=True)
    rejection_reason = Column(String, nullable=True)
    rejected_at = Column(DateTime, nullable=True)
    disabled_at = Column(DateTime, nullable=True)
    disabled_by = Column(String(20), nullable=True)  # "admin" | "company"
    deleted_at = Column(DateTime, nullable=True)

    # Profile review
    profile_completion_status = Column(String(20), default="incomplete", index=True)
    profile_completed_at = Column(DateTime, nullable=True)

    jobs = relationship("Job", back_populates="company", cascade="all, delete-orphan")
    work_requests = relationship("WorkRequest", back_populates="company", cascade="all, delete-orphan")
    notifications = relationship(
        "Notification",
        back_populates="company",
        cascade="all, delete-orphan",
        order_by="Notification.created_at",
    )

    __mapper_args__ = {"polymorphic_identity": ROLE_COMPANY}
