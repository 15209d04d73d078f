from sqlalchemy import Column, DateTime, ForeignKey, JSON, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, generate_uuid, utcnow

APPLICATION_STATUSES = ("pending", "reviewed", "interview", "hired", "rejected")
APPLIED_VIA = ("normal", "whatsapp", "referral")

WORK_REQUEST_STATUSES = ("pending", "accepted", "rejected")


class Application(Base):
    """
    An employee's application to a job.

    Owned by the employee; its status is driven by the company owning the job.
    """

    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("job_id", "employee_id", name="uq_application_job_employee"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    job_id = Column(String(36), ForeignKey("jobs.id", ondelete="CASCADE"), index=True, nullable=False)
    employee_id = Column(String(36), ForeignKey("employees.id", ondelete="CASCADE"), index=True, nullable=False)

    resume = Column(String, nullable=True)
    skills = Column(JSON, default=list)
    experience = Column(String, nullable=True)
    applied_via = Column(String(20), default="normal")
    status = Column(String(20), default="pending")

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    job = relationship("Job", back_populates="applications")
    employee = relationship("Employee", back_populates="applications")
    notifications = relationship(
        "Notification",
        back_populates="application",
        cascade="all, delete-orphan",
        order_by="Notification.created_at",
    )


class WorkRequest(Base):
    """A company's direct offer to an employee."""

    __tablename__ = "work_requests"
    __table_args__ = (UniqueConstraint("company_id", "employee_id", name="uq_work_request_company_employee"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    company_id = Column(String(36), ForeignKey("companies.id", ondelete="CASCADE"), index=True, nullable=False)
    employee_id = Column(String(36), ForeignKey("employees.id", ondelete="CASCADE"), index=True, nullable=False)
    message = Column(String, nullable=True)
    status = Column(String(20), default="pending")

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    company = relationship("Company", back_populates="work_requests")
    employee = relationship("Employee", back_populates="work_requests")
    notifications = relationship(
        "Notification",
        back_populates="work_request",
        cascade="all, delete-orphan",
        order_by="Notification.created_at",
    )
