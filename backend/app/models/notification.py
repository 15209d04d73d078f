from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from app.db.base import Base, generate_uuid, utcnow

AUDIENCE_EMPLOYEE = "employee"
AUDIENCE_COMPANY = "company"


class Notification(Base):
    """
    Notification sub-record attached to exactly one owner.

    Owners: a company, an application or a work request. The audience says
    which side of the record is meant to read it.
    """

    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    message = Column(String, nullable=False)
    read = Column(Boolean, default=False)
    audience = Column(String(20), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, index=True)

    company_id = Column(String(36), ForeignKey("companies.id", ondelete="CASCADE"), nullable=True, index=True)
    application_id = Column(String(36), ForeignKey("applications.id", ondelete="CASCADE"), nullable=True, index=True)
    work_request_id = Column(String(36), ForeignKey("work_requests.id", ondelete="CASCADE"), nullable=True, index=True)

    company = relationship("Company", back_populates="notifications")
    application = relationship("Application", back_populates="notifications")
    work_request = relationship("WorkRequest", back_populates="notifications")


class AdminNotification(Base):
    """System notification for the superadmin dashboard."""

    __tablename__ = "admin_notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    message = Column(String, nullable=False)
    read = Column(Boolean, default=False)
    created_at = Column(DateTime, default=utcnow, index=True)
