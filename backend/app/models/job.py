from sqlalchemy import Boolean, Column, DateTime, ForeignKey, JSON, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base, generate_uuid, utcnow

EMPLOYMENT_TYPES = ("fulltime", "part-time", "internship")


class Job(Base):
    """A job posted by an approved company."""

    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    company_id = Column(String(36), ForeignKey("companies.id", ondelete="CASCADE"), index=True, nullable=False)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String, index=True, nullable=False)
    employment_type = Column(String(20), nullable=False)  # fulltime | part-time | internship
    province = Column(String, nullable=True)
    district = Column(String, nullable=True)
    experience = Column(String, nullable=True)
    salary = Column(String, nullable=True)

    skills = Column(JSON, default=list)
    responsibilities = Column(JSON, default=list)
    benefits = Column(JSON, default=list)
    other_benefits = Column(JSON, default=list)
    image = Column(JSON, nullable=True)

    application_deadline = Column(String, nullable=True)  # as submitted by the client
    application_deadline_at = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    company = relationship("Company", back_populates="jobs")
    applications = relationship("Application", back_populates="job", cascade="all, delete-orphan")
