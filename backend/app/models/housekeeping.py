from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, JSON, String, Table
from sqlalchemy.orm import relationship

from app.db.base import Base, generate_uuid, utcnow

EMPLOYER_STATUSES = ("pending", "active", "completed")
HOUSEKEEPER_STATUSES = ("available", "hired", "inactive")

LOCATION_FIELDS = ("province", "district", "sector", "cell", "village")

# Housekeepers an employer has picked (at most two)
employer_housekeepers = Table(
    "employer_housekeepers",
    Base.metadata,
    Column("employer_id", String(36), ForeignKey("employers.id", ondelete="CASCADE"), primary_key=True),
    Column("housekeeper_id", String(36), ForeignKey("housekeepers.id", ondelete="CASCADE"), primary_key=True),
)


class LocationMixin:
    """Administrative location stored flat so matching can filter on it."""

    province = Column(String, nullable=False)
    district = Column(String, nullable=False)
    sector = Column(String, nullable=False)
    cell = Column(String, nullable=False)
    village = Column(String, nullable=False)

    @property
    def location(self) -> dict:
        return {field: getattr(self, field) for field in LOCATION_FIELDS}


class Housekeeper(LocationMixin, Base):
    """Domestic worker looking for a household placement."""

    __tablename__ = "housekeepers"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    full_name = Column(String, nullable=False)
    date_of_birth = Column(DateTime, nullable=True)
    gender = Column(String, nullable=True)
    id_number = Column(String, nullable=False)
    phone_number = Column(String, nullable=True)

    # Work preferences
    work_district = Column(String, nullable=True, index=True)
    work_sector = Column(String, nullable=True)
    willing_to_work_with_children = Column(Boolean, nullable=True)

    # {hasParents, fatherName, fatherPhone, motherName, motherPhone,
    #  hasStudied, educationLevel, church}
    background = Column(JSON, default=dict)

    passport_image = Column(JSON, nullable=True)
    full_body_image = Column(JSON, nullable=True)

    status = Column(String(20), default="available", index=True)
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def work_preferences(self) -> dict:
        return {
            "workDistrict": self.work_district,
            "workSector": self.work_sector,
            "willingToWorkWithChildren": self.willing_to_work_with_children,
        }


class Employer(LocationMixin, Base):
    """Household looking to hire housekeepers."""

    __tablename__ = "employers"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    national_id = Column(String, unique=True, nullable=False)
    village_leader_number = Column(String, nullable=False)
    partner_number = Column(String, nullable=False)
    church_name = Column(String, nullable=False)
    salary_range_min = Column(Float, nullable=False)
    salary_range_max = Column(Float, nullable=False)
    profile_image = Column(JSON, nullable=True)

    status = Column(String(20), default="pending")
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    selected_housekeepers = relationship("Housekeeper", secondary=employer_housekeepers)
