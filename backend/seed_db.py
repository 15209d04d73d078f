"""
JobLink Database Seeder

Creates demo data for local development:
- The configured superadmin
- An approved company (Acme Ltd) with one open job
- An employee whose job preferences match that job
- An employer and two housekeepers living in the same sector
- One public flyer
"""

import sys
from datetime import date, timedelta

sys.path.insert(0, ".")

from app.db.session import SessionLocal, engine
from app.db.base import Base
from app.db.init_db import seed_superadmin
from app.models import Company, Employee, Employer, Flyer, Housekeeper, Job
from app.core.security import get_password_hash
from app.services import company_lifecycle

DEMO_LOCATION = {
    "province": "Kigali",
    "district": "Gasabo",
    "sector": "Kimironko",
    "cell": "Bibare",
    "village": "Urugwiro",
}


def seed_database(db=None):
    """Seed the database with demo data. Returns False when it was already seeded."""

    # Create all tables
    Base.metadata.create_all(bind=engine if db is None else db.get_bind())

    owns_session = db is None
    db = db or SessionLocal()

    try:
        seed_superadmin(db)

        # Check if already seeded
        existing_company = db.query(Company).filter(Company.email == "hr@acme.com").first()
        if existing_company:
            print("Database already seeded. Skipping...")
            return False

        print("Seeding database...")

        # 1. Approved company
        company = Company(
            email="hr@acme.com",
            hashed_password=get_password_hash("acme123"),
            company_name="Acme Ltd",
            province="Kigali",
            district="Gasabo",
            about="We build things.",
            documents=[{"url": "https://files.example.com/acme/registration.pdf", "name": "registration.pdf"}],
        )
        company_lifecycle.initialize(company)
        company_lifecycle.approve(company)
        db.add(company)
        db.flush()
        print(f"  Created company: {company.company_name}")

        # 2. Open job
        job = Job(
            company_id=company.id,
            title="Backend Developer",
            description="Build and run our APIs.",
            category="IT",
            employment_type="fulltime",
            province="Kigali",
            district="Gasabo",
            skills=["Python", "SQL"],
            is_active=True,
        )
        db.add(job)
        print(f"  Created job: {job.title}")

        # 3. Employee looking for IT work
        employee = Employee(
            email="jane@example.com",
            hashed_password=get_password_hash("jane123"),
            name="Jane Doe",
            province="Kigali",
            district="Gasabo",
            skills=["Python"],
            job_preferences=["IT"],
            is_active=True,
        )
        db.add(employee)
        print(f"  Created employee: {employee.name}")

        # 4. Household employer and housekeepers
        employer = Employer(
            name="Uwase Family",
            national_id="1199080000000001",
            village_leader_number="0788000001",
            partner_number="0788000002",
            church_name="St. Michel",
            salary_range_min=30000,
            salary_range_max=60000,
            **DEMO_LOCATION,
        )
        db.add(employer)

        for full_name, id_number, with_children in (
            ("Alice Mukamana", "1199570000000001", True),
            ("Grace Uwimana", "1199870000000002", False),
        ):
            db.add(
                Housekeeper(
                    full_name=full_name,
                    id_number=id_number,
                    work_district=DEMO_LOCATION["district"],
                    willing_to_work_with_children=with_children,
                    background={"hasParents": True, "church": "St. Michel"},
                    **DEMO_LOCATION,
                )
            )
        print(f"  Created employer: {employer.name} with 2 nearby housekeepers")

        # 5. Public flyer
        db.add(
            Flyer(
                title="Job fair",
                description="Meet employers from across Kigali.",
                url="https://example.com/job-fair",
                starts_on=date.today(),
                ends_on=date.today() + timedelta(days=14),
                likes=[],
            )
        )

        db.commit()
        print("✅ Database seeded successfully!")
        print("\n📋 Demo logins:")
        print("   - hr@acme.com (password: acme123) [APPROVED COMPANY]")
        print("   - jane@example.com (password: jane123) [EMPLOYEE]")
        return True

    except Exception as e:
        db.rollback()
        print(f"❌ Error seeding database: {e}")
        raise
    finally:
        if owns_session:
            db.close()


if __name__ == "__main__":
    seed_database()
