"""
Matching helpers.

- Employees <-> jobs by job preference (category) and title keywords
- Housekeepers <-> employers by administrative location
"""

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Query, Session

from app.models import Employee, Employer, Housekeeper, Job


def employees_for_category(db: Session, category: Optional[str]) -> List[Employee]:
    """Active employees whose job preferences include `category`."""
    if not category:
        return []
    employees = (
        db.query(Employee)
        .filter(Employee.is_active.is_(True))
        .order_by(Employee.created_at.desc())
        .all()
    )
    wanted = category.strip().lower()
    return [
        employee
        for employee in employees
        if any(str(pref).strip().lower() == wanted for pref in (employee.job_preferences or []))
    ]


def open_jobs(db: Session, category: Optional[str] = None) -> Query:
    query = db.query(Job).filter(Job.is_active.is_(True))
    if category:
        query = query.filter(Job.category == category)
    return query.order_by(Job.created_at.desc())


def suggested_jobs(db: Session, employee: Employee, category: Optional[str] = None) -> Query:
    """
    Open jobs matching an employee's preferences.

    A job matches when its category is one of the preferences or its title
    contains one of them. Without preferences this is the open job list.
    """
    query = open_jobs(db, category)
    preferences = [p for p in (employee.job_preferences or []) if isinstance(p, str) and p.strip()]
    if preferences:
        query = query.filter(
            or_(
                Job.category.in_(preferences),
                *[Job.title.ilike(f"%{pref.strip()}%") for pref in preferences],
            )
        )
    return query


def matching_housekeepers(
    db: Session,
    employer: Employer,
    salary_range: bool = False,
    work_with_children: bool = False,
) -> List[Housekeeper]:
    """
    Available housekeepers in the employer's province, district and sector.

    salary_range narrows to housekeepers who prefer to work in the employer's
    district; work_with_children keeps only those willing to.
    """
    query = db.query(Housekeeper).filter(
        Housekeeper.is_active.is_(True),
        Housekeeper.status == "available",
        Housekeeper.province == employer.province,
        Housekeeper.district == employer.district,
        Housekeeper.sector == employer.sector,
    )
    if salary_range:
        query = query.filter(Housekeeper.work_district == employer.district)
    if work_with_children:
        query = query.filter(Housekeeper.willing_to_work_with_children.is_(True))
    return query.order_by(Housekeeper.created_at.desc()).all()
