from app.services import company_lifecycle
from app.services.mailer import queue_email, send_email
from app.services.notifications import (
    notify_admin,
    notify_company,
    notify_application,
    notify_work_request,
    company_feed,
    employee_feed,
)
from app.services.pagination import paginate

__all__ = [
    "company_lifecycle",
    "queue_email",
    "send_email",
    "notify_admin",
    "notify_company",
    "notify_application",
    "notify_work_request",
    "company_feed",
    "employee_feed",
    "paginate",
]
