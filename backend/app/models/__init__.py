from app.models.user import User, Employee, Company
from app.models.job import Job
from app.models.application import Application, WorkRequest
from app.models.notification import Notification, AdminNotification
from app.models.housekeeping import Employer, Housekeeper
from app.models.flyer import Flyer, FlyerComment, FlyerReply

__all__ = [
    "User",
    "Employee",
    "Company",
    "Job",
    "Application",
    "WorkRequest",
    "Notification",
    "AdminNotification",
    "Employer",
    "Housekeeper",
    "Flyer",
    "FlyerComment",
    "FlyerReply",
]
