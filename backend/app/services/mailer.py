"""
Transactional email.

Plain-text templates keyed by type, delivered over SMTP_SSL. When SMTP
credentials are not configured the message is logged and skipped, so
development and tests never need a mail server.
"""

import logging
import smtplib
from email.message import EmailMessage
from typing import Callable, Dict, Tuple

from fastapi import BackgroundTasks

from app.core.config import settings

logger = logging.getLogger("mailer")


def _employee_registration(data: dict) -> Tuple[str, str]:
    return (
        f"Welcome to {settings.APP_NAME}",
        f"Hello {data.get('name', '')},\n\n"
        f"Your {settings.APP_NAME} account has been created. "
        "Complete your profile to get better job suggestions.\n",
    )


def _company_registration(data: dict) -> Tuple[str, str]:
    return (
        "New company registration pending review",
        f"{data.get('companyName', 'A company')} ({data.get('email', '')}) registered "
        "and is waiting for approval.\n\n"
        f"Review it at {settings.FRONTEND_URL}/admin\n",
    )


def _company_profile_completed(data: dict) -> Tuple[str, str]:
    return (
        "Company profile submitted for review",
        f"{data.get('companyName', 'A company')} completed its profile and is ready for review.\n\n"
        f"Review it at {settings.FRONTEND_URL}/admin\n",
    )


def _company_approved(data: dict) -> Tuple[str, str]:
    return (
        "Your company has been approved",
        f"Hello {data.get('companyName', '')},\n\n"
        "Your company account has been approved. You can now post jobs.\n",
    )


def _company_rejected(data: dict) -> Tuple[str, str]:
    return (
        "Your company registration was not approved",
        f"Hello {data.get('companyName', '')},\n\n"
        f"Your company account was not approved.\nReason: {data.get('reason', '')}\n",
    )


def _application_status(data: dict) -> Tuple[str, str]:
    status_label = str(data.get("status", "")).capitalize()
    return (
        f"Application status updated: {status_label}",
        f"Hello {data.get('employeeName', '')},\n\n"
        f"{data.get('companyName', 'Recruitment Team')} updated your application "
        f"for {data.get('jobTitle', 'a job')}.\n\n{data.get('message', '')}\n",
    )


def _hired(data: dict) -> Tuple[str, str]:
    return (
        f"Congratulations! You have been hired for {data.get('jobTitle', 'the job')}",
        f"Hello {data.get('employeeName', '')},\n\n"
        f"{data.get('companyName', 'Our Company')} has selected you for "
        f"{data.get('jobTitle', 'the job')}.\n\n{data.get('message', '')}\n",
    )


def _job_offer(data: dict) -> Tuple[str, str]:
    return (
        f"New work request from {data.get('companyName', 'a company')}",
        f"Hello {data.get('employeeName', '')},\n\n"
        f"{data.get('companyName', 'A company')} sent you a work request.\n\n"
        f"{data.get('message') or 'Job Opportunity'}\n\n"
        f"Respond at {settings.FRONTEND_URL}/employee/work-requests\n",
    )


TEMPLATES: Dict[str, Callable[[dict], Tuple[str, str]]] = {
    "employee_registration": _employee_registration,
    "company_registration": _company_registration,
    "company_profile_completed": _company_profile_completed,
    "company_approved": _company_approved,
    "company_rejected": _company_rejected,
    "application_status": _application_status,
    "hired": _hired,
    "job_offer": _job_offer,
}


def render(template: str, data: dict) -> Tuple[str, str]:
    """Return (subject, body) for a template type."""
    if template not in TEMPLATES:
        raise ValueError(f"Unknown email template: {template}")
    return TEMPLATES[template](data)


def is_configured() -> bool:
    return bool(settings.SMTP_USER and settings.SMTP_PASS)


def send_email(to_email: str, template: str, data: dict) -> bool:
    """
    Render and deliver one email.

    Returns True when the message was handed to the SMTP server. Delivery
    problems are logged, never raised.
    """
    if not to_email:
        logger.warning("No recipient for %s email, skipping", template)
        return False

    subject, body = render(template, data)

    if not is_configured():
        logger.warning("SMTP credentials missing, skipping %s email to %s", template, to_email)
        return False

    msg = EmailMessage()
    msg["From"] = settings.SMTP_USER
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(body)

    try:
        with smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT) as smtp:
            smtp.login(settings.SMTP_USER, settings.SMTP_PASS)
            smtp.send_message(msg)
    except (smtplib.SMTPException, OSError):
        logger.exception("Failed to send %s email to %s", template, to_email)
        return False

    logger.info("Mail sent to %s (%s)", to_email, template)
    return True


def queue_email(background_tasks: BackgroundTasks, to_email: str, template: str, data: dict) -> None:
    """Schedule send_email to run after the response is sent."""
    background_tasks.add_task(send_email, to_email, template, data)


def admin_recipient() -> str:
    return settings.ADMIN_NOTIFY_EMAIL or settings.SMTP_USER
