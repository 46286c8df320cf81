"""Volunteer recruiter application intake."""

from __future__ import annotations

import logging
import secrets
import string
import time
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.db.models import VolunteerApplication
from sfdsa.email.service import EmailService

logger = logging.getLogger(__name__)

# (form field, column) in the order they are validated
REQUIRED_FIELDS: list[tuple[str, str]] = [
    ("firstName", "first_name"),
    ("lastName", "last_name"),
    ("email", "email"),
    ("phone", "phone"),
    ("motivation", "motivation"),
    ("availability", "availability"),
]
OPTIONAL_FIELDS: list[tuple[str, str]] = [
    ("address", "address"),
    ("city", "city"),
    ("state", "state"),
    ("zipCode", "zip_code"),
    ("experience", "experience"),
]

_ID_ALPHABET = string.ascii_uppercase + string.digits


def generate_application_id() -> str:
    """``VOL-<epoch ms>-<6 upper-case alphanumerics>``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(6))
    return f"VOL-{int(time.time() * 1000)}-{suffix}"


def validate_application(form: dict[str, str | None], agree_to_terms: str | None) -> dict[str, Any]:
    """Map form fields to columns, raising ValueError for the first problem."""
    values: dict[str, Any] = {}
    for field_name, column in REQUIRED_FIELDS:
        value = (form.get(field_name) or "").strip()
        if not value:
            raise ValueError(f"Missing required field: {field_name}")
        values[column] = value
    for field_name, column in OPTIONAL_FIELDS:
        values[column] = (form.get(field_name) or "").strip()

    if agree_to_terms != "true":
        raise ValueError("You must agree to the terms and conditions")
    values["terms_agreement"] = True
    values["email"] = values["email"].lower()
    return values


async def submit_application(
    db: AsyncSession,
    form: dict[str, str | None],
    agree_to_terms: str | None,
    resume_filename: str | None = None,
    ip_address: str | None = None,
) -> VolunteerApplication:
    """Validate and store an application. Only the resume's file name is kept."""
    values = validate_application(form, agree_to_terms)
    application_id = generate_application_id()
    application = VolunteerApplication(
        application_id=application_id,
        resume_filename=f"{application_id}_{resume_filename}" if resume_filename else None,
        ip_address=ip_address,
        status="pending",
        **values,
    )
    db.add(application)
    await db.flush()
    logger.info("Volunteer application %s received", application_id)
    return application


async def notify_application(email_service: EmailService, application: VolunteerApplication) -> None:
    """Send the applicant confirmation and the office notice; failures are logged."""
    try:
        await email_service.send_application_confirmation(
            application.email, application.first_name, application.application_id,
        )
    except Exception:
        logger.warning("Confirmation email for %s failed", application.application_id, exc_info=True)

    try:
        await email_service.send_application_notice({
            "application_id": application.application_id,
            "first_name": application.first_name,
            "last_name": application.last_name,
            "email": application.email,
            "phone": application.phone,
            "availability": application.availability,
            "motivation": application.motivation,
        })
    except Exception:
        logger.warning("Office notice for %s failed", application.application_id, exc_info=True)
