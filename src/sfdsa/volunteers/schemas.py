"""Response schemas for volunteer applications."""

from __future__ import annotations

from datetime import datetime

from sfdsa.schemas import CamelModel


class VolunteerApplicationResponse(CamelModel):
    application_id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    address: str
    city: str
    state: str
    zip_code: str
    experience: str
    motivation: str
    availability: str
    terms_agreement: bool
    resume_filename: str | None = None
    status: str
    created_at: datetime


class SubmitApplicationResponse(CamelModel):
    success: bool = True
    message: str = "Application submitted successfully"
    application_id: str
    data: VolunteerApplicationResponse
