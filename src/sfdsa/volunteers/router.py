"""Volunteer recruiter application endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.database import get_session
from sfdsa.dependencies import get_email_dep
from sfdsa.email.service import EmailService
from sfdsa.volunteers.schemas import SubmitApplicationResponse, VolunteerApplicationResponse
from sfdsa.volunteers.service import notify_application, submit_application

router = APIRouter(prefix="/api/volunteer-applications", tags=["Volunteers"])


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("x-real-ip") or (request.client.host if request.client else "unknown")


@router.post("/submit", response_model=SubmitApplicationResponse)
async def submit(
    request: Request,
    first_name: str | None = Form(None, alias="firstName"),
    last_name: str | None = Form(None, alias="lastName"),
    email: str | None = Form(None),
    phone: str | None = Form(None),
    address: str | None = Form(None),
    city: str | None = Form(None),
    state: str | None = Form(None),
    zip_code: str | None = Form(None, alias="zipCode"),
    experience: str | None = Form(None),
    motivation: str | None = Form(None),
    availability: str | None = Form(None),
    agree_to_terms: str | None = Form(None, alias="agreeToTerms"),
    resume: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_session),
    email_service: EmailService = Depends(get_email_dep),
):
    """Submit a volunteer recruiter application (multipart form)."""
    form = {
        "firstName": first_name,
        "lastName": last_name,
        "email": email,
        "phone": phone,
        "address": address,
        "city": city,
        "state": state,
        "zipCode": zip_code,
        "experience": experience,
        "motivation": motivation,
        "availability": availability,
    }
    try:
        application = await submit_application(
            db,
            form,
            agree_to_terms,
            resume_filename=resume.filename if resume is not None else None,
            ip_address=_client_ip(request),
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from None
    await db.commit()
    await db.refresh(application)

    await notify_application(email_service, application)
    return SubmitApplicationResponse(
        application_id=application.application_id,
        data=VolunteerApplicationResponse.model_validate(application),
    )
