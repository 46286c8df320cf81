"""Volunteer recruiter application intake."""

from __future__ import annotations

import re

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from sfdsa.db.models import VolunteerApplication

FORM = {
    "firstName": "Val",
    "lastName": "Unteer",
    "email": "Val@Example.com",
    "phone": "415-555-0100",
    "motivation": "Give back to my city.",
    "availability": "Weekends",
    "city": "San Francisco",
    "agreeToTerms": "true",
}


class TestSubmitApplication:
    @pytest.mark.asyncio
    async def test_submit_with_resume(self, client: AsyncClient, db_session, email_provider):
        response = await client.post(
            "/api/volunteer-applications/submit",
            data=FORM,
            files={"resume": ("resume.pdf", b"%PDF-1.4", "application/pdf")},
        )
        assert response.status_code == 200, response.text
        body = response.json()
        assert body["success"] is True
        assert re.fullmatch(r"VOL-\d{13}-[A-Z0-9]{6}", body["applicationId"])
        assert body["data"]["resumeFilename"] == f"{body['applicationId']}_resume.pdf"
        assert body["data"]["status"] == "pending"

        stored = (
            await db_session.execute(
                select(VolunteerApplication).where(VolunteerApplication.application_id == body["applicationId"])
            )
        ).scalar_one()
        assert stored.email == "val@example.com"
        assert stored.city == "San Francisco"
        assert stored.address == ""

        recipients = [m["to"] for m in email_provider.sent]
        assert recipients == ["val@example.com", "recruitment@sfdeputysheriff.com"]
        assert body["applicationId"] in email_provider.sent[0]["text"]

    @pytest.mark.asyncio
    async def test_missing_required_field(self, client: AsyncClient):
        form = {k: v for k, v in FORM.items() if k != "phone"}
        response = await client.post("/api/volunteer-applications/submit", data=form)
        assert response.status_code == 400
        assert response.json()["message"] == "Missing required field: phone"

    @pytest.mark.asyncio
    async def test_terms_must_be_accepted(self, client: AsyncClient):
        response = await client.post(
            "/api/volunteer-applications/submit", data={**FORM, "agreeToTerms": "false"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "You must agree to the terms and conditions"

    @pytest.mark.asyncio
    async def test_email_failure_does_not_fail_submission(self, client: AsyncClient, email_provider):
        email_provider.fail = True
        response = await client.post("/api/volunteer-applications/submit", data=FORM)
        assert response.status_code == 200
        assert response.json()["data"]["resumeFilename"] is None
