"""Volunteer recruiter endpoints: dashboard, referrals, status updates."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sfdsa.database import get_session
from sfdsa.dependencies import get_email_dep, get_redis_dep, require_admin
from sfdsa.email.service import EmailService
from sfdsa.errors import (
    DuplicateReferralError,
    InvalidTransitionError,
    ReferralNotFoundError,
    UserNotFoundError,
)
from sfdsa.gamification.schemas import earned_badge_response, user_nft_award_response
from sfdsa.referrals.pipeline import STATUS_PROGRESS, ReferralStatus
from sfdsa.referrals.schemas import (
    DashboardData,
    DashboardResponse,
    SendReferralRequest,
    SendReferralResponse,
    UpdateReferralStatusRequest,
    UpdateReferralStatusResponse,
)
from sfdsa.referrals.service import (
    build_share_payload,
    get_dashboard,
    get_recruiter,
    send_referral,
    update_referral_status,
)

router = APIRouter(prefix="/api/volunteer-recruiter", tags=["Volunteer Recruiter"])


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    user_id: str = Query(..., alias="userId", min_length=1),
    db: AsyncSession = Depends(get_session),
):
    """Recruiter dashboard: referrals, points history, awards, events, stats."""
    data, source = await get_dashboard(db, user_id)
    if source == "database":
        await db.commit()
    data["badges"] = [earned_badge_response(b) for b in data["badges"]]
    data["nfts"] = [user_nft_award_response(n) for n in data["nfts"]]
    return DashboardResponse(
        data=DashboardData.model_validate(data),
        source=source,
        message="Using empty dashboard - database unavailable" if source == "fallback" else None,
    )


@router.post("/send-referral", response_model=SendReferralResponse)
async def post_send_referral(
    body: SendReferralRequest,
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_dep),
    email_service: EmailService = Depends(get_email_dep),
):
    """Send a referral email, or prepare a share message when no recipient is given."""
    try:
        if body.recipient_email is None:
            recruiter = await get_recruiter(db, body.recruiter_id)
            payload = await build_share_payload(db, recruiter, body.message)
            await db.commit()
            return SendReferralResponse(message="Referral message prepared for sharing", **payload)

        sent = await send_referral(
            db,
            email_service,
            body.recruiter_id,
            body.recipient_email,
            body.recipient_name,
            body.message,
            redis=redis,
        )
    except UserNotFoundError:
        raise HTTPException(status_code=404, detail="Recruiter not found") from None
    except DuplicateReferralError as e:
        raise HTTPException(status_code=409, detail=str(e)) from None

    return SendReferralResponse(
        message="Referral sent successfully" if sent.email_sent else "Referral recorded; email could not be sent",
        referral_id=sent.referral.id,
        email_sent=sent.email_sent,
    )


@router.patch(
    "/referrals/{referral_id}",
    response_model=UpdateReferralStatusResponse,
    dependencies=[Depends(require_admin)],
)
async def patch_referral_status(
    referral_id: str,
    body: UpdateReferralStatusRequest,
    db: AsyncSession = Depends(get_session),
    redis: object = Depends(get_redis_dep),
):
    """Advance a referral along the hiring pipeline (admin)."""
    try:
        result = await update_referral_status(db, redis, referral_id, body.status)
    except ReferralNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from None
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e)) from None
    await db.commit()

    status = ReferralStatus(result.referral.status)
    return UpdateReferralStatusResponse(
        referral_id=result.referral.id,
        status=status,
        progress=STATUS_PROGRESS[status],
        points_awarded=result.points_awarded,
        badges_awarded=result.badges_awarded,
    )
