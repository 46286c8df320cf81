"""Pydantic response models for notification endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sfdsa.schemas import CamelModel


class NotificationResponse(CamelModel):
    id: str
    type: str
    title: str
    message: str | None = None
    timestamp: datetime
    read: bool
    action_url: str | None = None
    metadata: dict[str, Any] = {}


class NotificationListResponse(CamelModel):
    success: bool = True
    notifications: list[NotificationResponse]
    total: int
    unread_count: int
    page: int
    per_page: int
