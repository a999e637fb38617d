"""Itinerary data contracts: Pydantic v2 models for sailing leg planning.

Data authority
--------------

**Firestore** (source of truth for user-owned data):
- ``Leg``: ``/apps/{app_id}/users/{uid}/sailing_routes/{id}``

Calculated (never persisted)
----------------------------
- ``CalendarMonth`` / ``CalendarDay``: month grid with leg overlay
- ``Timeline`` / ``TimelineEntry`` / ``TimelineSummary``: chronological view
- ``SessionState`` / ``StatusMessage``: per-session gate state and status slot
"""

from itinerary.contracts.enums import ErrorCode, StatusLevel
from itinerary.contracts.common import FirestoreModel
from itinerary.contracts.result import ServiceError, ServiceResult
from itinerary.contracts.leg import Leg, LegForm
from itinerary.contracts.views import (
    CalendarDay,
    CalendarMonth,
    MonthRef,
    SessionState,
    StatusMessage,
    Timeline,
    TimelineEntry,
    TimelineSummary,
)

__all__ = [
    # Enums
    "ErrorCode",
    "StatusLevel",
    # Common
    "FirestoreModel",
    # Result
    "ServiceError",
    "ServiceResult",
    # Domain models
    "Leg",
    "LegForm",
    # Views
    "CalendarDay",
    "CalendarMonth",
    "MonthRef",
    "SessionState",
    "StatusMessage",
    "Timeline",
    "TimelineEntry",
    "TimelineSummary",
]
