"""Mapping of leg-manager failures onto HTTP responses."""

from __future__ import annotations

from fastapi import HTTPException

from itinerary.contracts.enums import ErrorCode
from itinerary.contracts.result import ServiceResult

ERROR_STATUS: dict[str, int] = {
    ErrorCode.VALIDATION.value: 422,
    ErrorCode.LOCKED.value: 403,
    ErrorCode.NOT_AUTHENTICATED.value: 401,
    ErrorCode.NOT_FOUND.value: 404,
    ErrorCode.STORE_ERROR.value: 502,
}


def raise_for_result(result: ServiceResult) -> None:
    """Raise ``HTTPException`` for a failed result; no-op on success."""
    if result.success:
        return
    error = result.error
    raise HTTPException(
        status_code=ERROR_STATUS.get(error.code, 500),
        detail={"code": error.code, "message": error.message},
    )
