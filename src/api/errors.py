"""Map component failure codes to HTTP responses."""

from collections.abc import Sequence
from typing import NoReturn

from fastapi import HTTPException, status

from src.components.validation import FieldViolation

STATUS_BY_CODE = {
    "auth_required": status.HTTP_403_FORBIDDEN,
    "validation_error": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "not_found": status.HTTP_404_NOT_FOUND,
    "asset_upload_failed": status.HTTP_400_BAD_REQUEST,
    "invalid_transition": status.HTTP_409_CONFLICT,
    "persistence_error": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def raise_for_failure(
    error_code: str | None,
    notification: str,
    violations: Sequence[FieldViolation] = (),
    *,
    redirect_to_login: bool = False,
) -> NoReturn:
    if redirect_to_login:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": error_code, "message": notification, "redirect": "/login"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    raise HTTPException(
        status_code=STATUS_BY_CODE.get(error_code or "", status.HTTP_400_BAD_REQUEST),
        detail={
            "code": error_code,
            "message": notification,
            "violations": [
                {"field": v.field, "message": v.message, "code": v.code} for v in violations
            ],
        },
    )
