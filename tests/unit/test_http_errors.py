import pytest
from fastapi import HTTPException

from src.api.errors import raise_for_failure
from src.components.validation import FieldViolation


@pytest.mark.parametrize(
    "code,status",
    [
        ("auth_required", 403),
        ("validation_error", 422),
        ("not_found", 404),
        ("asset_upload_failed", 400),
        ("invalid_transition", 409),
        ("persistence_error", 500),
        (None, 400),
    ],
)
def test_status_by_code(code, status):
    with pytest.raises(HTTPException) as exc:
        raise_for_failure(code, "failed")
    assert exc.value.status_code == status


def test_violations_are_listed():
    with pytest.raises(HTTPException) as exc:
        raise_for_failure(
            "validation_error", "Title is required", [FieldViolation("title", "Title is required")]
        )
    assert exc.value.detail["violations"] == [
        {"field": "title", "message": "Title is required", "code": "invalid"}
    ]


def test_login_redirect():
    with pytest.raises(HTTPException) as exc:
        raise_for_failure("auth_required", "Log in", redirect_to_login=True)
    assert exc.value.status_code == 401
    assert exc.value.detail["redirect"] == "/login"
