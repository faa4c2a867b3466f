"""Tests for the exception to HTTP status mapping."""

import pytest

from api.models.errors import http_error
from modules.ledger.exceptions import (
    AccountNotFoundError,
    EmptyRevealSelectionError,
    InsufficientCreditsError,
    LedgerUnavailableError,
)
from modules.auth.exceptions import ExpiredTokenError
from shared.exceptions import AuthorizationError, LeadvaultError


@pytest.mark.parametrize(
    "error,status_code",
    [
        (InsufficientCreditsError(required=3, available=1), 402),
        (ExpiredTokenError(), 401),
        (AuthorizationError("nope"), 403),
        (AccountNotFoundError("user-1"), 404),
        (EmptyRevealSelectionError(), 422),
        (LedgerUnavailableError("timeout"), 503),
        (LeadvaultError("unexpected"), 500),
    ],
)
def test_status_codes(error, status_code):
    exc = http_error(error)
    assert exc.status_code == status_code
    assert exc.detail == error.to_dict()


def test_insufficient_credits_details():
    detail = http_error(InsufficientCreditsError(required=6, available=5, user_id="user-1")).detail
    assert detail["details"] == {"required": 6, "available": 5, "shortfall": 1, "user_id": "user-1"}
