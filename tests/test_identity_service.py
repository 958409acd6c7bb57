"""Tests for bearer-token authentication."""

import pytest

from calorie_tracker.services.identity import AuthenticationError, IdentityService
from tests.conftest import PATIENT_ID, PATIENT_TOKEN, FakeIdentityClient


def test_authenticate_returns_user_id() -> None:
    service = IdentityService(FakeIdentityClient())

    assert service.authenticate(f"Bearer {PATIENT_TOKEN}") == PATIENT_ID
    assert service.authenticate(f"bearer  {PATIENT_TOKEN} ") == PATIENT_ID


@pytest.mark.parametrize(
    ("header", "message"),
    [
        (None, "Missing"),
        ("", "Missing"),
        (f"Basic {PATIENT_TOKEN}", "Bearer"),
        ("Bearer ", "Bearer"),
        ("Bearer unknown", "Invalid"),
    ],
)
def test_authenticate_rejects_bad_headers(header: str | None, message: str) -> None:
    service = IdentityService(FakeIdentityClient())

    with pytest.raises(AuthenticationError, match=message):
        service.authenticate(header)
