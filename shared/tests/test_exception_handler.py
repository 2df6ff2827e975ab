"""Domain errors rendered by the API layer."""

from __future__ import annotations

import pytest
from rest_framework.exceptions import NotAuthenticated

from shared.api import exception_handler
from shared.domain.exceptions import (
    BookingNotFound,
    DomainError,
    InvalidDateRange,
    NotBookingParticipant,
    OverlapConflict,
    PaymentProcessingError,
)


@pytest.mark.parametrize(
    "error, status_code",
    [
        (InvalidDateRange(), 400),
        (NotBookingParticipant(), 403),
        (BookingNotFound(), 404),
        (OverlapConflict(), 409),
        (PaymentProcessingError(), 502),
    ],
)
def test_domain_errors_map_to_status_codes(error, status_code):
    response = exception_handler(error, {"view": None})

    assert response.status_code == status_code
    assert response.data == {"detail": error.message, "code": type(error).__name__}


def test_custom_message_is_kept():
    response = exception_handler(OverlapConflict("Drill is taken"), {})

    assert response.data["detail"] == "Drill is taken"


def test_every_error_has_a_default_message():
    def leaves(cls):
        for sub in cls.__subclasses__():
            yield sub
            yield from leaves(sub)

    for cls in leaves(DomainError):
        assert cls().message


def test_other_exceptions_fall_through_to_drf():
    response = exception_handler(NotAuthenticated(), {"view": None, "request": None})

    assert response.status_code == 401
    assert "code" not in response.data
