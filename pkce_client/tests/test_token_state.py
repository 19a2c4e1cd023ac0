"""Tests for outcome variants and the request-state tracker."""
from pkce_client.pages import format_payload
from pkce_client.token_state import (
    AuthorizationError,
    AuthorizationSuccess,
    Loading,
    NoOutcome,
    OutcomeKind,
    RequestStateTracker,
    UnknownRefreshError,
)


def test_tracker_starts_empty_and_last_write_wins():
    tracker = RequestStateTracker()
    assert tracker.get() == NoOutcome()
    tracker.set(Loading())
    tracker.set(AuthorizationSuccess({"access_token": "t1"}))
    assert tracker.get().kind is OutcomeKind.AUTHORIZATION_SUCCESS
    tracker.reset()
    assert tracker.get().kind is OutcomeKind.NONE


def test_outcome_to_dict():
    assert AuthorizationError({"error": "invalid_grant"}).to_dict() == {
        "kind": "authorization_error",
        "payload": {"error": "invalid_grant"},
    }
    assert UnknownRefreshError().to_dict() == {"kind": "unknown_refresh_error", "payload": None}


def test_variants_with_same_payload_differ_by_kind():
    assert AuthorizationSuccess({"a": 1}) != AuthorizationError({"a": 1})


def test_format_payload_puts_tokens_on_own_lines():
    text = format_payload({"access_token": "t1", "refresh_token": "r1", "expires_in": 3600})
    lines = text.splitlines()
    assert any("access_token" in line and "t1" in line for line in lines)
    assert any("refresh_token" in line and "r1" in line for line in lines)
    assert "expires_in" in text
