"""Structured logging redaction and bearer-token handling."""

import json
import logging

import pytest

from fitroom_app.errors import AuthenticationError
from fitroom_app.logging_config import JsonFormatter, correlation_context, log_event, redact_for_log
from tools.identity import MockIdentityProvider, bearer_token

from conftest import ALICE


def test_redaction_masks_photos_credentials_and_emails() -> None:
    scrubbed = redact_for_log(
        {
            "userPhoto": "data:image/jpeg;base64,AAAA",
            "nested": {"note": "contact bob@example.com", "image": "data:image/png;base64,BB"},
            "authorization": "Bearer secret",
            "reply": "x" * 600,
            "count": 3,
        }
    )
    assert scrubbed["userPhoto"] == "[redacted]"
    assert scrubbed["authorization"] == "[redacted]"
    assert scrubbed["nested"]["note"] == "contact [redacted-email]"
    assert scrubbed["nested"]["image"] == "[redacted-data-uri]"
    assert scrubbed["reply"].endswith("...[truncated]")
    assert scrubbed["count"] == 3


def test_log_event_emits_json_with_correlation_id(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("fitroom.test")
    with caplog.at_level(logging.INFO, logger="fitroom.test"):
        with correlation_context("corr-123"):
            log_event(logger, logging.INFO, "fit_analysis_completed", fit_score=85, user_photo="data:x")

    record = caplog.records[-1]
    payload = json.loads(JsonFormatter().format(record))
    assert payload["event"] == "fit_analysis_completed"
    assert payload["correlation_id"] == "corr-123"
    assert payload["fit_score"] == 85
    assert payload["user_photo"] == "[redacted]"


@pytest.mark.parametrize("header", [None, "", "Bearer ", "   "])
def test_bearer_token_requires_header(header) -> None:
    with pytest.raises(AuthenticationError, match="No authorization header"):
        bearer_token(header)


def test_mock_identity_resolves_known_tokens() -> None:
    identity = MockIdentityProvider({"alice-token": ALICE})
    assert identity.resolve_bearer("Bearer alice-token") == ALICE
    with pytest.raises(AuthenticationError, match="Invalid user"):
        identity.resolve_bearer("Bearer someone-else")
