from __future__ import annotations

from campustwin._redact import redact_secrets


def test_redact_secrets_hides_path_key() -> None:
    url = "https://apis.mapmyindia.com/directions/v1/abc123?start=77.8,29.8"
    assert redact_secrets(url, ["abc123", None]) == "https://apis.mapmyindia.com/directions/v1/<redacted>?start=77.8,29.8"
    assert redact_secrets(url, [None, ""]) == url


def test_redact_secrets_truncates_long_text() -> None:
    redacted = redact_secrets("x" * 600, [], limit=10)
    assert redacted == "xxxxxxxxxx...<truncated>"


def test_redact_secrets_replaces_before_truncating() -> None:
    body = "error for key abc123def456"
    # The limit falls inside the key; no prefix of it may survive.
    redacted = redact_secrets(body, ["abc123def456"], limit=17)
    assert "abc" not in redacted
    assert redacted.startswith("error for key <re")
