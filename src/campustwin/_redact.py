"""Helpers for safe logging.

The routing provider takes its API key as a URL path segment, so request
URLs, transport errors and provider response bodies must be scrubbed before
they are logged or put into an exception message.
"""

from __future__ import annotations

from collections.abc import Iterable

REDACTED = "<redacted>"


def redact_secrets(text: str, secrets: Iterable[str | None], *, limit: int | None = None) -> str:
    """Return *text* with every non-empty secret replaced by ``<redacted>``.

    Secrets are replaced before truncating to *limit* characters, so a key
    cut in half at the boundary cannot leak.
    """
    redacted = text
    for secret in secrets:
        if secret:
            redacted = redacted.replace(secret, REDACTED)
    if limit is not None and len(redacted) > limit:
        return f"{redacted[:limit]}...<truncated>"
    return redacted
