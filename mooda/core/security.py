"""
Shared-secret check for operator endpoints.

The secret may arrive in the `X-Cron-Secret` header or in the request body
(`token`), matching what external cron runners can send.
"""
from __future__ import annotations

import logging
import secrets
from typing import Optional

logger = logging.getLogger(__name__)


def verify_cron_secret(
    expected: str,
    header_token: Optional[str] = None,
    body_token: Optional[str] = None,
) -> bool:
    """
    Return True when either token matches `expected` (timing-safe).
    An empty `expected` secret never authorizes anything.
    """
    if not expected:
        logger.warning("CRON_SECRET is not configured; refusing operator request")
        return False
    for candidate in (header_token, body_token):
        if candidate and secrets.compare_digest(candidate, expected):
            return True
    return False
