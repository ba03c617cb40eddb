"""Health evaluation of the stored cookie export."""

import time
from datetime import datetime

from .models import CookieHealth, CookieHealthStatus, CredentialSet

PRIORITY_COOKIES = frozenset({"__Secure-1PSID", "LOGIN_INFO"})
EXPIRING_SOON_SECONDS = 3 * 86400


def evaluate_cookie_health(
    credentials: CredentialSet,
    last_uploaded: datetime | None = None,
    now: float | None = None,
) -> CookieHealth:
    """
    Summarizes how usable a credential set is.

    The reported expiration is the earliest future expiration among the
    login cookies, falling back to the earliest future expiration overall.
    """
    now = time.time() if now is None else now
    valid = 0
    earliest: float | None = None
    priority_earliest: float | None = None

    for cookie in credentials.cookies:
        if not cookie.is_valid_at(now):
            continue
        valid += 1
        if cookie.is_session:
            continue
        if earliest is None or cookie.expiration < earliest:
            earliest = cookie.expiration
        if cookie.name in PRIORITY_COOKIES and (
            priority_earliest is None or cookie.expiration < priority_earliest
        ):
            priority_earliest = cookie.expiration

    expiration = priority_earliest if priority_earliest is not None else earliest

    if valid == 0:
        status = CookieHealthStatus.EXPIRED
    elif expiration is not None and expiration - now < EXPIRING_SOON_SECONDS:
        status = CookieHealthStatus.EXPIRING_SOON
    else:
        status = CookieHealthStatus.VALID

    return CookieHealth(
        total_cookies=len(credentials),
        valid_cookies=valid,
        earliest_expiration=expiration,
        last_uploaded=last_uploaded,
        status=status,
    )
