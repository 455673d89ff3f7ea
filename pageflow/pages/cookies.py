"""Session cookie hardening assertions."""

from pageflow.errors import PageAssertionError
from pageflow.models.cookie import Cookie
from pageflow.pages.capabilities import CookieReadable

SESSION_COOKIE = "session_id"


async def assert_cookie_hardened(
    source: CookieReadable, name: str = SESSION_COOKIE
) -> Cookie:
    """Assert a cookie exists and carries both Secure and HttpOnly flags.

    The cookie is read from the session at call time.
    """
    cookie = await source.read_cookie(name)
    if cookie is None:
        raise PageAssertionError(
            f"Cookie {name} should exist", expected="present", observed="absent"
        )
    if not cookie.secure:
        raise PageAssertionError(
            f"Cookie {name} must be Secure", expected=True, observed=cookie.secure
        )
    if not cookie.http_only:
        raise PageAssertionError(
            f"Cookie {name} must be HttpOnly", expected=True, observed=cookie.http_only
        )
    return cookie
