"""Scripted demo sites served by the simulated browser."""

import secrets
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field

from pageflow.drivers.simulated.dom import CookieJar, SimDocument, SimElement
from pageflow.models.cookie import Cookie

REMEMBER_ME_SECONDS = 30 * 24 * 3600


@dataclass(frozen=True, kw_only=True)
class Response:
    """Either a rendered document or a redirect."""

    status: int
    document: SimDocument | None = None
    location: str | None = None


def _not_found(url: str) -> Response:
    return Response(
        status=404,
        document=SimDocument(
            url=url,
            title="Not Found",
            elements=[SimElement(key="heading", role="heading", name="Page not found", text="Page not found")],
        ),
    )


def _textbox(key: str, label: str) -> SimElement:
    return SimElement(
        key=key,
        role="textbox",
        name=label,
        label=label,
        selectors=frozenset({"input", f"#{key}"}),
        focusable=True,
    )


def _password(key: str, label: str) -> SimElement:
    return SimElement(
        key=key,
        label=label,
        selectors=frozenset({"input", "password", f"#{key}"}),
        focusable=True,
    )


def _button(key: str, name: str, *, submits: bool = True) -> SimElement:
    return SimElement(
        key=key,
        role="button",
        name=name,
        text=name,
        selectors=frozenset({"button", f"#{key}"}),
        focusable=True,
        submits=submits,
    )


def _heading(text: str) -> SimElement:
    return SimElement(key="heading", role="heading", name=text, text=text, selectors=frozenset({"h1"}))


@dataclass(kw_only=True)
class SimSite(ABC):
    """A site the simulated browser can load, keyed by host."""

    host: str
    accounts: Mapping[str, str]
    cookie_secure: bool = True
    cookie_http_only: bool = True
    _sessions: set[str] = field(default_factory=set, init=False, repr=False)

    @abstractmethod
    def render(self, path: str, jar: CookieJar) -> Response:
        """Serve a GET for path."""

    @abstractmethod
    def submit(self, path: str, form: Mapping[str, str | bool], jar: CookieJar) -> Response:
        """Handle a form submission made from the page at path."""

    def url(self, path: str) -> str:
        return f"https://{self.host}{path}"

    def start_session(self, jar: CookieJar, name: str, *, persistent: bool) -> None:
        token = secrets.token_hex(16)
        self._sessions.add(token)
        jar.set(
            Cookie(
                name=name,
                value=token,
                domain=self.host,
                expires=time.time() + REMEMBER_ME_SECONDS if persistent else None,
                secure=self.cookie_secure,
                http_only=self.cookie_http_only,
                same_site="Lax",
            )
        )

    def has_session(self, jar: CookieJar, name: str) -> bool:
        cookie = jar.get(self.host, name)
        return cookie is not None and cookie.value in self._sessions

    def authenticate(self, form: Mapping[str, str | bool]) -> bool:
        username = form.get("username")
        return isinstance(username, str) and self.accounts.get(username) == form.get("password")


@dataclass(kw_only=True)
class CitizenPortal(SimSite):
    """Government services portal with a dashboard behind login."""

    host: str = "gov-portal.example.gov"
    accounts: Mapping[str, str] = field(
        default_factory=lambda: {"valid_citizen_01": "SecurePass123!"}
    )
    session_cookie: str = "session_id"

    def render(self, path: str, jar: CookieJar) -> Response:
        if path in ("/", "/login"):
            return Response(status=200, document=self._login_document())
        if path == "/dashboard":
            if not self.has_session(jar, self.session_cookie):
                return Response(status=302, location=self.url("/login"))
            return Response(
                status=200,
                document=SimDocument(
                    url=self.url("/dashboard"),
                    title="Citizen Dashboard",
                    elements=[
                        _heading("Citizen Dashboard"),
                        _button("sign_out", "Sign out", submits=False),
                    ],
                ),
            )
        return _not_found(self.url(path))

    def submit(self, path: str, form: Mapping[str, str | bool], jar: CookieJar) -> Response:
        if not self.authenticate(form):
            document = self._login_document()
            document.elements.insert(
                1,
                SimElement(
                    key="error",
                    role="alert",
                    name="Invalid username or password",
                    text="Invalid username or password",
                ),
            )
            return Response(status=401, document=document)

        self.start_session(jar, self.session_cookie, persistent=form.get("remember_me") is True)
        return Response(status=302, location=self.url("/dashboard"))

    def _login_document(self) -> SimDocument:
        return SimDocument(
            url=self.url("/login"),
            title="Sign in - Government Digital Services",
            elements=[
                _heading("Sign in to Government Digital Services"),
                _textbox("username", "Username"),
                _password("password", "Password"),
                SimElement(
                    key="remember_me",
                    role="checkbox",
                    name="Remember me",
                    label="Remember me",
                    selectors=frozenset({"input", "#remember_me"}),
                    focusable=True,
                ),
                _button("sign_in", "Sign in"),
            ],
        )


@dataclass(kw_only=True)
class PracticeSite(SimSite):
    """Practice login page guarding a secure area."""

    host: str = "practice.expandtesting.com"
    accounts: Mapping[str, str] = field(
        default_factory=lambda: {"practice": "SuperSecretPassword!"}
    )
    session_cookie: str = "session_id"

    def render(self, path: str, jar: CookieJar) -> Response:
        if path == "/login":
            return Response(status=200, document=self._login_document(path))
        if path == "/secure":
            if not self.has_session(jar, self.session_cookie):
                return Response(status=200, document=self._login_document(path))
            return Response(
                status=200,
                document=SimDocument(
                    url=self.url("/secure"),
                    title="Secure Area",
                    elements=[
                        SimElement(
                            key="flash",
                            role="alert",
                            name="You logged into a secure area!",
                            text="You logged into a secure area!",
                            selectors=frozenset({"#flash", "#flash.success", ".success"}),
                        ),
                        _heading("Secure Area"),
                        _button("logout", "Logout", submits=False),
                    ],
                ),
            )
        return _not_found(self.url(path))

    def submit(self, path: str, form: Mapping[str, str | bool], jar: CookieJar) -> Response:
        if not self.authenticate(form):
            document = self._login_document("/login")
            document.elements.insert(
                0,
                SimElement(
                    key="flash",
                    role="alert",
                    name="Your username is invalid!",
                    text="Your username is invalid!",
                    selectors=frozenset({"#flash", "#flash.error", ".error"}),
                ),
            )
            return Response(status=200, document=document)

        self.start_session(jar, self.session_cookie, persistent=False)
        return Response(status=302, location=self.url("/secure"))

    def _login_document(self, path: str) -> SimDocument:
        return SimDocument(
            url=self.url(path),
            title="Test Login Page",
            elements=[
                _heading("Test Login page for Automation Testing Practice"),
                _textbox("username", "Username"),
                _password("password", "Password"),
                _button("login", "Login"),
            ],
        )
