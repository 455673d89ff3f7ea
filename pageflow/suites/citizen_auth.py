"""TC_001: citizen authentication on the Government Digital Services portal.

Covers accessibility of the login form, keyboard-only remember-me, session
cookie hardening, the dashboard redirect and session persistence across tabs.
"""

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from pageflow.cases import DataDrivenCase
from pageflow.config import Credentials, EndpointConfig
from pageflow.errors import PageAssertionError
from pageflow.fixtures import DASHBOARD_SCREEN, LOGIN_SCREEN, PAGE, clear_session_cookies
from pageflow.models.case import CaseRow
from pageflow.pages.cookies import assert_cookie_hardened
from pageflow.pages.dashboard import DashboardScreen
from pageflow.registry import ScenarioRegistry
from pageflow.steps import Scenario, Step, UnitContext

SCENARIO_NAME = "TC_001 Secure Login with Session Persistence and 508 Compliance"
CASE_NAME = "TC_001 Remember-me interaction paths"


class CitizenAuthSettings(BaseSettings):
    """Citizen portal settings; CITIZEN_* environment variables override them."""

    model_config = SettingsConfigDict(
        env_prefix="CITIZEN_", case_sensitive=False, extra="ignore", frozen=True
    )

    user: str = Field(default="valid_citizen_01", description="CITIZEN_USER")
    password: SecretStr = Field(
        default=SecretStr("SecurePass123!"), description="CITIZEN_PASSWORD"
    )
    base_url: str = Field(
        default="https://gov-portal.example.gov/login", description="CITIZEN_BASE_URL"
    )
    dashboard_url: str = Field(
        default="https://gov-portal.example.gov/dashboard",
        description="CITIZEN_DASHBOARD_URL",
    )

    @property
    def credentials(self) -> Credentials:
        return Credentials(username=self.user, password=self.password)

    @property
    def endpoints(self) -> EndpointConfig:
        return EndpointConfig(base_url=self.base_url, dashboard_url=self.dashboard_url)


def build_scenario(settings: CitizenAuthSettings) -> Scenario:
    credentials = settings.credentials
    endpoints = settings.endpoints

    async def navigate(unit: UnitContext) -> None:
        login = await unit.get(LOGIN_SCREEN)
        await login.navigate(endpoints.base_url)

    async def verify_accessibility(unit: UnitContext) -> None:
        login = await unit.get(LOGIN_SCREEN)
        await login.verify_accessibility_markup()

    async def login_with_keyboard(unit: UnitContext) -> None:
        login = await unit.get(LOGIN_SCREEN)
        await login.login(credentials, remember_me_via_keyboard=True)

    async def inspect_cookie(unit: UnitContext) -> None:
        login = await unit.get(LOGIN_SCREEN)
        await assert_cookie_hardened(login)

    async def confirm_dashboard(unit: UnitContext) -> None:
        dashboard = await unit.get(DASHBOARD_SCREEN)
        await dashboard.assert_present()

    async def persist_session_in_new_tab(unit: UnitContext) -> None:
        original = await unit.get(PAGE)
        await original.page.close()

        new_tab = DashboardScreen(context=await unit.scope.new_page())
        await new_tab.navigate(endpoints.dashboard_url or endpoints.base_url)
        await new_tab.assert_present()

    return Scenario(
        name=SCENARIO_NAME,
        fixtures=[LOGIN_SCREEN, DASHBOARD_SCREEN],
        before=[clear_session_cookies],
        steps=[
            Step(
                name="Step 1: Navigate to Government Digital Services login portal",
                action=navigate,
            ),
            Step(
                name="Step 2: Verify accessibility standards (ARIA and Keyboard navigation)",
                action=verify_accessibility,
            ),
            Step(
                name='Step 3: Enter credentials and toggle "Remember Me" via keyboard',
                action=login_with_keyboard,
            ),
            Step(
                name="Step 4: Inspect session security flags (Secure, HttpOnly)",
                action=inspect_cookie,
            ),
            Step(name="Step 5: Confirm redirection to Citizen Dashboard", action=confirm_dashboard),
            Step(
                name="Step 6: Verify session persistence in a new tab",
                action=persist_session_in_new_tab,
            ),
        ],
    )


def build_case(settings: CitizenAuthSettings) -> DataDrivenCase:
    """Same login through both remember-me paths; each must end checked."""
    credentials = settings.credentials
    endpoints = settings.endpoints

    async def navigate(unit: UnitContext) -> None:
        login = await unit.get(LOGIN_SCREEN)
        await login.navigate(endpoints.base_url)

    async def enter_credentials(unit: UnitContext) -> None:
        login = await unit.get(LOGIN_SCREEN)
        await login.enter_username(unit.inputs.get("username", credentials.username))
        await login.enter_password(
            unit.inputs.get("password", credentials.password.get_secret_value())
        )

    async def toggle_remember_me(unit: UnitContext) -> None:
        login = await unit.get(LOGIN_SCREEN)
        await login.set_remember_me(via_keyboard=unit.inputs["via_keyboard"])
        checked = await login.is_remember_me_checked()
        if not checked:
            raise PageAssertionError(
                "Remember me should be checked", expected=True, observed=checked
            )

    async def submit(unit: UnitContext) -> None:
        login = await unit.get(LOGIN_SCREEN)
        await login.click_login()

    async def inspect_cookie(unit: UnitContext) -> None:
        login = await unit.get(LOGIN_SCREEN)
        await assert_cookie_hardened(login)

    async def confirm_dashboard(unit: UnitContext) -> None:
        dashboard = await unit.get(DASHBOARD_SCREEN)
        await dashboard.assert_present()

    template = Scenario(
        name=CASE_NAME,
        fixtures=[LOGIN_SCREEN],
        before=[clear_session_cookies],
        steps=[
            Step(name="Navigate to the login portal", action=navigate),
            Step(name="Enter credentials for {username}", action=enter_credentials),
            Step(name="Toggle remember me via {mode}", action=toggle_remember_me),
            Step(name="Submit the login form", action=submit),
            Step(name="Inspect session security flags", action=inspect_cookie),
            Step(name="Confirm redirection to Citizen Dashboard", action=confirm_dashboard),
        ],
    )
    login_inputs = {
        "username": credentials.username,
        "password": credentials.password.get_secret_value(),
    }
    return DataDrivenCase(
        template=template,
        rows=[
            CaseRow(
                id="TC_001-keyboard",
                description="Remember me toggled with keyboard focus and Space",
                inputs={**login_inputs, "mode": "keyboard", "via_keyboard": True},
            ),
            CaseRow(
                id="TC_001-pointer",
                description="Remember me set directly",
                inputs={**login_inputs, "mode": "pointer", "via_keyboard": False},
            ),
        ],
    )


def register(registry: ScenarioRegistry) -> None:
    """Register the citizen authentication suite."""
    settings = CitizenAuthSettings()
    registry.add(build_scenario(settings))
    registry.add(build_case(settings))
