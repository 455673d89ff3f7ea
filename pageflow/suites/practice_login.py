"""Data-driven login to the practice site's secure area."""

from collections.abc import AsyncIterator

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from pageflow.cases import DataDrivenCase
from pageflow.config import Credentials, EndpointConfig
from pageflow.fixtures import PAGE, SECURE_AREA_SCREEN, Fixture, FixtureScope, fixture
from pageflow.locators import LocatorSet, by_label, by_role
from pageflow.models.case import CaseRow
from pageflow.pages.login import LoginScreen
from pageflow.registry import ScenarioRegistry
from pageflow.steps import Scenario, Step, UnitContext

CASE_NAME = "Login Functionality"
SUCCESS_MESSAGE = "You logged into a secure area!"

PRACTICE_LOGIN_LOCATORS = LocatorSet.of(
    username=by_label("Username"),
    password=by_label("Password"),
    submit=by_role("button", "Login"),
)


class PracticeLoginSettings(BaseSettings):
    """Practice site settings; PRACTICE_* environment variables override them."""

    model_config = SettingsConfigDict(
        env_prefix="PRACTICE_", case_sensitive=False, extra="ignore", frozen=True
    )

    user: str = Field(default="practice", description="PRACTICE_USER")
    password: SecretStr = Field(
        default=SecretStr("SuperSecretPassword!"), description="PRACTICE_PASSWORD"
    )
    base_url: str = Field(
        default="https://practice.expandtesting.com/secure",
        description="PRACTICE_BASE_URL",
    )

    @property
    def credentials(self) -> Credentials:
        return Credentials(username=self.user, password=self.password)

    @property
    def endpoints(self) -> EndpointConfig:
        return EndpointConfig(base_url=self.base_url)


@fixture("practice_login_screen")
async def _practice_login_screen(scope: FixtureScope) -> AsyncIterator[LoginScreen]:
    yield LoginScreen(context=await scope.provide(PAGE), locator_set=PRACTICE_LOGIN_LOCATORS)


PRACTICE_LOGIN_SCREEN: Fixture[LoginScreen] = _practice_login_screen


def build_case(settings: PracticeLoginSettings) -> DataDrivenCase:
    endpoints = settings.endpoints

    async def open_login_page(unit: UnitContext) -> None:
        unit.annotate("Test Case ID", unit.inputs["id"])
        login = await unit.get(PRACTICE_LOGIN_SCREEN)
        await login.navigate(endpoints.base_url)
        await login.context.assert_url(endpoints.base_url)
        await login.take_screenshot(f"{unit.inputs['id']}-login-page-before-login")

    async def enter_username(unit: UnitContext) -> None:
        login = await unit.get(PRACTICE_LOGIN_SCREEN)
        await login.enter_username(unit.inputs["username"])

    async def enter_password(unit: UnitContext) -> None:
        login = await unit.get(PRACTICE_LOGIN_SCREEN)
        await login.enter_password(unit.inputs["password"])

    async def click_login(unit: UnitContext) -> None:
        login = await unit.get(PRACTICE_LOGIN_SCREEN)
        await login.click_login()

    async def verify_secure_area(unit: UnitContext) -> None:
        secure_area = await unit.get(SECURE_AREA_SCREEN)
        await secure_area.assert_success_banner(SUCCESS_MESSAGE)
        await secure_area.context.assert_url(unit.inputs["expected_url"])
        await secure_area.take_screenshot(f"{unit.inputs['id']}-secure-area-after-login")
        unit.attach(
            f"Test Report for {unit.inputs['id']}",
            f"Test Case {unit.inputs['id']} executed successfully. "
            f"User logged in to {secure_area.current_url()}.",
        )

    template = Scenario(
        name=CASE_NAME,
        fixtures=[PRACTICE_LOGIN_SCREEN, SECURE_AREA_SCREEN],
        steps=[
            Step(name="1. Navigate to the login page", action=open_login_page),
            Step(name="2. Enter '{username}' into the 'Username' field.", action=enter_username),
            Step(name="3. Enter the password into the 'Password' field.", action=enter_password),
            Step(name="4. Click the 'Login' button.", action=click_login),
            Step(name="5. Verify login success and current URL", action=verify_secure_area),
        ],
    )
    credentials = settings.credentials
    return DataDrivenCase(
        template=template,
        rows=[
            CaseRow(
                id="TC001",
                description="Verify user can login with valid credentials and URL is secure",
                inputs={
                    "username": credentials.username,
                    "password": credentials.password.get_secret_value(),
                    "expected_url": endpoints.base_url,
                },
            ),
        ],
    )


def register(registry: ScenarioRegistry) -> None:
    """Register the practice login suite."""
    registry.add(build_case(PracticeLoginSettings()))
