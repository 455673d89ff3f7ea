"""Page objects composed from page capabilities."""

from pageflow.pages.capabilities import PageContext
from pageflow.pages.dashboard import DashboardScreen
from pageflow.pages.login import LoginScreen
from pageflow.pages.secure_area import SecureAreaScreen

__all__ = ["DashboardScreen", "LoginScreen", "PageContext", "SecureAreaScreen"]
