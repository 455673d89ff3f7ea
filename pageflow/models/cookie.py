"""Read-only cookie snapshots taken from a live browser session."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, kw_only=True)
class Cookie:
    """Snapshot of one cookie as reported by the driver.

    Never constructed by page objects; only read back from the session at the
    moment an assertion needs it.
    """

    name: str
    value: str
    domain: str
    path: str = "/"
    expires: float | None = None
    secure: bool = False
    http_only: bool = False
    same_site: Literal["Strict", "Lax", "None"] | None = None
