"""Tests for polling expectations."""

import pytest

from pageflow.assertions import expect_eventually
from pageflow.errors import PageAssertionError


async def test_returns_first_matching_observation() -> None:
    """Polls until the predicate holds."""
    observations = iter([1, 2, 3, 4])

    async def observe() -> int:
        return next(observations)

    value = await expect_eventually(
        observe,
        lambda v: v >= 3,
        message="Counter should reach 3",
        expected=3,
        timeout=1.0,
        poll_interval=0,
    )

    assert value == 3


async def test_times_out_with_last_observation() -> None:
    """Raises PageAssertionError carrying expected and observed values."""

    async def observe() -> str:
        return "https://gov-portal.example.gov/login"

    with pytest.raises(PageAssertionError, match="Page URL should match") as exc_info:
        await expect_eventually(
            observe,
            lambda url: "dashboard" in url,
            message="Page URL should match",
            expected="/dashboard/",
            timeout=0.02,
            poll_interval=0.005,
        )

    assert exc_info.value.expected == "/dashboard/"
    assert exc_info.value.observed == "https://gov-portal.example.gov/login"
    assert isinstance(exc_info.value, AssertionError)


async def test_zero_timeout_observes_once() -> None:
    """A zero timeout still checks the current state."""
    calls = 0

    async def observe() -> bool:
        nonlocal calls
        calls += 1
        return False

    with pytest.raises(PageAssertionError):
        await expect_eventually(observe, bool, message="never", expected=True, timeout=0)

    assert calls == 1
