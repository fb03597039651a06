"""Unit tests for with_retries."""

import pytest

from youagent.errors import ConnectorError, RateLimited, UpstreamFailure
from youagent.utils.retry import with_retries


class _Flaky:
    def __init__(self, *errors: Exception) -> None:
        self.errors = list(errors)
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return "ok"


def test_returns_first_success() -> None:
    fn = _Flaky()
    assert with_retries(fn) == "ok"
    assert fn.calls == 1


def test_rate_limit_backs_off_exponentially() -> None:
    delays: list[float] = []
    fn = _Flaky(RateLimited("slow down"), RateLimited("slow down"))
    assert with_retries(fn, attempts=3, base_delay=0.5, sleep=delays.append) == "ok"
    assert delays == [0.5, 1.0]


def test_upstream_failure_retried_without_sleep() -> None:
    delays: list[float] = []
    fn = _Flaky(ConnectorError("reset"))
    assert with_retries(fn, sleep=delays.append) == "ok"
    assert delays == []
    assert fn.calls == 2


def test_last_error_reraised() -> None:
    fn = _Flaky(UpstreamFailure("1"), UpstreamFailure("2"))
    with pytest.raises(UpstreamFailure, match="2"):
        with_retries(fn, attempts=2, sleep=lambda _: None)


def test_other_errors_not_retried() -> None:
    fn = _Flaky(KeyError("boom"))
    with pytest.raises(KeyError):
        with_retries(fn)
    assert fn.calls == 1


def test_attempts_must_be_positive() -> None:
    with pytest.raises(ValueError):
        with_retries(lambda: None, attempts=0)
