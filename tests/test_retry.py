from __future__ import annotations

import pytest

from pathfinder.retry import backoff_delay, retry


class Flaky:
    def __init__(self, failures: int, exc: type[Exception] = ConnectionError) -> None:
        self.failures = failures
        self.exc = exc
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc("boom")
        return "ok"


def test_retries_until_success():
    flaky = Flaky(failures=2)
    wrapped = retry(max_attempts=3, base_delay=0, jitter=False)(flaky)
    assert wrapped() == "ok"
    assert flaky.calls == 3


def test_reraises_after_last_attempt():
    flaky = Flaky(failures=5)
    wrapped = retry(max_attempts=2, base_delay=0, jitter=False)(flaky)
    with pytest.raises(ConnectionError):
        wrapped()
    assert flaky.calls == 2


def test_non_retryable_errors_propagate_immediately():
    flaky = Flaky(failures=1, exc=KeyError)
    wrapped = retry(max_attempts=3, base_delay=0, retryable=(ConnectionError,))(flaky)
    with pytest.raises(KeyError):
        wrapped()
    assert flaky.calls == 1


def test_backoff_grows_and_is_capped():
    delays = [backoff_delay(n, 1.0, 5.0, 2.0, jitter=False) for n in (1, 2, 3, 4)]
    assert delays == [1.0, 2.0, 4.0, 5.0]


def test_jitter_stays_within_half_to_one_and_a_half(monkeypatch):
    monkeypatch.setattr("pathfinder.retry.random.random", lambda: 0.0)
    assert backoff_delay(2, 1.0, 30.0, 2.0, jitter=True) == 1.0
    monkeypatch.setattr("pathfinder.retry.random.random", lambda: 1.0)
    assert backoff_delay(2, 1.0, 30.0, 2.0, jitter=True) == 3.0
