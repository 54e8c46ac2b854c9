"""
Unit tests for the rate-limit governor.
"""

import threading

import pytest

from ticket_classifier.concurrency.governor import RateLimitGovernor


class TestConcurrencyLevel:
    """Test suite for adaptive concurrency."""

    def test_starts_at_max(self, governor):
        assert governor.current_concurrency() == 4

    def test_throttle_shrinks_by_one(self, governor):
        governor.record_throttle()
        assert governor.current_concurrency() == 3

    def test_throttle_floor_is_one(self, governor):
        for _ in range(10):
            governor.record_throttle()
        assert governor.current_concurrency() == 1

    def test_increase_ceiling_is_max(self, governor):
        governor.record_throttle()
        governor.increase_concurrency()
        governor.increase_concurrency()
        assert governor.current_concurrency() == 4

    def test_reset_restores_initial_state(self, governor):
        governor.record_throttle()
        governor.record_success()

        governor.reset()

        state = governor.snapshot()
        assert state.current_level == 4
        assert state.last_throttle_at is None
        assert state.requests_in_window == 0
        assert governor.is_throttled() is False

    def test_invalid_max_concurrency(self):
        with pytest.raises(ValueError):
            RateLimitGovernor(max_concurrency=0)

    def test_from_settings(self, test_settings, fake_clock):
        test_settings.AI_CONCURRENT_REQUESTS = 2
        test_settings.AI_RPM_LIMIT = 5
        governor = RateLimitGovernor.from_settings(test_settings, clock=fake_clock)

        assert governor.current_concurrency() == 2
        assert governor.rpm_limit == 5


class TestThrottleWindow:
    """Test suite for throttle detection and the recommended delay."""

    def test_not_throttled_initially(self, governor):
        assert governor.is_throttled() is False
        assert governor.recommended_delay() == 0.0

    def test_throttled_for_sixty_seconds(self, governor, fake_clock):
        governor.record_throttle()
        assert governor.is_throttled() is True

        fake_clock.advance(59)
        assert governor.is_throttled() is True

        fake_clock.advance(1)
        assert governor.is_throttled() is False

    def test_delay_decays_linearly(self, governor, fake_clock):
        governor.record_throttle()
        assert governor.recommended_delay() == pytest.approx(5.0)

        fake_clock.advance(30)
        assert governor.recommended_delay() == pytest.approx(2.5)

        fake_clock.advance(30)
        assert governor.recommended_delay() == pytest.approx(0.0)

    def test_base_delay_outside_throttle_window(self, fake_clock):
        governor = RateLimitGovernor(base_delay_ms=250, clock=fake_clock)
        assert governor.recommended_delay() == pytest.approx(0.25)

    def test_throttled_failure_stamps_time_without_shrinking(self, governor):
        governor.record_failure(throttled=True)

        assert governor.is_throttled() is True
        assert governor.current_concurrency() == 4

    def test_plain_failure_does_not_throttle(self, governor):
        governor.record_failure()
        assert governor.is_throttled() is False


class TestRequestWindow:
    """Test suite for the RPM budget."""

    def test_rpm_budget_exhausted(self, fake_clock):
        governor = RateLimitGovernor(rpm_limit=3, clock=fake_clock)
        governor.record_success()
        governor.record_failure()
        assert governor.is_throttled() is False

        governor.record_success()
        assert governor.is_throttled() is True

    def test_window_rolls_over(self, fake_clock):
        governor = RateLimitGovernor(rpm_limit=2, clock=fake_clock)
        governor.record_success()
        governor.record_success()
        assert governor.is_throttled() is True

        fake_clock.advance(60)
        assert governor.is_throttled() is False
        assert governor.snapshot().requests_in_window == 0

        governor.record_success()
        assert governor.snapshot().requests_in_window == 1

    def test_window_is_fixed_from_its_start(self, fake_clock):
        governor = RateLimitGovernor(rpm_limit=2, clock=fake_clock)
        governor.record_success()
        fake_clock.advance(50)
        governor.record_success()
        assert governor.is_throttled() is True

        # The request at t=50 does not carry over into the next window
        fake_clock.advance(10)
        assert governor.is_throttled() is False

        fake_clock.advance(1)
        governor.record_success()
        state = governor.snapshot()
        assert state.requests_in_window == 1
        assert state.window_started_at == fake_clock.now()


def test_concurrent_signals_are_not_lost(fake_clock):
    governor = RateLimitGovernor(max_concurrency=4, rpm_limit=100_000, clock=fake_clock)

    def worker():
        for _ in range(250):
            governor.record_success()

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert governor.snapshot().requests_in_window == 2000
