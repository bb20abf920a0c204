"""
DiaryPlus Backend — Middleware Tests
======================================

What we test:
    ✅ Sliding window limiter: allows up to the limit, then returns Retry-After
    ✅ Window expiry and idle-key cleanup
    ✅ Access log level and client IP resolution
"""

import logging
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from diaryplus.middleware.logging import client_ip_of, level_for_status
from diaryplus.middleware.rate_limit import SlidingWindowLimiter


def make_limiter(limit=3, window=60):
    return SlidingWindowLimiter(limit=lambda: limit, window=lambda: window, name="test")


class TestSlidingWindowLimiter:

    def test_allows_up_to_limit(self):
        limiter = make_limiter(limit=3)
        with patch("diaryplus.middleware.rate_limit.time.time", return_value=1000.0):
            assert [limiter.hit("1.2.3.4") for _ in range(3)] == [0, 0, 0]
            assert limiter.hit("1.2.3.4") == 61

    def test_keys_are_independent(self):
        limiter = make_limiter(limit=1)
        with patch("diaryplus.middleware.rate_limit.time.time", return_value=1000.0):
            assert limiter.hit("a") == 0
            assert limiter.hit("b") == 0
            assert limiter.hit("a") > 0

    def test_window_slides(self):
        limiter = make_limiter(limit=2, window=10)
        clock = "diaryplus.middleware.rate_limit.time.time"
        with patch(clock, return_value=100.0):
            limiter.hit("ip")
        with patch(clock, return_value=105.0):
            limiter.hit("ip")
            assert limiter.hit("ip") == 6
        # The first hit has left the window, the second has not
        with patch(clock, return_value=110.5):
            assert limiter.hit("ip") == 0
            assert limiter.hit("ip") > 0

    def test_cleanup_drops_idle_keys(self):
        limiter = make_limiter(limit=5, window=10)
        limiter.CLEANUP_EVERY = 2
        clock = "diaryplus.middleware.rate_limit.time.time"
        with patch(clock, return_value=0.0):
            limiter.hit("idle")
        with patch(clock, return_value=100.0):
            limiter.hit("active")
        assert "idle" not in limiter._hits
        assert "active" in limiter._hits

    def test_reset(self):
        limiter = make_limiter(limit=1)
        limiter.hit("ip")
        limiter.reset()
        assert limiter.hit("ip") == 0


class TestAccessLogHelpers:

    @pytest.mark.parametrize(
        "status,level",
        [(200, logging.INFO), (304, logging.INFO), (404, logging.WARNING), (503, logging.ERROR)],
    )
    def test_level_for_status(self, status, level):
        assert level_for_status(status) == level

    def test_forwarded_for_first_hop(self):
        request = SimpleNamespace(
            headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"},
            client=SimpleNamespace(host="10.0.0.1"),
        )
        assert client_ip_of(request) == "203.0.113.9"

    def test_socket_peer_without_proxy(self):
        request = SimpleNamespace(headers={}, client=SimpleNamespace(host="127.0.0.1"))
        assert client_ip_of(request) == "127.0.0.1"

    def test_unknown_client(self):
        assert client_ip_of(SimpleNamespace(headers={}, client=None)) == "unknown"
