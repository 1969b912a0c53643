"""Tests for per-client rate limiting on /api routes."""
from fastapi.testclient import TestClient

from schedule_pricing.api.main import create_app
from schedule_pricing.api.rate_limit import SlidingWindowRateLimiter
from schedule_pricing.config.settings import Settings

URL = "/api/v1/calculate-schedule-price"
BODY = {
    "periodStartDate": "2024-01-01T00:00:00.000Z",
    "periodLength": 7,
    "periodType": "day",
    "items": [{"itemReference": "PAPER", "unitPrice": 1, "schedule": {"monday": True}}],
}


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_limiter_blocks_after_limit():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(limit=5, window_seconds=10, clock=clock)

    results = [limiter.check("10.0.0.1") for _ in range(5)]
    assert all(r.allowed for r in results)
    assert [r.remaining for r in results] == [4, 3, 2, 1, 0]

    blocked = limiter.check("10.0.0.1")
    assert blocked.allowed is False
    assert blocked.retry_after == 10


def test_limiter_window_slides():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(limit=2, window_seconds=10, clock=clock)

    limiter.check("a")
    clock.now += 4
    limiter.check("a")

    clock.now += 3.5
    blocked = limiter.check("a")
    assert blocked.allowed is False
    assert blocked.retry_after == 2

    # first admission has left the window, second has not
    clock.now += 2.5
    assert limiter.check("a").allowed is True
    assert limiter.check("a").allowed is False


def test_limiter_keys_are_independent():
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=10, clock=FakeClock())
    assert limiter.check("a").allowed is True
    assert limiter.check("b").allowed is True
    assert limiter.check("a").allowed is False


def test_middleware_returns_429_with_retry_after():
    client = TestClient(create_app(settings=Settings()))

    for _ in range(5):
        assert client.post(URL, json=BODY).status_code == 200

    response = client.post(URL, json=BODY)
    assert response.status_code == 429
    assert response.json() == {"errorMessage": "Blocked due to too many requests"}
    assert 0 <= int(response.headers["retry-after"]) <= 10


def test_middleware_keys_on_forwarded_address():
    client = TestClient(create_app(settings=Settings(rate_limit_requests=1)))

    assert client.post(URL, json=BODY, headers={"x-forwarded-for": "203.0.113.7, 10.0.0.1"}).status_code == 200
    assert client.post(URL, json=BODY, headers={"x-forwarded-for": "203.0.113.7"}).status_code == 429
    assert client.post(URL, json=BODY, headers={"x-forwarded-for": "198.51.100.2"}).status_code == 200


def test_rejected_calls_count_even_when_invalid():
    client = TestClient(create_app(settings=Settings(rate_limit_requests=1)))

    assert client.post(URL, json={}).status_code == 400
    assert client.post(URL, json=BODY).status_code == 429


def test_root_is_not_limited():
    client = TestClient(create_app(settings=Settings(rate_limit_requests=1)))
    assert all(client.get("/").status_code == 200 for _ in range(3))


def test_limiting_can_be_disabled():
    client = TestClient(create_app(settings=Settings(rate_limit_enabled=False, rate_limit_requests=1)))
    assert all(client.post(URL, json=BODY).status_code == 200 for _ in range(3))


def test_idle_keys_are_evicted_after_window():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(limit=5, window_seconds=10, clock=clock)
    for i in range(1000):
        limiter.check(f"198.51.100.{i}")
    assert limiter.tracked_keys == 1000

    clock.now += 1000
    assert limiter.check("203.0.113.7").allowed is True
    assert limiter.tracked_keys == 1


def test_active_keys_survive_sweep():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(limit=1, window_seconds=10, clock=clock)
    limiter.check("idle")
    clock.now += 6
    limiter.check("busy")

    clock.now += 5
    limiter.check("other")

    assert limiter.tracked_keys == 2
    assert limiter.check("busy").allowed is False


def test_blocked_response_carries_cors_headers():
    client = TestClient(create_app(settings=Settings(rate_limit_requests=1)))
    headers = {"origin": "https://shop.example.com"}

    client.post(URL, json=BODY, headers=headers)
    response = client.post(URL, json=BODY, headers=headers)

    assert response.status_code == 429
    assert response.headers["access-control-allow-origin"] == "*"
    assert "retry-after" in response.headers["access-control-expose-headers"].lower()
