"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Test oversell protection
  locust -f locustfile.py --tags throughput   # Test listing cache
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests

The concurrency scenario signs in as the seeded admin (ADMIN_EMAIL /
ADMIN_PASSWORD env vars) to create a 10-ticket event.
"""

import os
import random
from locust import HttpUser, task, between, tag
from datetime import datetime, timezone, timedelta

ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin123")
CONCURRENCY_TICKETS = 10

# Shared state
EVENT_IDS = []
CONCURRENCY_EVENT_ID = None


def random_email():
    return f"load_{random.randint(100000, 999999)}@test.com"


def sign_up(client) -> dict:
    resp = client.post("/api/v1/auth/signup", json={
        "email": random_email(),
        "password": "test12345",
        "first_name": "Load",
        "last_name": "Test",
    })
    if resp.status_code == 201:
        return {"Authorization": f"Bearer {resp.json()['token']}"}
    return {}


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - many users -> 10 tickets

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After the run, GET /api/v1/events/{id} must show available_tickets == 0
    and GET /api/v1/admin/events must show bookings_count == 10.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        global CONCURRENCY_EVENT_ID
        self.headers = sign_up(self.client)

        if CONCURRENCY_EVENT_ID is None:
            resp = self.client.post("/api/v1/auth/signin", json={
                "email": ADMIN_EMAIL,
                "password": ADMIN_PASSWORD,
            })
            if resp.status_code != 200:
                return
            admin_headers = {"Authorization": f"Bearer {resp.json()['token']}"}
            future = (datetime.now(timezone.utc) + timedelta(days=30)).isoformat()
            resp = self.client.post("/api/v1/admin/events",
                json={
                    "title": "Concurrency Test Event",
                    "description": f"{CONCURRENCY_TICKETS} tickets only",
                    "date": future,
                    "location": "Test",
                    "price": 10,
                    "capacity": CONCURRENCY_TICKETS,
                },
                headers=admin_headers,
            )
            if resp.status_code == 201:
                CONCURRENCY_EVENT_ID = resp.json()["event"]["id"]

    @tag("concurrency")
    @task
    def book_limited_tickets(self):
        """All users fight for the same 10 tickets."""
        if not CONCURRENCY_EVENT_ID or not self.headers:
            return

        with self.client.post(f"/api/v1/events/{CONCURRENCY_EVENT_ID}/book",
            json={"quantity": 1},
            headers=self.headers,
            catch_response=True,
            name="/api/v1/events/{id}/book",
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()  # 409: sold out or retries exhausted
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - listing cache effectiveness

    Run once with Redis and once with REDIS_ENABLED=false, then compare
    average and P95 latency of the listing endpoint.
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_events(self):
        category = random.choice(["", "Concert", "Conference", "Workshop", "Sports"])
        resp = self.client.get(f"/api/v1/events?category={category}", name="/api/v1/events [cached]")
        if resp.status_code == 200:
            for event in resp.json().get("events", []):
                if event["id"] not in EVENT_IDS:
                    EVENT_IDS.append(event["id"])

    @tag("throughput", "read")
    @task(3)
    def get_event_detail(self):
        if EVENT_IDS:
            self.client.get(f"/api/v1/events/{random.choice(EVENT_IDS)}", name="/api/v1/events/{id}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - bad input must give 4xx, never 5xx

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = sign_up(self.client)

    def _expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_event(self):
        with self.client.post("/api/v1/bookings", json={"event_id": "missing", "quantity": 1},
                              headers=self.headers, catch_response=True) as resp:
            self._expect(resp, [404])

    @tag("edge")
    @task
    def zero_quantity(self):
        with self.client.post("/api/v1/bookings", json={"event_id": "1", "quantity": 0},
                              headers=self.headers, catch_response=True) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def huge_quantity(self):
        with self.client.post("/api/v1/bookings", json={"event_id": "1", "quantity": 999999},
                              headers=self.headers, catch_response=True) as resp:
            self._expect(resp, [404, 409])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/v1/bookings", data="not json at all",
                              headers=self.headers, catch_response=True) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def missing_auth(self):
        with self.client.post("/api/v1/bookings", json={"event_id": "1", "quantity": 1},
                              catch_response=True) as resp:
            self._expect(resp, [401])
