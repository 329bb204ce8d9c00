"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags contention   # Many requests, one wallet
  locust -f locustfile.py --tags throughput   # Test cache
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import random
from locust import HttpUser, task, between, tag, events

# Shared state
BUSES = []
SHARED_WALLET = {}

PASSWORD = "loadtest123"


def random_email():
    return f"load_{random.randint(100000, 999999)}@test.com"


def register_and_login(client, email):
    client.post("/api/v1/auth/register", json={
        "name": email.split("@")[0],
        "email": email,
        "password": PASSWORD,
    }, name="/api/v1/auth/register")
    resp = client.post("/api/v1/auth/login", json={
        "email": email,
        "password": PASSWORD,
    })
    if resp.status_code != 200:
        return {}
    return {"Authorization": f"Bearer {resp.json()['accessToken']}"}


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print("SETUP: buses are read from the seeded catalog (python seed_data.py)")
    print("=" * 60)


class ContentionUser(HttpUser):
    """
    TEST 1: Contention - every user spends from ONE wallet

    Run: locust -f locustfile.py --tags contention -u 100 -r 50 --run-time 30s

    All users log in to the same account and book with the opening balance
    as their (stale) snapshot. After test, verify:
      SELECT wallet_balance FROM profiles WHERE email = '<shared email>';   -- >= 0
      SELECT SUM(amount) FROM bookings WHERE user_id = '<id>';
    Opening balance == balance + sum of bookings.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        if not SHARED_WALLET:
            SHARED_WALLET["email"] = random_email()
            SHARED_WALLET["headers"] = register_and_login(self.client, SHARED_WALLET["email"])
            print(f"\nShared wallet: {SHARED_WALLET['email']}\n")
        self.headers = SHARED_WALLET["headers"]

        if not BUSES:
            resp = self.client.get("/api/v1/buses/")
            if resp.status_code == 200:
                BUSES.extend(resp.json()["buses"])

    @tag("contention")
    @task
    def book_from_shared_wallet(self):
        if not BUSES or not self.headers:
            return

        bus = random.choice(BUSES)
        with self.client.post("/api/v1/bookings/",
            json={"bus": {"id": bus["id"], "fare": bus["fare"]}, "walletBalance": 5000},
            headers=self.headers,
            catch_response=True
        ) as resp:
            if resp.status_code in (201, 402):
                resp.success()  # 402: wallet drained, expected
            elif resp.status_code == 503:
                resp.failure("Transaction failed: " + resp.json().get("reason", ""))
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false, run again

    Compare:
      - Avg response time
      - Requests/sec
      - P95/P99 latency
    """
    wait_time = between(0.1, 0.5)

    ROUTES = [("Bengaluru", None), ("Mumbai", "Pune"), (None, "Manali"), (None, None)]

    @tag("throughput", "read")
    @task(10)
    def search_buses_cached(self):
        from_city, to_city = random.choice(self.ROUTES)
        params = {k: v for k, v in (("from_city", from_city), ("to_city", to_city)) if v}
        self.client.get("/api/v1/buses/", params=params, name="/api/v1/buses/ [cached]")

    @tag("throughput", "read")
    @task(3)
    def get_bus_detail(self):
        if BUSES:
            bus = random.choice(BUSES)
            self.client.get(f"/api/v1/buses/{bus['id']}", name="/api/v1/buses/{id}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = register_and_login(self.client, random_email())

    @tag("edge")
    @task
    def unknown_bus(self):
        with self.client.post("/api/v1/bookings/",
            json={"bus": {"id": "no-such-bus", "fare": 100}, "walletBalance": 5000},
            headers=self.headers,
            catch_response=True
        ) as resp:
            if resp.status_code == 404:
                resp.success()
            else:
                resp.failure(f"Expected 404, got {resp.status_code}")

    @tag("edge")
    @task
    def negative_balance_snapshot(self):
        if not BUSES:
            return
        bus = BUSES[0]
        with self.client.post("/api/v1/bookings/",
            json={"bus": {"id": bus["id"], "fare": bus["fare"]}, "walletBalance": -5},
            headers=self.headers,
            catch_response=True
        ) as resp:
            if resp.status_code == 422:
                resp.success()
            else:
                resp.failure(f"Expected 422, got {resp.status_code}")

    @tag("edge")
    @task
    def fractional_fare(self):
        with self.client.post("/api/v1/bookings/",
            json={"bus": {"id": "x", "fare": 10.5}, "walletBalance": 100},
            headers=self.headers,
            catch_response=True
        ) as resp:
            if resp.status_code == 422:
                resp.success()
            else:
                resp.failure(f"Expected 422, got {resp.status_code}")

    @tag("edge")
    @task
    def invalid_token(self):
        with self.client.get("/api/v1/wallet",
            headers={"Authorization": "Bearer invalid-token"},
            catch_response=True
        ) as resp:
            if resp.status_code == 401:
                resp.success()
            else:
                resp.failure(f"Expected 401, got {resp.status_code}")
