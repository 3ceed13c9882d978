"""
ParuShop - API Smoke Scenarios
===============================
Runs the main flows against a live server: Auth, Catalog, Cart.
Requires seed data (python scripts/seed.py).

Usage:
    python scripts/smoke_api.py [BASE_URL]
"""
import sys
import uuid

import httpx

BASE = (sys.argv[1] if len(sys.argv) > 1 else "http://127.0.0.1:8005").rstrip("/")
API = f"{BASE}/api/v1"
results = []


def report(test_id, desc, passed, note=""):
    status = "PASS" if passed else "FAIL"
    results.append((test_id, desc, status, note))
    icon = "✅" if passed else "❌"
    print(f"  {icon} {test_id}: {desc} {'- ' + note if note else ''}")


def section(title):
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)


def data_of(r):
    try:
        return r.json().get("data") or {}
    except ValueError:
        return {}


# ============================================================
section("SM-01: Auth")

email = f"smoke-{uuid.uuid4().hex[:8]}@parushop.io"
client = httpx.Client(base_url=API, timeout=15)

r = client.post("/users/register", json={"name": "Smoke Tester", "email": email, "password": "smoke-pass-1"})
report("SM-01-01", "Register new user", r.status_code == 201, f"status={r.status_code}")

r = client.post("/users/register", json={"name": "Smoke Tester", "email": email, "password": "smoke-pass-1"})
report("SM-01-02", "Duplicate email rejected", r.status_code == 409, f"status={r.status_code}")

r = client.post("/users/login", json={"email": email, "password": "wrong-password"})
report("SM-01-03", "Wrong password rejected", r.status_code == 401)

r = client.post("/users/login", json={"email": email, "password": "smoke-pass-1"})
report("SM-01-04", "Login sets accessToken cookie", r.status_code == 200 and "accessToken" in client.cookies)
access = data_of(r).get("accessToken", "")

r = client.get("/users/profile")
report("SM-01-05", "Profile via cookie", r.status_code == 200 and data_of(r).get("email") == email)

bearer = httpx.Client(base_url=API, timeout=15, headers={"Authorization": f"Bearer {access}"})
r = bearer.get("/users/profile")
report("SM-01-06", "Profile via Bearer header", r.status_code == 200)
bearer.close()

r = client.post("/users/refresh-token")
report("SM-01-07", "Refresh rotates tokens", r.status_code == 200 and bool(data_of(r).get("refreshToken")))


# ============================================================
section("SM-02: Catalog")

r = client.get("/products", params={"limit": 5, "sortBy": "price", "sortOrder": "asc"})
products = data_of(r).get("products", [])
report("SM-02-01", "Product list loads", r.status_code == 200 and len(products) > 0, f"count={len(products)}")

product_id = products[0]["id"] if products else 0
r = client.get(f"/products/{product_id}")
report("SM-02-02", "Product detail loads", r.status_code == 200)

r = client.get("/products/999999999")
report("SM-02-03", "Missing product -> 404", r.status_code == 404)


# ============================================================
section("SM-03: Cart")

anon = httpx.Client(base_url=API, timeout=15)
r = anon.get("/cart")
report("SM-03-01", "Cart without login -> 401", r.status_code == 401 and r.json().get("success") is False)
anon.close()

r = client.get("/cart")
report("SM-03-02", "Empty cart for new user", r.status_code == 200 and data_of(r).get("totalAmount") == 0)

client.post("/cart/add", json={"productId": product_id, "quantity": 2})
r = client.post("/cart/add", json={"productId": product_id, "quantity": 3})
items = data_of(r).get("items", [])
report("SM-03-03", "Same product accumulates", len(items) == 1 and items[0]["quantity"] == 5)

item_id = items[0]["id"] if items else 0
r = client.patch(f"/cart/item/{item_id}/adjust", json={"action": "decrease"})
report("SM-03-04", "Adjust decrease", r.status_code == 200 and data_of(r)["items"][0]["quantity"] == 4)

r = client.get(f"/cart/check/{product_id}")
report("SM-03-05", "Check product in cart", data_of(r) == {"isInCart": True, "quantity": 4})

r = client.delete("/cart/clear")
report("SM-03-06", "Clear cart", r.status_code == 200 and data_of(r).get("totalAmount") == 0)

r = client.post("/users/logout")
report("SM-03-07", "Logout", r.status_code == 200)

r = client.get("/cart")
report("SM-03-08", "Cart after logout -> 401", r.status_code == 401)

client.close()


# ============================================================
# Summary
# ============================================================
section("SUMMARY")

passed = sum(1 for r in results if r[2] == "PASS")
failed = sum(1 for r in results if r[2] == "FAIL")
total = len(results)

print(f"\n  Total: {total}  |  PASS: {passed}  |  FAIL: {failed}")
print()

if failed:
    print("  FAILED TESTS:")
    for tid, desc, status, note in results:
        if status == "FAIL":
            print(f"    {tid}: {desc} {note}")

sys.exit(0 if failed == 0 else 1)
