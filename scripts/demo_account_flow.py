"""Demo: register, sign in and read the profile using FastAPI TestClient.

Run with:
    python scripts/demo_account_flow.py
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from accounts_service.main import app

ACCOUNT = {"name": "John Doe", "email": "john@x.com", "password": "123456"}


def main() -> None:
    client = TestClient(app)

    # ── Step 1: POST /accounts ──────────────────────────────────────
    r = client.post("/accounts", json=ACCOUNT)
    print(f"1. POST /accounts             → {r.status_code}  (created)")
    assert r.status_code == 201

    # ── Step 2: POST /accounts again ────────────────────────────────
    r = client.post("/accounts", json=ACCOUNT)
    print(f"2. POST /accounts (again)     → {r.status_code}  {r.json()['message']}")
    assert r.status_code == 400

    # ── Step 3: POST /sessions (bad creds) ──────────────────────────
    r = client.post(
        "/sessions", json={"email": ACCOUNT["email"], "password": "wrong"}
    )
    print(f"3. POST /sessions (bad creds) → {r.status_code}  {r.json()['message']}")
    assert r.status_code == 400

    # ── Step 4: POST /sessions (good creds) ─────────────────────────
    r = client.post(
        "/sessions",
        json={"email": ACCOUNT["email"], "password": ACCOUNT["password"]},
    )
    print(f"4. POST /sessions (good)      → {r.status_code}  (access token issued)")
    assert r.status_code == 201
    token = r.json()["access_token"]

    # ── Step 5: GET /me ─────────────────────────────────────────────
    r = client.get("/me", headers={"Authorization": f"Bearer {token}"})
    print(f"5. GET  /me                   → {r.status_code}  {r.json()['email']}")
    assert r.status_code == 200

    print("\nAccount flow completed.")


if __name__ == "__main__":
    main()
