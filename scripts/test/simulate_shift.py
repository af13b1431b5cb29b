# scripts/test/simulate_shift.py
"""
Drive one job through its lifecycle against a running backend.
Needs the default roster (init_db.py --seed).

Usage: python scripts/test/simulate_shift.py --vin 1FTFW1E50PFA00001 [--qc] [--fail-qc-first]
"""

import argparse
import requests

BACKEND_URL = "http://localhost:8080/api/v1"


def login(pin):
    resp = requests.post(f"{BACKEND_URL}/auth/login", json={"pin": pin}, timeout=10)
    resp.raise_for_status()
    body = resp.json()
    print(f"Logged in as {body['identity']['displayName']} ({body['identity']['role']})")
    return {"Authorization": f"Bearer {body['accessToken']}"}


def call(headers, path, payload=None):
    resp = requests.post(f"{BACKEND_URL}{path}", json=payload or {}, headers=headers, timeout=10)
    body = resp.json()
    if resp.status_code >= 400:
        print(f"{path} → HTTP {resp.status_code}: {body}")
        return None
    print(f"{path} → {body['status']} (paused {body['pauseDurationMinutes']}m, "
          f"duration {body['durationMinutes']})")
    return body


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simulate a detailer shift")
    parser.add_argument("--vin", default="1FTFW1E50PFA00001")
    parser.add_argument("--detailer-pin", default="1716")
    parser.add_argument("--helper-id", type=int, default=None, help="user id of a second detailer")
    parser.add_argument("--qc-pin", default="2001")
    parser.add_argument("--qc", action="store_true", help="create the job with qcRequired")
    parser.add_argument("--fail-qc-first", action="store_true")
    args = parser.parse_args()

    detailer = login(args.detailer_pin)
    resp = requests.post(f"{BACKEND_URL}/jobs", headers=detailer, timeout=10, json={
        "vin": args.vin, "serviceType": "Detail", "qcRequired": args.qc,
    })
    resp.raise_for_status()
    job = resp.json()
    print(f"Created job {job['id']} → {job['status']}")

    call(detailer, f"/jobs/{job['id']}/start")
    if args.helper_id:
        call(detailer, f"/jobs/{job['id']}/add-technician", {"technicianId": args.helper_id})
    call(detailer, f"/jobs/{job['id']}/pause", {"reason": "Waiting on parts"})
    call(detailer, f"/jobs/{job['id']}/start")
    call(detailer, f"/jobs/{job['id']}/complete")

    # Detailers cannot sign off their own work
    call(detailer, f"/jobs/{job['id']}/qc", {"passed": True})

    if args.qc:
        reviewer = login(args.qc_pin)
        if args.fail_qc_first:
            call(reviewer, f"/jobs/{job['id']}/qc", {"passed": False, "notes": "Streaks on windshield"})
        call(reviewer, f"/jobs/{job['id']}/qc", {"passed": True, "notes": "Looks good"})
