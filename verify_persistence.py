"""
Persistence check against a real server process.

Registers a parcel, restarts the server and confirms the parcel survived.
Uses whatever DATABASE_URL the environment provides (tracker.db by default).
"""

import time
import subprocess
import httpx
import sys
import os
import signal

BASE_URL = "http://127.0.0.1:8000"
API_PREFIX = "/v1"
SERVER_CMD = [sys.executable, "-m", "uvicorn", "tracker.app.main:app", "--host", "127.0.0.1", "--port", "8000"]
SERVER_LOG = "verify_persistence.log"


def wait_for_server(retries=10, delay=2):
    url = f"{BASE_URL}/health"
    print(f"Waiting for server at {url}...")
    for i in range(retries):
        try:
            resp = httpx.get(url)
            if resp.status_code == 200:
                print("✅ Server is up!")
                return True
        except httpx.ConnectError:
            pass
        time.sleep(delay)
    print("❌ Server failed to start.")
    return False


def start_server(env=None):
    """Run uvicorn with its output appended to SERVER_LOG so it never blocks on a full pipe."""
    log_file = open(SERVER_LOG, "ab")
    proc = subprocess.Popen(SERVER_CMD, stdout=log_file, stderr=subprocess.STDOUT, env=env)
    proc.log_file = log_file
    return proc


def stop_server(proc):
    proc.send_signal(signal.SIGTERM)
    proc.wait()
    proc.log_file.close()


def print_server_log():
    with open(SERVER_LOG, encoding="utf-8", errors="replace") as f:
        print("Server Log:", f.read()[-4000:])


def run_verification():
    # 1. Start Server (First Run)
    print("\n--- [Step 1] Starting Server (Initial) ---")
    proc = start_server(env={**os.environ, "DB_ECHO": "True"})  # Enable echo to see SQL

    try:
        if not wait_for_server():
            print_server_log()
            raise Exception("Server start failed")

        # 2. Register Parcel
        print("\n--- [Step 2] Registering Parcel (Persistence Test) ---")
        resp = httpx.post(
            f"{BASE_URL}{API_PREFIX}/parcels",
            json={"client": 1000, "address": "Persistence st. 1"}
        )
        if resp.status_code != 201:
            print(f"❌ Registration Failed: {resp.status_code} {resp.text}")
            raise Exception("Registration failed")

        parcel = resp.json()
        print("✅ Parcel Registered Successfully")
        print(parcel)

    finally:
        print("\n--- [Step 3] Stopping Server ---")
        stop_server(proc)

    time.sleep(2)  # Wait for port release

    # 3. Restart Server
    print("\n--- [Step 4] Restarting Server (Verification) ---")
    proc2 = start_server()

    try:
        if not wait_for_server():
            print_server_log()
            raise Exception("Server restart failed")

        # 4. Read the parcel back
        print("\n--- [Step 5] Reading Parcel (Post-Restart) ---")
        resp = httpx.get(f"{BASE_URL}{API_PREFIX}/parcels/{parcel['number']}")
        if resp.status_code != 200 or resp.json() != parcel:
            print(f"❌ Parcel Lost (Persistence Issue?): {resp.status_code} {resp.text}")
            raise Exception("Parcel missing after restart")
        print("✅ Parcel Persisted")

        # 5. Clean up
        print("\n--- [Step 6] Deleting Parcel ---")
        resp = httpx.delete(f"{BASE_URL}{API_PREFIX}/parcels/{parcel['number']}")
        if resp.status_code == 204:
            print("✅ Parcel Deleted")
        else:
            print(f"❌ Delete Failed: {resp.status_code} {resp.text}")

    finally:
        print("\n--- [Step 7] Stopping Server ---")
        stop_server(proc2)


if __name__ == "__main__":
    run_verification()
