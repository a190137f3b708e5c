"""
Register a batch of student accounts against the API and write a CSV for Locust.

Usage:

  python load/register_test_users.py \
    --host http://localhost:8000 \
    --prefix student \
    --domain example.edu \
    --count 50 \
    --password secret123 \
    --outfile load/test_users.csv

Then point EDUFORGE_STUDENTS at the generated credentials, or keep the file
at load/test_users.csv where locustfile.py picks it up.
"""

from __future__ import annotations

import argparse
import os
from typing import List

import requests


def make_user_payload(email: str, password: str, idx: int) -> dict:
    return {
        "email": email,
        "password": password,
        "name": f"Load Student {idx}",
        "phone": None,
    }


def register_users(host: str, emails: List[str], password: str) -> None:
    url = host.rstrip("/") + "/auth/register"
    s = requests.Session()
    created = 0
    exists = 0
    failed: List[str] = []
    for i, email in enumerate(emails, 1):
        try:
            r = s.post(url, json=make_user_payload(email, password, i), timeout=15)
        except requests.RequestException as exc:
            failed.append(email)
            print(f"ERROR registering {email}: {exc}")
            continue
        if r.status_code in (200, 201):
            created += 1
        elif r.status_code == 409:
            exists += 1
        else:
            failed.append(email)
            print(f"ERROR {r.status_code} registering {email}: {r.text[:200]}")
    print(f"Done. created={created} exists={exists} failed={len(failed)}")
    if failed:
        print("Failed emails:", ", ".join(failed))


def write_csv(path: str, emails: List[str], password: str) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for e in emails:
            f.write(f"{e}:{password}\n")
    print(f"Wrote {len(emails)} creds to {path}")


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--host", required=True, help="API host, e.g. http://localhost:8000")
    ap.add_argument("--prefix", default="student", help="Local part prefix, e.g. 'student' -> student1@...")
    ap.add_argument("--domain", default="example.edu", help="Email domain")
    ap.add_argument("--start", type=int, default=1, help="Starting index (inclusive)")
    ap.add_argument("--count", type=int, default=50, help="Number of students to create")
    ap.add_argument("--password", default="secret123", help="Password for all students")
    ap.add_argument("--outfile", default="load/test_users.csv", help="Output CSV (email:password per line)")
    args = ap.parse_args()

    emails = [f"{args.prefix}{i}@{args.domain}" for i in range(args.start, args.start + args.count)]

    print(f"Registering {len(emails)} students at {args.host} ...")
    register_users(args.host, emails, args.password)
    write_csv(args.outfile, emails, args.password)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
