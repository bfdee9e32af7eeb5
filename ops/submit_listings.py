from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any
import urllib.request
import urllib.error


DEFAULT_BASE_URL = os.getenv("MARKETPLACE_BASE_URL", "http://localhost:8000")

DEFAULT_TIMEOUT_SECONDS = 30


def http_post(url: str, payload: dict[str, Any]) -> tuple[int, dict[str, Any]]:
    data = json.dumps(payload).encode("utf-8")
    req = urllib.request.Request(
        url=url,
        data=data,
        method="POST",
        headers={"Content-Type": "application/json"},
    )
    try:
        with urllib.request.urlopen(req, timeout=DEFAULT_TIMEOUT_SECONDS) as resp:
            raw = resp.read().decode("utf-8")
            return resp.status, (json.loads(raw) if raw else {})
    except urllib.error.HTTPError as e:
        body = e.read().decode("utf-8", errors="replace")
        try:
            parsed = json.loads(body) if body else {}
        except json.JSONDecodeError:
            parsed = {"error": body}
        return e.code, parsed


def load_submissions(path: str) -> list[dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    # accept either a bare list or {"listings": [...]}
    if isinstance(data, dict):
        data = data.get("listings", [])
    if not isinstance(data, list):
        raise ValueError("expected a list of listing submissions")
    return data


def main() -> int:
    p = argparse.ArgumentParser(description="Submit listings from a JSON seed file (they land in the review queue).")
    p.add_argument("--file", required=True, help="path to json file")
    p.add_argument("--base-url", default=DEFAULT_BASE_URL)
    p.add_argument("--dry-run", action="store_true", help="validate the file and print what would be sent")
    args = p.parse_args()

    try:
        submissions = load_submissions(args.file)
    except (OSError, ValueError) as e:
        print(f"Cannot read {args.file}: {e}", file=sys.stderr)
        return 2

    url = f"{args.base_url.rstrip('/')}/v1/listings"
    failures = 0
    for item in submissions:
        name = item.get("name", "<unnamed>")
        if args.dry_run:
            print(f"would submit: {name}")
            continue

        try:
            status, body = http_post(url, item)
        except urllib.error.URLError as e:
            print(f"Network error for {url}: {e}", file=sys.stderr)
            return 1

        if status == 201:
            print(f"submitted: {name} -> {body.get('slug')} (pending)")
        else:
            failures += 1
            print(f"FAILED {name}: HTTP {status} {body.get('error', '')}", file=sys.stderr)

    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
