#!/usr/bin/env python3
"""
Back-office Assistant — command-line client
===========================================

Usage:
    python ask.py "<query>" [base_url]

Example:
    python ask.py "how much rent in july"
    python ask.py "show projects from Nadeem & sons" http://localhost:8000

Posts the query to ``/api/ai/query`` on a running service and prints the
assistant envelope (type, message, records, optional aiResponse).
"""

import json
import sys

import requests

BASE_URL = "http://localhost:8000"

SEPARATOR = "=" * 70
DASH = "-" * 40
PREVIEW_ROWS = 5


def colour(text, code):
    """ANSI colour wrapper (no-op on Windows without colorama)."""
    return f"\033[{code}m{text}\033[0m"


def green(t):  return colour(t, 32)
def red(t):    return colour(t, 31)
def yellow(t): return colour(t, 33)
def cyan(t):   return colour(t, 36)
def bold(t):   return colour(t, 1)


def print_envelope(envelope):
    print(f"\n{SEPARATOR}")
    print(bold(f"  Query: \"{envelope.get('query')}\""))
    print(SEPARATOR)

    print(f"  {bold('Type:')}    {cyan(envelope.get('type'))}")
    print(f"  {bold('Message:')} {green(envelope.get('message'))}")

    data = envelope.get("data")
    print(f"\n{DASH}")
    if data is None:
        print(f"  {yellow('No data')}")
    elif isinstance(data, list):
        print(bold(f"  {len(data)} record(s)"))
        for i, row in enumerate(data[:PREVIEW_ROWS], 1):
            print(f"    {i}: {json.dumps(row, default=str)[:300]}")
        if len(data) > PREVIEW_ROWS:
            print(f"    … {len(data) - PREVIEW_ROWS} more")
    else:
        for key, value in data.items():
            print(f"    {key}: {value}")

    if envelope.get("aiResponse"):
        print(f"\n{DASH}")
        print(bold("  AI response"))
        print(f"    {envelope['aiResponse']}")

    print(SEPARATOR)


def ask(query, base_url=BASE_URL, user_id=None):
    headers = {"X-User-Id": user_id} if user_id else {}
    resp = requests.post(
        f"{base_url}/api/ai/query",
        json={"query": query},
        headers=headers,
        timeout=30,
    )
    if resp.status_code != 200:
        detail = resp.json().get("detail", resp.text)
        raise RuntimeError(f"{resp.status_code}: {detail}")
    return resp.json()


def main():
    if len(sys.argv) < 2:
        print(bold("Back-office Assistant CLI"))
        print()
        print("Usage:")
        print(f"  python {sys.argv[0]} \"<query>\" [base_url]")
        print()
        print("Examples:")
        print(f'  python {sys.argv[0]} "show projects from Nadeem & sons"')
        print(f'  python {sys.argv[0]} "list active investments above 100000"')
        print(f'  python {sys.argv[0]} "give me an overview"')
        print()
        query = input("  Query: ").strip()
        base_url = BASE_URL
    else:
        query = sys.argv[1]
        base_url = sys.argv[2] if len(sys.argv) > 2 else BASE_URL

    if not query:
        print(red("Error: a query is required"))
        sys.exit(1)

    try:
        envelope = ask(query, base_url)
    except requests.RequestException:
        print(red(f"Cannot reach server at {base_url}. Is uvicorn running?"))
        sys.exit(1)
    except RuntimeError as e:
        print(red(f"Server error {e}"))
        sys.exit(1)

    print_envelope(envelope)


if __name__ == "__main__":
    main()
