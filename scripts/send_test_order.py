#!/usr/bin/env python3
"""
Dev helper: trigger the /newOrder webhook on a locally running backend.

Sends the same GET request Squarespace-side automation sends after checkout,
so the whole pipeline (order lookup, dedup check, emails, record) can be
exercised against a real store.

Usage
-----
# Order 1001 placed by jane@example.com, backend on localhost:$PORT (default 3000)
python scripts/send_test_order.py --order-id 1001 --email jane@example.com

# Target a different backend URL
python scripts/send_test_order.py --order-id 1001 --email jane@example.com \
    --url http://staging.example.com

# Print the request URL without sending it
python scripts/send_test_order.py --order-id 1001 --email jane@example.com --dry-run

Exit status is 0 for 200 and 207 responses, 1 otherwise.
"""

import argparse
import os
import sys
import textwrap
from pathlib import Path

import httpx
from dotenv import load_dotenv


def _print_response(response: httpx.Response) -> None:
    status = response.status_code
    if status == 200:
        symbol = "OK"
    elif status == 207:
        symbol = "PARTIAL"
    else:
        symbol = "FAIL"
    print(f"\n[{symbol}] HTTP {status}")
    print(response.text.rstrip())


def main() -> int:
    # scripts/ lives one level below the project root
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    load_dotenv(project_root / "backend" / ".env")

    parser = argparse.ArgumentParser(
        prog="send_test_order.py",
        description=textwrap.dedent("""\
            Trigger GET /newOrder on the Order Notifier backend.

            The default URL uses PORT from the environment or a .env file in
            the project root.
        """),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--url",
        default=f"http://localhost:{os.getenv('PORT', '3000')}",
        help="Backend base URL (default: http://localhost:$PORT)",
    )
    parser.add_argument(
        "--order-id",
        required=True,
        help="Squarespace order number, as shown to the customer.",
    )
    parser.add_argument(
        "--email",
        required=True,
        help="Email address the order was placed with.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=60.0,
        help="Request timeout in seconds (default: 60).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the request URL without sending it.",
    )

    args = parser.parse_args()

    endpoint = f"{args.url.rstrip('/')}/newOrder"
    params = {"orderId": args.order_id, "customerEmailAddress": args.email}

    print(f"Endpoint : {endpoint}")
    print(f"Order    : {args.order_id}")
    print(f"Customer : {args.email}")

    if args.dry_run:
        print(f"\n[DRY RUN] GET {httpx.URL(endpoint, params=params)}")
        return 0

    try:
        response = httpx.get(endpoint, params=params, timeout=args.timeout)
    except httpx.ConnectError:
        print(
            f"\nERROR: Could not connect to {endpoint}\n"
            "Is the backend running? Start it with:\n"
            "  order-notifier   (or: cd backend && uvicorn app.main:app --port 3000)",
            file=sys.stderr,
        )
        return 1
    except httpx.HTTPError as exc:
        print(f"\nERROR: {exc}", file=sys.stderr)
        return 1

    _print_response(response)
    return 0 if response.status_code in (200, 207) else 1


if __name__ == "__main__":
    sys.exit(main())
