"""healthcheck: check that a running Lexis instance is serving.

Usage:
    lexis-healthcheck
    lexis-healthcheck --url http://lexis:3000/health --wait 30

Exits 0 when ``/health`` answers 200 and 1 otherwise, which makes it usable
as a container ``HEALTHCHECK`` command.  Without ``--url`` the check targets
the local listener on the port resolved from ``PORT``.
"""

from __future__ import annotations

import argparse
import sys
import time

import httpx

from lexis.config import load_settings

DEFAULT_TIMEOUT = 2.0
POLL_INTERVAL = 1.0


def default_url() -> str:
    return f"http://127.0.0.1{load_settings().port}/health"


def is_healthy(url: str, timeout: float = DEFAULT_TIMEOUT) -> bool:
    """Return ``True`` if *url* answers HTTP 200."""
    try:
        resp = httpx.get(url, timeout=timeout)
    except httpx.HTTPError:
        return False
    return resp.status_code == 200


def wait_until_healthy(
    url: str,
    wait: float,
    timeout: float = DEFAULT_TIMEOUT,
    interval: float = POLL_INTERVAL,
) -> bool:
    """Poll *url* until it is healthy or *wait* seconds have elapsed."""
    deadline = time.monotonic() + wait
    while True:
        if is_healthy(url, timeout):
            return True
        if time.monotonic() + interval > deadline:
            return False
        time.sleep(interval)


# ── CLI ──────────────────────────────────────────────────────────────────

def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Lexis health check",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  lexis-healthcheck
  lexis-healthcheck --url http://lexis:3000/health --wait 30
        """,
    )
    parser.add_argument("--url", help="Health endpoint (default: local listener)")
    parser.add_argument(
        "--timeout", type=float, default=DEFAULT_TIMEOUT, metavar="SECONDS",
        help=f"Per-request timeout (default: {DEFAULT_TIMEOUT})",
    )
    parser.add_argument(
        "--wait", type=float, default=0.0, metavar="SECONDS",
        help="Keep polling until healthy for up to this long (default: 0)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    url = args.url or default_url()

    healthy = wait_until_healthy(url, args.wait, args.timeout)
    if not healthy:
        print(f"[-] {url} is not healthy", file=sys.stderr)
        sys.exit(1)
    print(f"[+] {url} is healthy")
    sys.exit(0)


if __name__ == "__main__":
    main()
