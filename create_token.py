"""Print a long‑lived bearer token for an existing user.

Usage:
    python create_token.py admin@example.com --days 365
"""

import argparse

from eventboard_api.app.core.security import create_access_token


def main() -> None:
    ap = argparse.ArgumentParser(description="Issue an EventBoard API token for a user e-mail.")
    ap.add_argument("email", help="E-mail of the user the token authenticates as")
    ap.add_argument("--days", type=int, default=365, help="Token lifetime in days (default: 365)")
    args = ap.parse_args()
    print(create_access_token({"sub": args.email.lower()}, expires_delta=args.days * 24 * 60 * 60))


if __name__ == "__main__":
    main()
