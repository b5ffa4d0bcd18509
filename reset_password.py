#!/usr/bin/env python3
"""
Reset a user's password in the EventBoard SQLite database.

This script never reads or reveals existing passwords.  It stores a new
PBKDF2‑HMAC‑SHA256 hash for the given e‑mail.  The database is taken
from ``--db`` or, when omitted, from the ``DATABASE_URL`` setting.

Usage:
    python reset_password.py --email admin@example.com --password "NewStrongPass!234"

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import asyncio
import getpass
import os
import sys


def main() -> None:
    ap = argparse.ArgumentParser(description="Reset an EventBoard user's password.")
    ap.add_argument("--db", help="Path to the SQLite DB file (defaults to DATABASE_URL)")
    ap.add_argument("--email", required=True, help="User email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args()

    if args.db:
        if not os.path.exists(args.db):
            print(f"[!] DB not found: {args.db}", file=sys.stderr)
            sys.exit(1)
        os.environ["DATABASE_URL"] = os.path.abspath(args.db)

    # Imported after DATABASE_URL is set: settings are read at import time.
    from eventboard_api.app.services.user_service import UserService

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if len(new_password) < 6:
        print("[!] Password must be at least 6 characters long.", file=sys.stderr)
        sys.exit(1)

    if not asyncio.run(UserService.set_password(args.email, new_password)):
        print(f"[!] No user found with email: {args.email}", file=sys.stderr)
        sys.exit(2)
    print(f"[+] Password updated for user: {args.email}")


if __name__ == "__main__":
    main()
