#!/usr/bin/env python3
"""
Reset a user's password in the Wanderlust database.

This script DOES NOT read or reveal any existing passwords. It simply sets a new
password hash for the specified username, using the same hashing as the
application.

Usage:
    python reset_password.py --username alice --password "NewStrongPass!234"
    python reset_password.py --db ./wanderlust.db --username alice

If --password is omitted, you will be prompted to enter it securely.
"""

import argparse
import asyncio
import getpass
import os
import sys

from wanderlust.app.core.config import settings
from wanderlust.app.core.db import get_database_path, init_db
from wanderlust.app.services.user_service import UserService


def main():
    ap = argparse.ArgumentParser(description="Reset a Wanderlust user's password.")
    ap.add_argument("--db", help="Path to SQLite DB file (defaults to DATABASE_URL)")
    ap.add_argument("--username", required=True, help="Username to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    args = ap.parse_args()

    if args.db:
        settings.database_url = os.path.abspath(args.db)
    if not os.path.exists(get_database_path()):
        print(f"[!] DB not found: {get_database_path()}", file=sys.stderr)
        sys.exit(1)

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if not new_password:
        print("[!] Empty password is not allowed.", file=sys.stderr)
        sys.exit(1)

    init_db()
    if not asyncio.run(UserService.set_password(args.username, new_password)):
        print(f"[!] No user found with username: {args.username}", file=sys.stderr)
        sys.exit(2)
    print(f"[+] Password updated for {args.username}")


if __name__ == "__main__":
    main()
