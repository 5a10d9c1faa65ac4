#!/usr/bin/env python3
"""
Reset a user's password in the Khadmaty SQLite database.

The script never reads or prints existing passwords; it stores a new
PBKDF2 hash for the given email.

Usage:
    python reset_password.py --email provider@example.com --password "NewPass123"
    python reset_password.py --db ./khadmaty_api/khadmaty.db --email provider@example.com

Without ``--db`` the database configured by ``DATABASE_URL`` is used.
If ``--password`` is omitted, you will be prompted to enter it securely.
"""

import argparse
import getpass
import os
import sqlite3
import sys
from typing import List, Optional

from khadmaty_api.app.core.db import get_database_path
from khadmaty_api.app.core.security import hash_password
from khadmaty_api.app.services.user_service import MIN_PASSWORD_LENGTH


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Reset a Khadmaty user's password (SQLite).")
    ap.add_argument("--db", help="Path to the SQLite DB file (defaults to DATABASE_URL)")
    ap.add_argument("--email", required=True, help="User email to update")
    ap.add_argument("--password", help="New password. If omitted, you'll be prompted securely.")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    db_path = args.db or get_database_path()

    if not os.path.exists(db_path):
        print(f"[!] DB not found: {db_path}", file=sys.stderr)
        return 1

    new_password = args.password or getpass.getpass("Enter NEW password: ")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        print(f"[!] Password must be at least {MIN_PASSWORD_LENGTH} characters.", file=sys.stderr)
        return 1

    email = args.email.strip().lower()
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        cur.execute("SELECT id FROM users WHERE email = ?", (email,))
        if not cur.fetchone():
            print(f"[!] No user found with email: {email}", file=sys.stderr)
            return 2
        cur.execute(
            "UPDATE users SET password = ?, updated_at = CURRENT_TIMESTAMP WHERE email = ?",
            (hash_password(new_password), email),
        )
        conn.commit()
    finally:
        conn.close()
    print(f"[+] Password updated for user: {email}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
