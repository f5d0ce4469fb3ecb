#!/usr/bin/env python3
"""
Print the SHA-256 hex digest to provision as PASSWORD_HASH.

Usage:
    python scripts/hash_password.py
    python scripts/hash_password.py yourpassword
"""

import sys
from getpass import getpass
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from models.security.digest import sha256_hex


def main():
    if len(sys.argv) > 2:
        print("Usage: python hash_password.py [password]")
        sys.exit(1)

    if len(sys.argv) == 2:
        password = sys.argv[1]
    else:
        password = getpass("Password: ")
        if password != getpass("Repeat password: "):
            print("❌ Passwords do not match")
            sys.exit(1)

    if not password:
        print("❌ Password must not be empty")
        sys.exit(1)

    print(sha256_hex(password.encode("utf-8")))


if __name__ == "__main__":
    main()
