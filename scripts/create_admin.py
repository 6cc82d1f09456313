#!/usr/bin/env python3
"""
Create Admin Script

Admin accounts cannot self-register through the API; create them here.
Usage: python scripts/create_admin.py admin@example.com 'StrongPassword1' ["Display Name"]
"""

import sys

from pymongo.errors import DuplicateKeyError

from credhub.core.auth import hash_password
from credhub.db.mongodb import init_mongo_indexes
from credhub.models.profiles import AdminProfile
from credhub.services.mongo_service import UserService, to_mongo


def main():
    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(1)

    email, password = sys.argv[1], sys.argv[2]
    display_name = sys.argv[3] if len(sys.argv) > 3 else None

    if len(password) < 8:
        print("Password must be at least 8 characters")
        sys.exit(1)

    init_mongo_indexes()
    profile = AdminProfile(display_name=display_name)
    try:
        user_id = UserService().create(
            email=email,
            password_hash=hash_password(password),
            role="admin",
            profile=to_mongo(profile.model_dump()),
        )
    except DuplicateKeyError:
        print(f"A user with email {email} already exists")
        sys.exit(1)

    print(f"Admin created: {email} (id {user_id})")


if __name__ == "__main__":
    main()
