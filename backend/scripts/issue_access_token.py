"""
Issue Access Token
==================
Prints a bearer token for a dashboard user, creating the user first if
asked to. Tokens are normally issued by the identity provider; this is for
local development and operational debugging.

Usage (from the backend directory):
    python -m scripts.issue_access_token --email admin@example.com --create --role admin
    python -m scripts.issue_access_token --email agent@example.com --minutes 15

Flags:
    --email      EMAIL   (required) The user's email address
    --create             Create the user if it does not exist
    --role       ROLE    (optional, with --create) One of: admin, agent, viewer. Default: viewer
    --first-name NAME    (optional, with --create) If omitted, derived from email.
    --last-name  NAME    (optional, with --create) If omitted, derived from email.
    --minutes    N       (optional) Token lifetime. Default: ACCESS_TOKEN_EXPIRE_MINUTES
"""

import argparse
import secrets
import sys
from datetime import timedelta

from src.core.database import SessionLocal, init_db
from src.core.security import create_access_token, hash_password
from src.models.user import User, UserRole


VALID_ROLES = {r.value for r in UserRole}


def parse_name_from_email(email: str) -> tuple:
    """
    Derive a first/last name from the email local part.
    Examples:
        admin@example.com       -> ("Admin", "User")
        jane.smith@example.com  -> ("Jane", "Smith")
        jsmith@example.com      -> ("Jsmith", "User")
    """
    local = email.split("@")[0]
    if "." in local:
        parts = local.split(".", 1)
        return parts[0].capitalize(), parts[1].capitalize()
    return local.capitalize(), "User"


def main():
    parser = argparse.ArgumentParser(
        description="Print a bearer token for an OnScript Analytics user."
    )
    parser.add_argument("--email", required=True, help="The user's email address (required)")
    parser.add_argument("--create", action="store_true", help="Create the user if missing")
    parser.add_argument(
        "--role",
        default=UserRole.VIEWER.value,
        choices=sorted(VALID_ROLES),
        help="Role for a newly created user (default: viewer)",
    )
    parser.add_argument("--first-name", default=None, help="First name for a newly created user")
    parser.add_argument("--last-name", default=None, help="Last name for a newly created user")
    parser.add_argument("--minutes", type=int, default=None, help="Token lifetime in minutes")
    args = parser.parse_args()

    email = args.email.strip().lower()

    init_db()
    db = SessionLocal()
    try:
        user = db.query(User).filter(User.email == email).first()

        if user is None and not args.create:
            print(f"  [FAIL] No user with email {email}. Pass --create to add one.")
            sys.exit(1)

        if user is None:
            derived_first, derived_last = parse_name_from_email(email)
            user = User(
                email=email,
                # Unusable random password: sign-in goes through the identity provider
                password_hash=hash_password(secrets.token_urlsafe(24)),
                first_name=args.first_name.strip() if args.first_name else derived_first,
                last_name=args.last_name.strip() if args.last_name else derived_last,
                role=UserRole(args.role),
            )
            db.add(user)
            db.commit()
            print(f"  [OK] Created {user.role.value} user {email} (ID: {user.id})")

        if not user.is_active:
            print(f"  [WARN] {email} is deactivated; the token will be rejected.")

        expires = timedelta(minutes=args.minutes) if args.minutes else None
        token = create_access_token({"sub": str(user.id)}, expires_delta=expires)
    finally:
        db.close()

    print(token)


if __name__ == "__main__":
    main()
