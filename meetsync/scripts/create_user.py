"""
Create an account (e.g. the first admin; signup only creates members). Run from project root:
  python -m meetsync.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m meetsync.scripts.create_user "Ana Admin" ana@example.com your-secure-password admin
"""
import argparse
import sys

from meetsync.core.config import get_settings
from meetsync.core.database import build_engine, build_session_factory
from meetsync.core.errors import DuplicateAccountError
from meetsync.core.security import hash_password
from meetsync.models import Base
from meetsync.services.credential_store import CredentialStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a MeetSync account.")
    parser.add_argument("name", help="Display name (1-255 chars)")
    parser.add_argument("email", help="Account email (unique)")
    parser.add_argument("password", help="Password (1-128 chars)")
    parser.add_argument("role", nargs="?", default="member", choices=["member", "admin"])
    args = parser.parse_args(argv)

    name = args.name.strip()
    email = args.email.strip()
    if not name or len(name) > 255:
        print("Invalid name length.", file=sys.stderr)
        return 1
    if not email or len(email) > 320:
        print("Invalid email length.", file=sys.stderr)
        return 1
    if not args.password or len(args.password) > 128:
        print("Password must be 1-128 characters.", file=sys.stderr)
        return 1

    settings = get_settings()
    engine = build_engine(settings.DATABASE_URL)
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(engine)
    store = CredentialStore(build_session_factory(engine))
    try:
        identity = store.create_identity(
            name,
            email,
            hash_password(args.password, settings.BCRYPT_ROUNDS),
            role=args.role,
        )
    except DuplicateAccountError:
        print(f"User '{email}' already exists.", file=sys.stderr)
        return 1
    finally:
        engine.dispose()
    print(f"Created user '{identity.email}' with role '{identity.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
