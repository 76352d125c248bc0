# backend/scripts/bootstrap_admin.py
"""
Create the first back-office admin (local identity backend) or grant the
admin role to an existing hosted-provider user.

Usage (from backend/):
  python scripts/bootstrap_admin.py --email admin@caras.local --password changeme
  python scripts/bootstrap_admin.py --user-id <supabase user uuid>   # role only
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

HERE = Path(__file__).resolve()
BACKEND_ROOT = HERE.parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from sqlalchemy import select  # noqa: E402

from caras.config import Config  # noqa: E402
from caras.db import SessionLocal  # noqa: E402
from caras.models import AuthUser  # noqa: E402
from caras.services.identity import create_local_user, grant_role  # noqa: E402


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Bootstrap a CARAS admin account")
    p.add_argument("--email")
    p.add_argument("--password")
    p.add_argument("--user-id", help="grant the role to an existing provider user id")
    p.add_argument("--role", default=Config.ADMIN_ROLE)
    args = p.parse_args(argv)

    with SessionLocal() as db:
        if args.user_id:
            grant_role(db, args.user_id, args.role)
            print(f"BOOTSTRAP_OK role={args.role} user_id={args.user_id}")
            return 0

        if not args.email or not args.password:
            p.error("--email and --password are required unless --user-id is given")

        email = args.email.strip().lower()
        existing = db.execute(select(AuthUser).where(AuthUser.email == email)).scalars().first()
        if existing:
            grant_role(db, existing.id, args.role)
            print(f"BOOTSTRAP_OK existing user {email} ({existing.id}) has role={args.role}")
            return 0

        user = create_local_user(db, email, args.password, role=args.role)
        print(f"BOOTSTRAP_OK created {email} ({user.id}) role={args.role}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
