#!/usr/bin/env python3
"""
Mint a development bearer token signed with JWT_SECRET.
  python scripts/issue_token.py user-1 --role user
"""
import argparse
import sys
from pathlib import Path

backend_dir = Path(__file__).resolve().parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from turfbook.config import settings  # noqa: E402
from turfbook.core.auth import issue_token  # noqa: E402
from turfbook.core.constants import ROLE_ADMIN, ROLE_OWNER, ROLE_USER  # noqa: E402


def main() -> int:
    p = argparse.ArgumentParser(description=__doc__)
    p.add_argument("user_id")
    p.add_argument("--role", default=ROLE_USER, choices=[ROLE_USER, ROLE_OWNER, ROLE_ADMIN])
    args = p.parse_args()
    print(issue_token(args.user_id, args.role, settings.jwt_secret, settings.jwt_algorithm))
    return 0


if __name__ == "__main__":
    sys.exit(main())
