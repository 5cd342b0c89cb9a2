#!/usr/bin/env python3
"""
Insert an approved, active venue for local testing. Prints its id.
  python scripts/seed_venue.py --name "City Arena" --owner owner-1 --price 1000
"""
import argparse
import sys
from decimal import Decimal
from pathlib import Path

backend_dir = Path(__file__).resolve().parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from turfbook.db.session import SessionLocal  # noqa: E402
from turfbook.models.venue import Venue  # noqa: E402
from turfbook.services.time_grid import canonical  # noqa: E402


def main() -> int:
    p = argparse.ArgumentParser(description=__doc__)
    p.add_argument("--name", required=True)
    p.add_argument("--owner", required=True, help="Owner user id")
    p.add_argument("--price", required=True, help="Price per hour")
    p.add_argument("--open", default="06:00")
    p.add_argument("--close", default="22:00")
    args = p.parse_args()

    db = SessionLocal()
    try:
        venue = Venue(
            name=args.name,
            owner_id=args.owner,
            price_per_hour=Decimal(args.price),
            open_time=canonical(args.open),
            close_time=args.close if args.close == "24:00" else canonical(args.close),
            is_active=True,
            is_approved=True,
        )
        db.add(venue)
        db.commit()
        print(venue.id)
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
