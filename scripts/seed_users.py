"""
Provision employee accounts from a JSON file.

    python -m scripts.seed_users users.json

The file holds a list of objects with email, password, first_name, last_name
and optionally role ("user" | "admin"), employee_code and opening_balance.
Existing emails are skipped.
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from sqlalchemy.orm import Session

from leavedesk.database import SessionLocal, init_db
from leavedesk.schemas.employee import EmployeeCreate
from leavedesk.services import employee_service

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def seed_users(db: Session, records: list) -> int:
    created = 0
    for record in records:
        try:
            data = EmployeeCreate(**record)
        except ValidationError as e:
            logger.error(f"Skipping invalid record {record.get('email')}: {e.errors()}")
            continue

        if employee_service.get_employee_by_email(db, data.email):
            logger.warning(f"Employee {data.email} already exists. Skipping.")
            continue

        employee = employee_service.create_employee(db, data)
        logger.info(f"Created {employee.role.value} -> {employee.email} ({employee.employee_code})")
        created += 1
    return created


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("path", type=Path, help="JSON file with the accounts to create")
    args = parser.parse_args(argv)

    records = json.loads(args.path.read_text())
    if not isinstance(records, list):
        logger.error("Expected a JSON list of account objects")
        return 1

    init_db()
    db = SessionLocal()
    try:
        created = seed_users(db, records)
    finally:
        db.close()
    logger.info(f"Done: {created} account(s) created")
    return 0


if __name__ == "__main__":
    sys.exit(main())
