import logging
from leavedesk.core.config import settings
from leavedesk.database import SessionLocal
from leavedesk.models.employee import Employee, EmployeeRole
from leavedesk.schemas.employee import EmployeeCreate
from leavedesk.services import employee_service

logger = logging.getLogger(__name__)

def init_system_data():
    """
    Creates the first admin account from BOOTSTRAP_ADMIN_EMAIL / BOOTSTRAP_ADMIN_PASSWORD
    when both are set and no admin exists yet.
    """
    if not (settings.bootstrap_admin_email and settings.bootstrap_admin_password):
        logger.info("System initialization check: no bootstrap admin configured.")
        return

    db = SessionLocal()
    try:
        admin_count = db.query(Employee).filter(Employee.role == EmployeeRole.ADMIN).count()
        if admin_count:
            logger.info(f"System initialization check: {admin_count} admin account(s) found.")
            return

        admin = employee_service.create_employee(
            db,
            EmployeeCreate(
                email=settings.bootstrap_admin_email,
                password=settings.bootstrap_admin_password,
                first_name="System",
                last_name="Administrator",
                role=EmployeeRole.ADMIN,
            ),
        )
        logger.info(f"Created bootstrap admin {admin.email}")
    finally:
        db.close()
