import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from leavedesk.core.config import settings
from leavedesk.core.exceptions import AccessDeniedError, ConflictError, NotFoundError
from leavedesk.models.employee import Employee, EmployeeRole
from leavedesk.models.leave_history import HistoryAction
from leavedesk.schemas.employee import BalanceUpdate, EmployeeCreate
from leavedesk.services import auth as auth_service
from leavedesk.services.history import HistoryService

logger = logging.getLogger(__name__)


def get_employee_by_email(db: Session, email: str) -> Optional[Employee]:
    return db.query(Employee).filter(func.lower(Employee.email) == email.lower()).first()


def get_employee(db: Session, viewer: Employee, employee_id: int) -> Employee:
    if not viewer.is_admin and viewer.id != employee_id:
        raise AccessDeniedError("You can only view your own profile")
    employee = db.get(Employee, employee_id)
    if employee is None:
        raise NotFoundError("Employee not found")
    return employee


def list_employees(db: Session, search: Optional[str] = None) -> List[Employee]:
    """All employees ordered by first name, optionally narrowed by a "first last code" substring."""
    query = db.query(Employee)
    term = (search or "").strip().lower()
    if term:
        haystack = Employee.first_name + " " + Employee.last_name + " " + func.coalesce(Employee.employee_code, "")
        query = query.filter(func.lower(haystack).contains(term, autoescape=True))
    return query.order_by(Employee.first_name, Employee.last_name).all()


def _free_employee_code(db: Session, number: int) -> str:
    """EMPnnn for the given number, moved up past codes an admin already assigned by hand."""
    code = f"EMP{number:03d}"
    while db.query(Employee.id).filter(Employee.employee_code == code).first() is not None:
        number += 1
        code = f"EMP{number:03d}"
    return code


def create_employee(db: Session, data: EmployeeCreate) -> Employee:
    """
    Create a login account together with its leave balance.
    A missing employee code is generated from the row id (EMP001, EMP002, ...),
    skipping numbers already taken.
    """
    if get_employee_by_email(db, data.email):
        raise ConflictError("An account with this email already exists", details={"email": data.email})
    if data.employee_code and db.query(Employee).filter(Employee.employee_code == data.employee_code).first():
        raise ConflictError("Employee code already in use", details={"employee_code": data.employee_code})

    opening = data.opening_balance if data.opening_balance is not None else settings.leave.default_opening_balance
    employee = Employee(
        email=data.email.lower(),
        hashed_password=auth_service.get_password_hash(data.password),
        first_name=data.first_name.strip(),
        last_name=data.last_name.strip(),
        role=data.role,
        employee_code=data.employee_code,
        opening_balance=opening,
        taken=0.0,
        forfeit=0.0,
        pending=0.0,
        is_active=True,
    )
    db.add(employee)
    try:
        db.flush()
        if not employee.employee_code:
            employee.employee_code = _free_employee_code(db, employee.id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(employee)
    logger.info(f"Created {employee.role.value} account {employee.email} ({employee.employee_code})")
    return employee


def register_employee(db: Session, email: str, password: str, first_name: str, last_name: str) -> Employee:
    """Self-service sign-up. Always creates a regular user; admins are created by admins."""
    return create_employee(
        db,
        EmployeeCreate(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            role=EmployeeRole.USER,
        ),
    )


def update_balance(db: Session, admin: Employee, employee_id: int, changes: BalanceUpdate) -> Employee:
    if not admin.is_admin:
        raise AccessDeniedError("Only administrators can edit leave balances")
    employee = db.get(Employee, employee_id)
    if employee is None:
        raise NotFoundError("Employee not found")

    updates = changes.model_dump(exclude_none=True)
    old_values = {field: getattr(employee, field) for field in updates}
    for field, value in updates.items():
        setattr(employee, field, value)

    HistoryService.record(
        db,
        HistoryAction.BALANCE_UPDATED,
        employee_id=employee.id,
        performed_by=admin.id,
        old_values=old_values,
        new_values=updates,
    )
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(employee)
    logger.info(f"Balance of employee {employee.id} updated by admin {admin.id}: {sorted(updates)}")
    return employee
