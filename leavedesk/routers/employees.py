from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional

from leavedesk.database import get_db
from leavedesk.models.employee import Employee
from leavedesk.routers.auth_deps import get_current_employee, require_admin
from leavedesk.schemas.employee import (
    BalanceUpdate,
    EmployeeCreate,
    EmployeeDetailResponse,
    EmployeeResponse,
)
from leavedesk.services import employee_service
from leavedesk.services.balance import summarize_balance

router = APIRouter(
    prefix="/employees",
    tags=["employees"]
)


def _with_balance(employee: Employee) -> EmployeeDetailResponse:
    base = EmployeeResponse.model_validate(employee)
    return EmployeeDetailResponse(**base.model_dump(), balance=summarize_balance(employee))


@router.get("", response_model=List[EmployeeDetailResponse])
def list_employees(
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    admin: Employee = Depends(require_admin()),
):
    """Employee overview with balances, ordered by first name."""
    return [_with_balance(e) for e in employee_service.list_employees(db, search)]


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
def create_employee(
    data: EmployeeCreate,
    db: Session = Depends(get_db),
    admin: Employee = Depends(require_admin()),
):
    return employee_service.create_employee(db, data)


@router.get("/{employee_id}", response_model=EmployeeDetailResponse)
def get_employee(
    employee_id: int,
    db: Session = Depends(get_db),
    current_employee: Employee = Depends(get_current_employee),
):
    return _with_balance(employee_service.get_employee(db, current_employee, employee_id))


@router.patch("/{employee_id}/balance", response_model=EmployeeDetailResponse)
def update_employee_balance(
    employee_id: int,
    changes: BalanceUpdate,
    db: Session = Depends(get_db),
    admin: Employee = Depends(require_admin()),
):
    return _with_balance(employee_service.update_balance(db, admin, employee_id, changes))
