from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional

from leavedesk.core.config import settings
from leavedesk.database import get_db
from leavedesk.models.employee import Employee
from leavedesk.routers.auth_deps import get_current_employee
from leavedesk.schemas.employee import BalanceResponse
from leavedesk.schemas.leave import (
    LeaveRequestCreate,
    LeaveRequestResponse,
    LeaveStats,
    LeaveTypeOption,
    WorkingDaysRequest,
    WorkingDaysResponse,
)
from leavedesk.services.balance import summarize_balance
from leavedesk.services.leave_service import LeaveService
from leavedesk.services.working_days import calculate_working_days

router = APIRouter(
    prefix="/leave",
    tags=["leave"]
)


@router.get("/types", response_model=List[LeaveTypeOption])
def list_leave_types(current_employee: Employee = Depends(get_current_employee)):
    return [{"value": value, "label": label} for value, label in settings.leave.leave_types.items()]


@router.post("/calculate", response_model=WorkingDaysResponse)
def preview_working_days(data: WorkingDaysRequest, current_employee: Employee = Depends(get_current_employee)):
    """Working days a range would charge, without creating anything."""
    return {
        "start_date": data.start_date,
        "end_date": data.end_date,
        "is_half_day": data.is_half_day,
        "working_days": calculate_working_days(data.start_date, data.end_date, data.is_half_day),
    }


@router.post("/requests", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
def submit_leave_request(
    request: LeaveRequestCreate,
    db: Session = Depends(get_db),
    current_employee: Employee = Depends(get_current_employee),
):
    return LeaveService(db).submit(current_employee, request)


@router.get("/requests", response_model=List[LeaveRequestResponse])
def list_leave_requests(
    status_filter: str = Query("all", alias="status"),
    search: Optional[str] = None,
    employee_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_employee: Employee = Depends(get_current_employee),
):
    return LeaveService(db).list_requests(current_employee, status=status_filter, search=search, employee_id=employee_id)


@router.get("/requests/{request_id}", response_model=LeaveRequestResponse)
def get_leave_request(
    request_id: int,
    db: Session = Depends(get_db),
    current_employee: Employee = Depends(get_current_employee),
):
    return LeaveService(db).get_request(current_employee, request_id)


@router.get("/stats", response_model=LeaveStats)
def leave_stats(db: Session = Depends(get_db), current_employee: Employee = Depends(get_current_employee)):
    return LeaveService(db).stats(current_employee)


@router.get("/balance", response_model=BalanceResponse)
def my_balance(current_employee: Employee = Depends(get_current_employee)):
    return summarize_balance(current_employee)
