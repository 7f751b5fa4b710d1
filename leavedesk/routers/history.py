from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from leavedesk.database import get_db
from leavedesk.models.employee import Employee
from leavedesk.routers.auth_deps import get_current_employee
from leavedesk.schemas.history import LeaveHistoryResponse
from leavedesk.services.history import HistoryService

router = APIRouter(prefix="/history", tags=["history"])


@router.get("", response_model=List[LeaveHistoryResponse])
def list_history(
    employee_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_employee: Employee = Depends(get_current_employee),
):
    return HistoryService.list_entries(db, current_employee, employee_id)
