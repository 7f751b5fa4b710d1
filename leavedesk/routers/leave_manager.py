from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from leavedesk.database import get_db
from leavedesk.models.employee import Employee
from leavedesk.routers.auth_deps import require_admin
from leavedesk.schemas.leave import LeaveDecision, LeaveRequestResponse
from leavedesk.services.leave_service import LeaveService

router = APIRouter(prefix="/leave", tags=["leave-manager"])


@router.post("/requests/{request_id}/approve", response_model=LeaveRequestResponse)
def approve_leave(
    request_id: int,
    decision: Optional[LeaveDecision] = None,
    db: Session = Depends(get_db),
    admin: Employee = Depends(require_admin()),
):
    return LeaveService(db).approve(admin, request_id, decision.comments if decision else None)


@router.post("/requests/{request_id}/reject", response_model=LeaveRequestResponse)
def reject_leave(
    request_id: int,
    decision: Optional[LeaveDecision] = None,
    db: Session = Depends(get_db),
    admin: Employee = Depends(require_admin()),
):
    return LeaveService(db).reject(admin, request_id, decision.comments if decision else None)
