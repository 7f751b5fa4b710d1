from datetime import date, datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from leavedesk.core.config import settings
from leavedesk.core.exceptions import (
    AccessDeniedError,
    InvalidTransitionError,
    LeaveValidationError,
    NotFoundError,
)
from leavedesk.models.employee import Employee
from leavedesk.models.leave_history import HistoryAction
from leavedesk.models.leave_request import LeaveRequest, LeaveStatus
from leavedesk.schemas.leave import LeaveRequestCreate
from leavedesk.services.base import BaseService
from leavedesk.services.history import HistoryService
from leavedesk.services.working_days import calculate_working_days

STATUS_FILTERS = ["all"] + [s.value for s in LeaveStatus]


class LeaveService(BaseService):
    """
    Leave request workflow.

    A request is created pending and is decided exactly once by an admin.
    Balance counters move with the request: submitting reserves the days as
    pending, approval moves them to taken, rejection releases them.
    """

    def __init__(self, db: Session, today: Optional[date] = None):
        super().__init__(db)
        self._today = today

    @property
    def today(self) -> date:
        return self._today or date.today()

    # ------------------------------------------------------------------ submit

    def validate_request(self, payload: LeaveRequestCreate) -> float:
        """Check a request before anything is written. Returns the days to charge."""
        if payload.end_date < payload.start_date:
            raise LeaveValidationError("End date must be after start date")

        if not settings.leave.allow_backdated_requests and payload.start_date < self.today:
            raise LeaveValidationError("Leave cannot start in the past")

        days = calculate_working_days(payload.start_date, payload.end_date, payload.is_half_day)
        if days <= 0:
            raise LeaveValidationError(
                "Please select valid working days",
                details={"start_date": payload.start_date.isoformat(), "end_date": payload.end_date.isoformat()},
            )
        return days

    def _lock_employee(self, employee_id: int) -> Employee:
        """Re-read the employee row under a row lock so counter updates never work from a stale value."""
        return (
            self.db.query(Employee)
            .filter(Employee.id == employee_id)
            .with_for_update()
            .populate_existing()
            .one()
        )

    def submit(self, employee: Employee, payload: LeaveRequestCreate) -> LeaveRequest:
        days = self.validate_request(payload)
        employee = self._lock_employee(employee.id)

        leave = LeaveRequest(
            employee_id=employee.id,
            leave_type=payload.leave_type,
            start_date=payload.start_date,
            end_date=payload.end_date,
            days_requested=days,
            is_half_day=payload.is_half_day,
            half_day_period=payload.half_day_period.value if payload.half_day_period else None,
            reason=payload.reason,
            status=LeaveStatus.PENDING.value,
        )
        self.db.add(leave)
        employee.pending = (employee.pending or 0.0) + days
        self.db.flush()

        HistoryService.record(
            self.db,
            HistoryAction.LEAVE_REQUESTED,
            employee_id=employee.id,
            performed_by=employee.id,
            leave_request_id=leave.id,
            new_values={
                "status": leave.status,
                "leave_type": leave.leave_type,
                "start_date": leave.start_date,
                "end_date": leave.end_date,
                "days": days,
            },
        )
        self.commit()
        self.db.refresh(leave)
        self._logger.info(f"Leave request {leave.id} submitted by employee {employee.id} for {days} day(s)")
        return leave

    # ------------------------------------------------------------------- read

    def _visible_query(self, viewer: Employee, employee_id: Optional[int] = None):
        query = self.db.query(LeaveRequest)
        if not viewer.is_admin:
            if employee_id is not None and employee_id != viewer.id:
                raise AccessDeniedError("You can only view your own leave requests")
            employee_id = viewer.id
        if employee_id is not None:
            query = query.filter(LeaveRequest.employee_id == employee_id)
        return query

    def list_requests(
        self,
        viewer: Employee,
        status: str = "all",
        search: Optional[str] = None,
        employee_id: Optional[int] = None,
    ) -> List[LeaveRequest]:
        status = (status or "all").lower()
        if status not in STATUS_FILTERS:
            raise LeaveValidationError(f"Unknown status filter '{status}'", details={"allowed": STATUS_FILTERS})

        query = self._visible_query(viewer, employee_id).options(
            joinedload(LeaveRequest.employee),
            joinedload(LeaveRequest.approver),
        )
        if status != "all":
            query = query.filter(LeaveRequest.status == status)

        term = (search or "").strip().lower()
        if term:
            query = query.join(Employee, LeaveRequest.employee_id == Employee.id).filter(
                or_(
                    func.lower(Employee.first_name).contains(term, autoescape=True),
                    func.lower(Employee.last_name).contains(term, autoescape=True),
                    func.lower(Employee.email).contains(term, autoescape=True),
                    func.lower(LeaveRequest.leave_type).contains(term, autoescape=True),
                )
            )

        return query.order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc()).all()

    def get_request(self, viewer: Employee, request_id: int) -> LeaveRequest:
        leave = self.db.get(LeaveRequest, request_id)
        if leave is None:
            raise NotFoundError("Leave request not found")
        if not viewer.is_admin and leave.employee_id != viewer.id:
            # Same answer as a missing row so ids of other employees are not disclosed
            raise NotFoundError("Leave request not found")
        return leave

    def stats(self, viewer: Employee) -> Dict[str, int]:
        rows = (
            self._visible_query(viewer)
            .with_entities(LeaveRequest.status, func.count(LeaveRequest.id))
            .group_by(LeaveRequest.status)
            .all()
        )
        counts = {status: count for status, count in rows}
        return {
            "total": sum(counts.values()),
            "pending": counts.get(LeaveStatus.PENDING.value, 0),
            "approved": counts.get(LeaveStatus.APPROVED.value, 0),
            "rejected": counts.get(LeaveStatus.REJECTED.value, 0),
        }

    # --------------------------------------------------------------- decisions

    def approve(self, admin: Employee, request_id: int, comments: Optional[str] = None) -> LeaveRequest:
        return self._decide(admin, request_id, LeaveStatus.APPROVED, comments)

    def reject(self, admin: Employee, request_id: int, comments: Optional[str] = None) -> LeaveRequest:
        return self._decide(admin, request_id, LeaveStatus.REJECTED, comments)

    def _decide(self, admin: Employee, request_id: int, target: LeaveStatus, comments: Optional[str]) -> LeaveRequest:
        if not admin.is_admin:
            raise AccessDeniedError("Only administrators can decide leave requests")

        leave = (
            self.db.query(LeaveRequest)
            .filter(LeaveRequest.id == request_id)
            .with_for_update()
            .first()
        )
        if leave is None:
            raise NotFoundError("Leave request not found")
        if leave.status != LeaveStatus.PENDING.value:
            raise InvalidTransitionError(leave.status, target.value)

        before_state = {"status": leave.status, "approved_by": leave.approved_by, "comments": leave.comments}

        leave.status = target.value
        leave.approved_by = admin.id
        leave.approved_at = datetime.now(timezone.utc)
        leave.comments = comments

        employee = self._lock_employee(leave.employee_id)
        days = leave.days_requested
        employee.pending = max((employee.pending or 0.0) - days, 0.0)
        if target == LeaveStatus.APPROVED:
            employee.taken = (employee.taken or 0.0) + days

        HistoryService.record(
            self.db,
            HistoryAction.LEAVE_APPROVED if target == LeaveStatus.APPROVED else HistoryAction.LEAVE_REJECTED,
            employee_id=leave.employee_id,
            performed_by=admin.id,
            leave_request_id=leave.id,
            old_values=before_state,
            new_values={"status": leave.status, "approved_by": admin.id, "comments": comments, "days": days},
        )
        self.commit()
        self.db.refresh(leave)
        self._logger.info(f"Leave request {leave.id} {target.value} by admin {admin.id}")
        return leave
