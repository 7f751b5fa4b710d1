import logging
from datetime import date, datetime
from typing import Any, List, Optional

from sqlalchemy.orm import Session, joinedload

from leavedesk.core.exceptions import AccessDeniedError
from leavedesk.models.employee import Employee
from leavedesk.models.leave_history import LeaveHistory, HistoryAction

logger = logging.getLogger(__name__)


def _jsonable(obj: Any) -> Any:
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    if isinstance(obj, dict):
        return {k: _jsonable(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_jsonable(i) for i in obj]
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    return obj


class HistoryService:
    @staticmethod
    def record(
        db: Session,
        action: HistoryAction,
        employee_id: int,
        performed_by: int,
        leave_request_id: Optional[int] = None,
        old_values: Optional[dict] = None,
        new_values: Optional[dict] = None,
    ) -> LeaveHistory:
        """
        Append a history entry to the caller's transaction.
        Strictly append-only; the entry is committed together with the change it describes.
        """
        entry = LeaveHistory(
            employee_id=employee_id,
            leave_request_id=leave_request_id,
            action=action.value,
            old_values=_jsonable(old_values),
            new_values=_jsonable(new_values),
            performed_by=performed_by,
        )
        db.add(entry)
        db.flush()
        logger.info(
            f"History: {action.value}",
            extra={"employee_id": employee_id, "leave_request_id": leave_request_id, "performed_by": performed_by},
        )
        return entry

    @staticmethod
    def list_entries(db: Session, viewer: Employee, employee_id: Optional[int] = None) -> List[LeaveHistory]:
        """Newest first. Non-admins only ever see their own entries."""
        if not viewer.is_admin:
            if employee_id is not None and employee_id != viewer.id:
                raise AccessDeniedError("You can only view your own leave history")
            employee_id = viewer.id

        query = db.query(LeaveHistory).options(
            joinedload(LeaveHistory.employee),
            joinedload(LeaveHistory.performer),
        )
        if employee_id is not None:
            query = query.filter(LeaveHistory.employee_id == employee_id)
        return query.order_by(LeaveHistory.created_at.desc(), LeaveHistory.id.desc()).all()
