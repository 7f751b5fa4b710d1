from pydantic import BaseModel, ConfigDict, computed_field
from datetime import datetime
from typing import Any, Dict, Optional

from leavedesk.schemas.employee import EmployeeSummary
from leavedesk.services.presentation import format_action, summarize_history

class LeaveHistoryResponse(BaseModel):
    id: int
    employee_id: int
    leave_request_id: Optional[int] = None
    action: str
    old_values: Optional[Dict[str, Any]] = None
    new_values: Optional[Dict[str, Any]] = None
    performed_by: int
    created_at: Optional[datetime] = None
    employee: Optional[EmployeeSummary] = None
    performer: Optional[EmployeeSummary] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def action_label(self) -> str:
        return format_action(self.action)

    @computed_field
    @property
    def summary(self) -> Optional[str]:
        return summarize_history(self.action, self.new_values)
