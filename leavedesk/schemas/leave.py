from pydantic import BaseModel, ConfigDict, computed_field, field_validator, model_validator
from datetime import date, datetime
from typing import Optional, Union

from leavedesk.models.leave_request import HalfDayPeriod
from leavedesk.schemas.employee import EmployeeSummary
from leavedesk.services.presentation import status_badge

class LeaveRequestCreate(BaseModel):
    leave_type: str = "annual"
    start_date: date
    end_date: Optional[date] = None
    reason: Optional[str] = None
    is_half_day: bool = False
    half_day_period: Optional[HalfDayPeriod] = None

    @field_validator("leave_type")
    @classmethod
    def normalize_leave_type(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("Leave type is required")
        return v

    @model_validator(mode="after")
    def fill_half_day_defaults(self):
        if self.is_half_day:
            if self.end_date is None:
                self.end_date = self.start_date
            if self.half_day_period is None:
                self.half_day_period = HalfDayPeriod.MORNING
        else:
            if self.end_date is None:
                raise ValueError("Please select start and end dates")
            self.half_day_period = None
        return self

class WorkingDaysRequest(BaseModel):
    start_date: date
    end_date: date
    is_half_day: bool = False

class WorkingDaysResponse(BaseModel):
    start_date: date
    end_date: date
    is_half_day: bool
    working_days: Union[int, float]

class StatusBadge(BaseModel):
    label: str
    color: str
    icon: str

class LeaveRequestResponse(BaseModel):
    id: int
    employee_id: int
    leave_type: str
    start_date: date
    end_date: date
    days_requested: float
    is_half_day: bool
    half_day_period: Optional[str] = None
    reason: Optional[str] = None
    status: str
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    comments: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    employee: Optional[EmployeeSummary] = None
    approver: Optional[EmployeeSummary] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def badge(self) -> StatusBadge:
        return StatusBadge(**status_badge(self.status))

class LeaveDecision(BaseModel):
    comments: Optional[str] = None

class LeaveStats(BaseModel):
    total: int
    pending: int
    approved: int
    rejected: int

class LeaveTypeOption(BaseModel):
    value: str
    label: str

# Resolve forward references for Pydantic V2
LeaveRequestResponse.model_rebuild()
WorkingDaysResponse.model_rebuild()
LeaveStats.model_rebuild()
