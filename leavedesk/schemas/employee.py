from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from datetime import datetime
from typing import Optional

from leavedesk.models.employee import EmployeeRole

class EmployeeSummary(BaseModel):
    """Embedded name block used wherever another record references an employee."""
    id: int
    first_name: str
    last_name: str
    email: str
    employee_code: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class BalanceResponse(BaseModel):
    opening_balance: float
    taken: float
    forfeit: float
    pending: float
    available: float
    display_available: float
    overdue: float
    policy: str

class EmployeeResponse(BaseModel):
    id: int
    employee_code: Optional[str] = None
    first_name: str
    last_name: str
    email: str
    role: EmployeeRole
    opening_balance: float
    taken: float
    forfeit: float
    pending: float
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class EmployeeDetailResponse(EmployeeResponse):
    balance: BalanceResponse

class EmployeeCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    role: EmployeeRole = EmployeeRole.USER
    employee_code: Optional[str] = None
    opening_balance: Optional[float] = Field(default=None, ge=0)

class BalanceUpdate(BaseModel):
    opening_balance: Optional[float] = Field(default=None, ge=0)
    taken: Optional[float] = Field(default=None, ge=0)
    forfeit: Optional[float] = Field(default=None, ge=0)
    pending: Optional[float] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def at_least_one_field(self):
        if not self.model_dump(exclude_none=True):
            raise ValueError("Provide at least one balance field to update")
        return self
