# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import employee, leave_request, leave_history

# Explicit class exports for cleaner imports
from .employee import Employee, EmployeeRole, EmployeeSession
from .leave_request import LeaveRequest, LeaveStatus, HalfDayPeriod
from .leave_history import LeaveHistory, HistoryAction

__all__ = [
    "Employee",
    "EmployeeRole",
    "EmployeeSession",
    "LeaveRequest",
    "LeaveStatus",
    "HalfDayPeriod",
    "LeaveHistory",
    "HistoryAction",
]
