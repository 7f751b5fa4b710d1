from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from leavedesk.database import Base
import enum

class HistoryAction(str, enum.Enum):
    LEAVE_REQUESTED = "leave_requested"
    LEAVE_APPROVED = "leave_approved"
    LEAVE_REJECTED = "leave_rejected"
    BALANCE_UPDATED = "balance_updated"

class LeaveHistory(Base):
    """Append-only audit trail of leave workflow transitions and balance edits."""
    __tablename__ = "leave_history"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    leave_request_id = Column(Integer, ForeignKey("leave_requests.id"), nullable=True, index=True)
    action = Column(String, nullable=False, index=True)
    old_values = Column(JSON, nullable=True)
    new_values = Column(JSON, nullable=True)
    performed_by = Column(Integer, ForeignKey("employees.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    employee = relationship("Employee", foreign_keys=[employee_id])
    performer = relationship("Employee", foreign_keys=[performed_by])
    leave_request = relationship("LeaveRequest")
