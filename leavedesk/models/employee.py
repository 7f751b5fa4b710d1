"""
Employee Model.
An employee is both the login account and the holder of the leave balance.
"""
from sqlalchemy import Column, Integer, String, Enum, DateTime, Boolean, Float, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from leavedesk.database import Base


class EmployeeRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    employee_code = Column(String, unique=True, index=True, nullable=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    role = Column(Enum(EmployeeRole, values_callable=lambda e: [m.value for m in e]), default=EmployeeRole.USER, nullable=False)

    # Leave-day counters; available balance is derived, never stored
    opening_balance = Column(Float, default=0.0, nullable=False)
    taken = Column(Float, default=0.0, nullable=False)
    forfeit = Column(Float, default=0.0, nullable=False)
    pending = Column(Float, default=0.0, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    sessions = relationship("EmployeeSession", back_populates="employee", cascade="all, delete-orphan")
    leave_requests = relationship(
        "LeaveRequest",
        foreign_keys="[LeaveRequest.employee_id]",
        back_populates="employee",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Employee {self.email} ({self.role.value})>"

    @property
    def is_admin(self) -> bool:
        return self.role == EmployeeRole.ADMIN


class EmployeeSession(Base):
    __tablename__ = "employee_sessions"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    refresh_token = Column(String, unique=True, index=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    is_revoked = Column(Boolean, default=False, nullable=False)

    employee = relationship("Employee", back_populates="sessions")
