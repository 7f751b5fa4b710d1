from typing import Dict, Optional

from leavedesk.core.config import settings
from leavedesk.models.employee import Employee

SIGNED = "signed"
CLAMPED = "clamped"


def available_balance(opening_balance: float, taken: float, forfeit: float, pending: float) -> float:
    """Available leave days. May be negative when an employee is overdrawn."""
    return opening_balance - taken - forfeit - pending


def summarize_balance(employee: Employee, policy: Optional[str] = None) -> Dict[str, float]:
    """
    Balance figures for display.

    ``available`` is always the signed result. With the "clamped" policy the
    displayed figure never drops below zero and the shortfall is reported as
    ``overdue``; with "signed" the negative value is displayed as is.
    """
    policy = policy or settings.leave.negative_balance_display
    if policy not in (SIGNED, CLAMPED):
        raise ValueError(f"Unknown balance display policy: {policy}")

    available = available_balance(
        employee.opening_balance or 0.0,
        employee.taken or 0.0,
        employee.forfeit or 0.0,
        employee.pending or 0.0,
    )
    if policy == CLAMPED and available < 0:
        display_available, overdue = 0.0, abs(available)
    else:
        display_available, overdue = available, 0.0

    return {
        "opening_balance": employee.opening_balance or 0.0,
        "taken": employee.taken or 0.0,
        "forfeit": employee.forfeit or 0.0,
        "pending": employee.pending or 0.0,
        "available": available,
        "display_available": display_available,
        "overdue": overdue,
        "policy": policy,
    }
