"""Display helpers shared by the leave and history endpoints."""
from datetime import date
from typing import Any, Dict, Optional

_STATUS_BADGES = {
    "approved": ("green", "check-circle"),
    "rejected": ("red", "x-circle"),
    "pending": ("yellow", "clock"),
    "cancelled": ("gray", "alert-circle"),
}
_DEFAULT_BADGE = ("gray", "clock")


def status_badge(status: str) -> Dict[str, str]:
    color, icon = _STATUS_BADGES.get(status, _DEFAULT_BADGE)
    return {"label": status[:1].upper() + status[1:], "color": color, "icon": icon}


def format_action(action: str) -> str:
    """'leave_requested' -> 'Leave Requested'."""
    return action.replace("_", " ").title()


def _plural_days(days: Any) -> str:
    return f"{days:g} day" if days == 1 else f"{days:g} days"


def _short_date(value: Any) -> Optional[str]:
    if not value:
        return None
    if isinstance(value, str):
        value = date.fromisoformat(value)
    return value.strftime("%b %d")


def summarize_history(action: str, new_values: Optional[Dict[str, Any]]) -> Optional[str]:
    """One-line description of a history entry, or None when nothing useful can be said."""
    if not new_values:
        return None

    days = new_values.get("days")
    if action == "leave_requested" and days is not None:
        text = f"Requested {_plural_days(days)} leave"
        start, end = _short_date(new_values.get("start_date")), _short_date(new_values.get("end_date"))
        if start and end:
            text += f" from {start} to {end}"
        return text

    if action in ("leave_approved", "leave_rejected") and days is not None:
        return f"{_plural_days(days)} leave {action.split('_')[1]}"

    if action == "balance_updated":
        changed = ", ".join(f"{field} {value:g}" for field, value in sorted(new_values.items()))
        return f"Balance updated: {changed}"

    return None
