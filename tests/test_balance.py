import pytest

from leavedesk.models.employee import Employee
from leavedesk.services.balance import available_balance, summarize_balance


def _employee(opening, taken, forfeit, pending):
    return Employee(opening_balance=opening, taken=taken, forfeit=forfeit, pending=pending)


@pytest.mark.parametrize(
    "opening, taken, forfeit, pending, expected",
    [
        (25, 5, 0, 3, 17),
        (22, 8, 1, 2, 11),
        (20, 3, 0, 5, 12),
        (5, 4, 2, 1.5, -2.5),
        (0, 0, 0, 0, 0),
    ],
)
def test_available_balance(opening, taken, forfeit, pending, expected):
    assert available_balance(opening, taken, forfeit, pending) == pytest.approx(expected)


def test_signed_policy_shows_negative_value():
    summary = summarize_balance(_employee(5, 4, 2, 1.5), policy="signed")
    assert summary["available"] == pytest.approx(-2.5)
    assert summary["display_available"] == pytest.approx(-2.5)
    assert summary["overdue"] == 0


def test_clamped_policy_reports_overdue():
    summary = summarize_balance(_employee(5, 4, 2, 1.5), policy="clamped")
    assert summary["available"] == pytest.approx(-2.5)
    assert summary["display_available"] == 0
    assert summary["overdue"] == pytest.approx(2.5)


@pytest.mark.parametrize("policy", ["signed", "clamped"])
def test_positive_balance_is_identical_under_both_policies(policy):
    summary = summarize_balance(_employee(22, 8, 1, 2), policy=policy)
    assert summary["available"] == summary["display_available"] == 11
    assert summary["overdue"] == 0
    assert summary["policy"] == policy


def test_policy_defaults_to_configuration():
    summary = summarize_balance(_employee(1, 2, 0, 0))
    assert summary["policy"] == "clamped"
    assert summary["overdue"] == 1


def test_unknown_policy_rejected():
    with pytest.raises(ValueError):
        summarize_balance(_employee(1, 0, 0, 0), policy="rounded")
