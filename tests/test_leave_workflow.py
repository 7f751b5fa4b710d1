import pytest
from datetime import date, timedelta

from conftest import upcoming
from leavedesk.models.leave_request import LeaveRequest, LeaveStatus

MONDAY, WEDNESDAY, FRIDAY, SATURDAY, SUNDAY = 0, 2, 4, 5, 6


def _submit(client, headers, start, end=None, **extra):
    body = {"leave_type": extra.pop("leave_type", "annual"), "start_date": start.isoformat()}
    if end is not None:
        body["end_date"] = end.isoformat()
    body.update(extra)
    return client.post("/api/leave/requests", headers=headers, json=body)


def _submit_week(client, headers, weeks_ahead=1, leave_type="annual"):
    start = upcoming(MONDAY, weeks_ahead)
    response = _submit(client, headers, start, start + timedelta(days=4), leave_type=leave_type, reason="Family vacation")
    assert response.status_code == 201, response.json()
    return response.json()


def test_create_leave_request(client, employee_user, auth_headers, db_session):
    """Submitting charges working days and reserves them as pending."""
    data = _submit_week(client, auth_headers(employee_user))

    assert data["status"] == LeaveStatus.PENDING
    assert data["days_requested"] == 5
    assert data["employee"]["first_name"] == "Charl"
    assert data["badge"]["color"] == "yellow"

    db_session.refresh(employee_user)
    assert employee_user.pending == 5


def test_days_are_computed_server_side(client, employee_user, auth_headers):
    start = upcoming(MONDAY)
    response = _submit(client, auth_headers(employee_user), start, start + timedelta(days=13), days_requested=1)
    assert response.status_code == 201
    assert response.json()["days_requested"] == 10


def test_half_day_request(client, employee_user, auth_headers):
    day = upcoming(WEDNESDAY)
    response = _submit(client, auth_headers(employee_user), day, is_half_day=True, half_day_period="afternoon")
    assert response.status_code == 201
    data = response.json()
    assert data["days_requested"] == 0.5
    assert data["end_date"] == day.isoformat()
    assert data["half_day_period"] == "afternoon"


def test_weekend_only_request_is_rejected(client, employee_user, auth_headers, db_session):
    saturday = upcoming(SATURDAY)
    response = _submit(client, auth_headers(employee_user), saturday, saturday + timedelta(days=1))
    assert response.status_code == 400
    assert response.json()["errors"][0]["msg"] == "Please select valid working days"
    assert db_session.query(LeaveRequest).count() == 0
    db_session.refresh(employee_user)
    assert employee_user.pending == 0


def test_end_before_start_is_rejected(client, employee_user, auth_headers):
    friday = upcoming(FRIDAY)
    response = _submit(client, auth_headers(employee_user), friday, friday - timedelta(days=4))
    assert response.status_code == 400
    assert response.json()["errors"][0]["code"] == "LEAVE_VALIDATION_FAILED"


def test_past_start_date_is_rejected(client, employee_user, auth_headers):
    start = date.today() - timedelta(days=30)
    response = _submit(client, auth_headers(employee_user), start, start + timedelta(days=3))
    assert response.status_code == 400
    assert response.json()["errors"][0]["msg"] == "Leave cannot start in the past"


def test_missing_end_date_is_a_validation_error(client, employee_user, auth_headers):
    response = _submit(client, auth_headers(employee_user), upcoming(MONDAY))
    assert response.status_code == 422
    assert response.json()["success"] is False


def test_requires_authentication(client):
    response = client.get("/api/leave/requests")
    assert response.status_code == 401


def test_manager_approval(client, employee_user, admin_user, auth_headers, db_session):
    """Approval moves the days from pending to taken."""
    req = _submit_week(client, auth_headers(employee_user))
    response = client.post(
        f"/api/leave/requests/{req['id']}/approve",
        headers=auth_headers(admin_user),
        json={"comments": "Enjoy"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == LeaveStatus.APPROVED
    assert data["approved_by"] == admin_user.id
    assert data["approved_at"] is not None
    assert data["approver"]["last_name"] == "Pohotona"
    assert data["comments"] == "Enjoy"

    db_session.refresh(employee_user)
    assert employee_user.pending == 0
    assert employee_user.taken == 13


def test_rejection_releases_pending_days(client, employee_user, admin_user, auth_headers, db_session):
    req = _submit_week(client, auth_headers(employee_user))
    response = client.post(
        f"/api/leave/requests/{req['id']}/reject",
        headers=auth_headers(admin_user),
        json={"comments": "Team is short-staffed"},
    )
    assert response.status_code == 200
    assert response.json()["status"] == LeaveStatus.REJECTED

    db_session.refresh(employee_user)
    assert employee_user.pending == 0
    assert employee_user.taken == 8


def test_approve_without_body(client, employee_user, admin_user, auth_headers):
    req = _submit_week(client, auth_headers(employee_user))
    response = client.post(f"/api/leave/requests/{req['id']}/approve", headers=auth_headers(admin_user))
    assert response.status_code == 200
    assert response.json()["comments"] is None


@pytest.mark.parametrize("first, second", [("approve", "approve"), ("approve", "reject"), ("reject", "approve")])
def test_decisions_happen_once(client, employee_user, admin_user, auth_headers, db_session, first, second):
    req = _submit_week(client, auth_headers(employee_user))
    assert client.post(f"/api/leave/requests/{req['id']}/{first}", headers=auth_headers(admin_user)).status_code == 200

    db_session.refresh(employee_user)
    before = (employee_user.pending, employee_user.taken)

    response = client.post(f"/api/leave/requests/{req['id']}/{second}", headers=auth_headers(admin_user))
    assert response.status_code == 409
    assert response.json()["errors"][0]["code"] == "INVALID_TRANSITION"

    db_session.refresh(employee_user)
    assert (employee_user.pending, employee_user.taken) == before


def test_cancelled_request_cannot_be_decided(client, employee_user, admin_user, auth_headers, db_session):
    req = _submit_week(client, auth_headers(employee_user))
    leave = db_session.get(LeaveRequest, req["id"])
    leave.status = LeaveStatus.CANCELLED.value
    db_session.commit()

    response = client.post(f"/api/leave/requests/{req['id']}/approve", headers=auth_headers(admin_user))
    assert response.status_code == 409


def test_employee_cannot_approve(client, employee_user, auth_headers):
    req = _submit_week(client, auth_headers(employee_user))
    response = client.post(f"/api/leave/requests/{req['id']}/approve", headers=auth_headers(employee_user))
    assert response.status_code == 403


def test_approve_unknown_request(client, admin_user, auth_headers):
    response = client.post("/api/leave/requests/9999/approve", headers=auth_headers(admin_user))
    assert response.status_code == 404


def test_employees_only_see_their_own_requests(client, employee_user, other_user, admin_user, auth_headers):
    mine = _submit_week(client, auth_headers(employee_user))
    theirs = _submit_week(client, auth_headers(other_user), weeks_ahead=2)

    own = client.get("/api/leave/requests", headers=auth_headers(employee_user)).json()
    assert [r["id"] for r in own] == [mine["id"]]

    # Asking for someone else's rows is refused rather than silently widened
    response = client.get(
        "/api/leave/requests", params={"employee_id": other_user.id}, headers=auth_headers(employee_user)
    )
    assert response.status_code == 403

    # A single foreign request looks like it does not exist
    assert client.get(f"/api/leave/requests/{theirs['id']}", headers=auth_headers(employee_user)).status_code == 404

    everything = client.get("/api/leave/requests", headers=auth_headers(admin_user)).json()
    assert {r["id"] for r in everything} == {mine["id"], theirs["id"]}


def test_admin_filters_by_status_and_search(client, employee_user, other_user, admin_user, auth_headers):
    charl = _submit_week(client, auth_headers(employee_user), leave_type="Sick")
    sarah = _submit_week(client, auth_headers(other_user), weeks_ahead=2)
    client.post(f"/api/leave/requests/{sarah['id']}/approve", headers=auth_headers(admin_user))

    headers = auth_headers(admin_user)
    pending = client.get("/api/leave/requests", params={"status": "pending"}, headers=headers).json()
    assert [r["id"] for r in pending] == [charl["id"]]

    by_name = client.get("/api/leave/requests", params={"search": "JOHN"}, headers=headers).json()
    assert [r["id"] for r in by_name] == [sarah["id"]]

    by_type = client.get("/api/leave/requests", params={"search": "sick"}, headers=headers).json()
    assert [r["id"] for r in by_type] == [charl["id"]]

    by_email = client.get("/api/leave/requests", params={"search": "acmecorp"}, headers=headers).json()
    assert len(by_email) == 2

    nothing = client.get("/api/leave/requests", params={"status": "approved", "search": "smit"}, headers=headers).json()
    assert nothing == []


def test_unknown_status_filter(client, employee_user, auth_headers):
    response = client.get("/api/leave/requests", params={"status": "archived"}, headers=auth_headers(employee_user))
    assert response.status_code == 400


def test_leave_type_is_normalized(client, employee_user, auth_headers):
    data = _submit_week(client, auth_headers(employee_user), leave_type="  Annual ")
    assert data["leave_type"] == "annual"


def test_stats(client, employee_user, other_user, admin_user, auth_headers):
    first = _submit_week(client, auth_headers(employee_user))
    second = _submit_week(client, auth_headers(employee_user), weeks_ahead=2)
    _submit_week(client, auth_headers(other_user), weeks_ahead=3)
    client.post(f"/api/leave/requests/{first['id']}/approve", headers=auth_headers(admin_user))
    client.post(f"/api/leave/requests/{second['id']}/reject", headers=auth_headers(admin_user))

    own = client.get("/api/leave/stats", headers=auth_headers(employee_user)).json()
    assert own == {"total": 2, "pending": 0, "approved": 1, "rejected": 1}

    overall = client.get("/api/leave/stats", headers=auth_headers(admin_user)).json()
    assert overall == {"total": 3, "pending": 1, "approved": 1, "rejected": 1}


def test_balance_endpoint(client, employee_user, auth_headers):
    _submit_week(client, auth_headers(employee_user))
    balance = client.get("/api/leave/balance", headers=auth_headers(employee_user)).json()
    assert balance["pending"] == 5
    assert balance["available"] == 8
    assert balance["display_available"] == 8
    assert balance["overdue"] == 0


def test_balance_may_go_negative(client, employee_user, auth_headers):
    # 13 days available; three full weeks is 15 working days
    start = upcoming(MONDAY)
    response = _submit(client, auth_headers(employee_user), start, start + timedelta(days=18))
    assert response.status_code == 201

    balance = client.get("/api/leave/balance", headers=auth_headers(employee_user)).json()
    assert balance["available"] == -2
    assert balance["display_available"] == 0
    assert balance["overdue"] == 2


def test_calculate_endpoint(client, employee_user, auth_headers):
    start = upcoming(MONDAY)
    response = client.post(
        "/api/leave/calculate",
        headers=auth_headers(employee_user),
        json={"start_date": start.isoformat(), "end_date": (start + timedelta(days=6)).isoformat()},
    )
    assert response.status_code == 200
    assert response.json()["working_days"] == 5


def test_leave_types(client, employee_user, auth_headers):
    types = client.get("/api/leave/types", headers=auth_headers(employee_user)).json()
    assert {"value": "annual", "label": "Annual Leave"} in types
    assert len(types) == 8


def test_calculate_at_end_of_calendar(client, employee_user, auth_headers):
    response = client.post(
        "/api/leave/calculate",
        headers=auth_headers(employee_user),
        json={"start_date": "9999-12-31", "end_date": "9999-12-31"},
    )
    assert response.status_code == 200
    assert response.json()["working_days"] == 1
