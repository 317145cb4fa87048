from datetime import date, timedelta
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.attendance import service as attendance_service
from app.core.enums import AttendanceStatus, EmployeeStatus
from app.core.exceptions import ValidationError
from app.core.models import Attendance, Employee


async def add_employee(db: AsyncSession, email: str = "emp@example.com", status=EmployeeStatus.ACTIVE) -> Employee:
    employee = Employee(name=email.split("@")[0].title(), email=email, role="Engineer", status=status)
    db.add(employee)
    await db.commit()
    await db.refresh(employee)
    return employee


async def add_records(db: AsyncSession, employee: Employee, start: date, statuses) -> None:
    for offset, status in enumerate(statuses):
        db.add(Attendance(employee_id=employee.id, date=start + timedelta(days=offset), status=status))
    await db.commit()


async def count_rows(db: AsyncSession) -> int:
    return (await db.execute(select(func.count(Attendance.id)))).scalar_one()


async def mark(client: AsyncClient, headers, **payload):
    return await client.post("/api/attendance", json=payload, headers=headers)


@pytest.mark.asyncio
async def test_mark_creates_record(client: AsyncClient, auth_headers, admin, db_session: AsyncSession) -> None:
    employee = await add_employee(db_session)

    response = await mark(
        client,
        auth_headers,
        employee=str(employee.id),
        date="2024-05-02T14:35:00",
        status="Present",
        checkInTime="09:05",
        location="Office",
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Attendance created successfully"

    data = body["data"]
    assert data["date"] == "2024-05-02"
    assert data["status"] == "Present"
    assert data["checkInTime"] == "09:05"
    assert data["location"] == "Office"
    assert data["markedBy"] == str(admin.id)
    assert data["employee"] == {
        "id": str(employee.id),
        "name": employee.name,
        "email": employee.email,
        "role": employee.role,
    }


@pytest.mark.asyncio
async def test_anonymous_mark_has_no_marker(client: AsyncClient, db_session: AsyncSession) -> None:
    employee = await add_employee(db_session)

    response = await client.post(
        "/api/attendance", json={"employee": str(employee.id), "date": "2024-05-02", "status": "WFH"}
    )
    assert response.status_code == 201
    assert response.json()["data"]["markedBy"] is None


@pytest.mark.asyncio
async def test_repeated_marks_keep_one_record_per_day(
    client: AsyncClient, auth_headers, db_session: AsyncSession
) -> None:
    employee = await add_employee(db_session)

    messages = []
    for when, status in [
        ("2024-05-02", "Present"),
        ("2024-05-02T10:00:00", "Late"),
        ("2024-05-02T18:30:00", "WFH"),
    ]:
        response = await mark(client, auth_headers, employee=str(employee.id), date=when, status=status)
        assert response.status_code == 201
        messages.append(response.json()["message"])

    assert messages == [
        "Attendance created successfully",
        "Attendance updated successfully",
        "Attendance updated successfully",
    ]
    assert await count_rows(db_session) == 1
    record = (await db_session.execute(select(Attendance))).scalar_one()
    assert record.status == AttendanceStatus.WFH
    assert record.date == date(2024, 5, 2)


@pytest.mark.asyncio
async def test_remark_does_not_clear_omitted_fields(
    client: AsyncClient, auth_headers, db_session: AsyncSession
) -> None:
    employee = await add_employee(db_session)
    await mark(
        client,
        auth_headers,
        employee=str(employee.id),
        date="2024-05-02",
        status="Late",
        checkInTime="10:20",
        notes="Traffic",
    )

    response = await mark(
        client,
        auth_headers,
        employee=str(employee.id),
        date="2024-05-02",
        status="Present",
        checkOutTime="18:00",
        notes="",
    )
    data = response.json()["data"]
    assert data["status"] == "Present"
    assert data["checkInTime"] == "10:20"
    assert data["checkOutTime"] == "18:00"
    assert data["notes"] == "Traffic"


@pytest.mark.asyncio
async def test_mark_for_unknown_employee(client: AsyncClient, auth_headers, db_session: AsyncSession) -> None:
    response = await mark(client, auth_headers, employee=str(uuid4()), date="2024-05-02", status="Present")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Employee not found"}
    assert await count_rows(db_session) == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload, field",
    [
        ({"date": "2024-05-02", "status": "Present"}, "employee"),
        ({"employee": "abc", "date": "2024-05-02", "status": "Present"}, "employee"),
        ({"employee": "EMPLOYEE_ID", "date": "yesterday", "status": "Present"}, "date"),
        ({"employee": "EMPLOYEE_ID", "date": "2024-05-02", "status": "Holiday"}, "status"),
    ],
)
async def test_mark_validation(client: AsyncClient, auth_headers, db_session: AsyncSession, payload, field) -> None:
    employee = await add_employee(db_session)
    if payload.get("employee") == "EMPLOYEE_ID":
        payload = {**payload, "employee": str(employee.id)}

    response = await client.post("/api/attendance", json=payload, headers=auth_headers)
    assert response.status_code == 400
    fields = [e["field"] for e in response.json()["errors"]]
    assert any(f.split(".")[0] == field for f in fields)
    assert await count_rows(db_session) == 0


@pytest.mark.asyncio
async def test_insert_race_falls_back_to_update(
    client: AsyncClient, auth_headers, db_session: AsyncSession, monkeypatch
) -> None:
    """A concurrent insert wins between our lookup and our insert: the unique constraint decides."""
    employee = await add_employee(db_session)
    await add_records(db_session, employee, date(2024, 5, 2), [AttendanceStatus.ABSENT])

    real_find = attendance_service.find_for_day
    calls = {"n": 0}

    async def stale_find(db, employee_id, day):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return await real_find(db, employee_id, day)

    monkeypatch.setattr(attendance_service, "find_for_day", stale_find)

    response = await mark(client, auth_headers, employee=str(employee.id), date="2024-05-02", status="Present")
    assert response.status_code == 201
    assert response.json()["message"] == "Attendance updated successfully"
    assert response.json()["data"]["status"] == "Present"
    assert calls["n"] == 2
    assert await count_rows(db_session) == 1


@pytest.mark.asyncio
async def test_get_update_delete(client: AsyncClient, auth_headers, db_session: AsyncSession) -> None:
    employee = await add_employee(db_session)
    created = (
        await mark(client, auth_headers, employee=str(employee.id), date="2024-05-02", status="Present")
    ).json()["data"]

    response = await client.get(f"/api/attendance/{created['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["data"]["id"] == created["id"]

    response = await client.put(
        f"/api/attendance/{created['id']}",
        json={"status": "Absent", "notes": "Sick leave", "date": "2024-05-03T08:00:00"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["status"] == "Absent"
    assert updated["notes"] == "Sick leave"
    assert updated["date"] == "2024-05-03"
    assert updated["employee"]["id"] == str(employee.id)

    response = await client.delete(f"/api/attendance/{created['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Attendance deleted successfully"

    for method in ("get", "delete"):
        response = await getattr(client, method)(f"/api/attendance/{created['id']}", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["error"] == "Attendance record not found"


@pytest.mark.asyncio
async def test_update_unknown_record_or_employee(client: AsyncClient, auth_headers, db_session: AsyncSession) -> None:
    response = await client.put(f"/api/attendance/{uuid4()}", json={"status": "Late"}, headers=auth_headers)
    assert response.status_code == 404

    employee = await add_employee(db_session)
    created = (
        await mark(client, auth_headers, employee=str(employee.id), date="2024-05-02", status="Present")
    ).json()["data"]
    response = await client.put(
        f"/api/attendance/{created['id']}", json={"employee": str(uuid4())}, headers=auth_headers
    )
    assert response.status_code == 404
    assert response.json()["error"] == "Employee not found"


@pytest.mark.asyncio
async def test_update_onto_existing_day_conflicts(
    client: AsyncClient, auth_headers, db_session: AsyncSession
) -> None:
    employee = await add_employee(db_session)
    await mark(client, auth_headers, employee=str(employee.id), date="2024-05-02", status="Present")
    second = (
        await mark(client, auth_headers, employee=str(employee.id), date="2024-05-03", status="Present")
    ).json()["data"]

    response = await client.put(f"/api/attendance/{second['id']}", json={"date": "2024-05-02"}, headers=auth_headers)
    assert response.status_code == 409
    assert await count_rows(db_session) == 2


@pytest.mark.asyncio
async def test_list_filters_and_ordering(client: AsyncClient, auth_headers, db_session: AsyncSession) -> None:
    alice = await add_employee(db_session, "alice@example.com")
    bob = await add_employee(db_session, "bob@example.com")
    await add_records(db_session, alice, date(2024, 4, 29), [AttendanceStatus.PRESENT] * 4)  # Apr 29 - May 2
    await add_records(db_session, bob, date(2024, 5, 1), [AttendanceStatus.LATE, AttendanceStatus.ABSENT])

    response = await client.get("/api/attendance", headers=auth_headers)
    body = response.json()
    assert body["total"] == 6
    dates = [r["date"] for r in body["data"]]
    assert dates == sorted(dates, reverse=True)

    response = await client.get(
        "/api/attendance", params={"employeeId": str(alice.id), "month": 5, "year": 2024}, headers=auth_headers
    )
    assert [r["date"] for r in response.json()["data"]] == ["2024-05-02", "2024-05-01"]

    response = await client.get(
        "/api/attendance", params={"startDate": "2024-04-30", "endDate": "2024-05-01"}, headers=auth_headers
    )
    assert response.json()["total"] == 3

    response = await client.get("/api/attendance", params={"status": "Late"}, headers=auth_headers)
    data = response.json()["data"]
    assert len(data) == 1 and data[0]["employee"]["email"] == "bob@example.com"

    response = await client.get("/api/attendance", params={"limit": 4, "page": 2}, headers=auth_headers)
    body = response.json()
    assert body["count"] == 2 and body["pages"] == 2


@pytest.mark.asyncio
async def test_employee_month_statistics(client: AsyncClient, auth_headers, db_session: AsyncSession) -> None:
    employee = await add_employee(db_session)
    statuses = (
        [AttendanceStatus.PRESENT] * 20
        + [AttendanceStatus.ABSENT] * 5
        + [AttendanceStatus.LATE] * 3
        + [AttendanceStatus.WFH] * 2
    )
    await add_records(db_session, employee, date(2024, 4, 1), statuses)
    # Outside the month: must not be counted
    await add_records(db_session, employee, date(2024, 5, 1), [AttendanceStatus.PRESENT])

    response = await client.get(
        f"/api/attendance/employee/{employee.id}/month", params={"month": 4, "year": 2024}, headers=auth_headers
    )
    assert response.status_code == 200
    body = response.json()
    assert body["month"] == 4 and body["year"] == 2024
    assert body["stats"] == {"present": 20, "absent": 5, "late": 3, "wfh": 2, "total": 30}
    stats = body["stats"]
    assert stats["present"] + stats["absent"] + stats["late"] + stats["wfh"] == stats["total"]
    assert len(body["data"]) == 30
    assert body["data"][0]["date"] == "2024-04-01"
    assert body["data"][-1]["date"] == "2024-04-30"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params",
    [{}, {"month": 4}, {"year": 2024}, {"month": 13, "year": 2024}, {"month": 4, "year": 1999}],
)
async def test_employee_month_requires_valid_month_and_year(client: AsyncClient, auth_headers, params) -> None:
    response = await client.get(f"/api/attendance/employee/{uuid4()}/month", params=params, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_get_employee_month_raises_validation_error(db_session: AsyncSession) -> None:
    with pytest.raises(ValidationError) as exc:
        await attendance_service.get_employee_month(db_session, uuid4(), 0, 2024)
    assert exc.value.errors == [{"field": "month", "message": "Month must be between 1 and 12"}]


@pytest.mark.asyncio
async def test_stats_for_month(client: AsyncClient, auth_headers, db_session: AsyncSession) -> None:
    alice = await add_employee(db_session, "alice@example.com")
    await add_employee(db_session, "bob@example.com")
    await add_employee(db_session, "carol@example.com")
    await add_employee(db_session, "gone@example.com", status=EmployeeStatus.INACTIVE)
    await add_records(
        db_session, alice, date(2024, 4, 1), [AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.WFH]
    )
    await add_records(db_session, alice, date(2024, 3, 31), [AttendanceStatus.ABSENT])

    response = await client.get(
        "/api/attendance/stats/overview", params={"month": 4, "year": 2024}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["data"] == {
        "present": 1,
        "absent": 0,
        "late": 1,
        "wfh": 1,
        "total": 3,
        "totalEmployees": 3,
        "presentPercentage": 33.33,
    }

    response = await client.get(
        "/api/attendance/stats/overview",
        params={"startDate": "2024-03-31", "endDate": "2024-04-01"},
        headers=auth_headers,
    )
    data = response.json()["data"]
    assert data["total"] == 2
    assert data["absent"] == 1 and data["present"] == 1


@pytest.mark.asyncio
async def test_stats_default_to_current_month(client: AsyncClient, auth_headers, db_session: AsyncSession) -> None:
    employee = await add_employee(db_session)
    await add_records(db_session, employee, date.today(), [AttendanceStatus.PRESENT])

    response = await client.get("/api/attendance/stats/overview", headers=auth_headers)
    data = response.json()["data"]
    assert data["present"] == 1
    assert data["presentPercentage"] == 100.0


@pytest.mark.asyncio
async def test_stats_without_active_employees(db_session: AsyncSession) -> None:
    stats = await attendance_service.get_attendance_stats(db_session, today=date(2024, 4, 15))
    assert stats.total_employees == 0
    assert stats.present_percentage == 0
