"""
Tests for app/api/v1/employees.py - listing, search, lookups and mutations.
"""
from datetime import date
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app.crud import employee as crud_employee
from app.database import get_db
from app.main import app
from app.models import Employee

NEW_EMPLOYEE = {
    "birth_date": "1990-05-17",
    "first_name": "Dan",
    "last_name": "Diaz",
    "gender": "M",
    "hire_date": "2024-01-01",
}


def emp_nos(payload):
    return [row["emp_no"] for row in payload]


class TestListEmployees:
    """GET /api/employees"""

    def test_default_listing(self, client):
        response = client.get("/api/employees")

        assert response.status_code == 200
        body = response.json()
        assert emp_nos(body["rows"]) == [10001, 10002, 10003]
        assert body["total"] == 3
        assert body["limit"] == 20
        assert body["offset"] == 0
        assert response.headers["X-Total-Count"] == "3"

    def test_first_page(self, client):
        response = client.get("/api/employees?limit=2&offset=0")

        body = response.json()
        assert emp_nos(body["rows"]) == [10001, 10002]
        assert body["total"] == 3

    def test_find_alias(self, client):
        response = client.get("/api/employees/find?limit=2&offset=2")

        body = response.json()
        assert emp_nos(body["rows"]) == [10003]
        assert body["total"] == 3

    def test_row_shape(self, client):
        row = client.get("/api/employees?limit=1").json()["rows"][0]

        assert row == {
            "emp_no": 10001,
            "birth_date": "1960-01-15",
            "first_name": "Alice",
            "last_name": "Anders",
            "gender": "F",
            "hire_date": "1986-06-26",
        }

    def test_name_filter_is_case_insensitive_substring(self, client):
        body = client.get("/api/employees?first_name=AL").json()

        assert emp_nos(body["rows"]) == [10001]
        assert body["total"] == 1

    def test_last_name_filter(self, client):
        body = client.get("/api/employees?last_name=o").json()

        assert emp_nos(body["rows"]) == [10002, 10003]

    def test_gender_filter_is_normalized(self, client):
        body = client.get("/api/employees?gender=f").json()

        assert emp_nos(body["rows"]) == [10001, 10003]
        assert body["total"] == 2

    def test_date_filters(self, client):
        body = client.get("/api/employees?birth_date=1964-06-02").json()
        assert emp_nos(body["rows"]) == [10002]

        body = client.get("/api/employees?hire_date=1986-08-28").json()
        assert emp_nos(body["rows"]) == [10003]

    def test_filters_combine_with_and(self, client):
        body = client.get("/api/employees?gender=F&last_name=cole").json()

        assert emp_nos(body["rows"]) == [10003]
        assert body["total"] == 1

    def test_blank_filters_are_ignored(self, client):
        body = client.get("/api/employees?first_name=&gender=%20&birth_date=").json()

        assert body["total"] == 3

    def test_total_ignores_pagination(self, client):
        body = client.get("/api/employees?gender=F&limit=1&offset=1").json()

        assert emp_nos(body["rows"]) == [10003]
        assert body["total"] == 2

    def test_offset_past_end_returns_empty_page(self, client):
        body = client.get("/api/employees?offset=50").json()

        assert body["rows"] == []
        assert body["total"] == 3

    @pytest.mark.parametrize("query,expected_limit", [
        ("limit=0", 1),
        ("limit=-3", 1),
        ("limit=1000", 100),
        ("limit=abc", 20),
        ("limit=7", 7),
    ])
    def test_limit_is_clamped(self, client, query, expected_limit):
        body = client.get(f"/api/employees?{query}").json()

        assert body["limit"] == expected_limit

    def test_bad_offset_falls_back_to_zero(self, client):
        body = client.get("/api/employees?offset=-5").json()
        assert body["offset"] == 0

        body = client.get("/api/employees?offset=x").json()
        assert body["offset"] == 0

    def test_order_by_name_desc(self, client):
        body = client.get("/api/employees?orderBy=first_name&direction=desc").json()

        assert emp_nos(body["rows"]) == [10003, 10002, 10001]

    def test_order_ties_break_on_emp_no(self, client):
        body = client.get("/api/employees?orderBy=gender").json()
        assert emp_nos(body["rows"]) == [10001, 10003, 10002]

        body = client.get("/api/employees?orderBy=gender&direction=desc").json()
        assert emp_nos(body["rows"]) == [10002, 10001, 10003]

    def test_unknown_direction_falls_back_to_asc(self, client):
        body = client.get("/api/employees?orderBy=hire_date&direction=sideways").json()

        assert emp_nos(body["rows"]) == [10002, 10001, 10003]

    def test_invalid_order_by_is_rejected(self, client):
        response = client.get("/api/employees?orderBy=salary")

        assert response.status_code == 400
        body = response.json()
        assert body["error"].startswith("Invalid orderBy")
        assert body["allowed"] == ["emp_no", "first_name", "last_name", "gender", "hire_date"]

    def test_invalid_order_by_never_reaches_the_database(self):
        session = MagicMock()
        app.dependency_overrides[get_db] = lambda: session
        try:
            response = TestClient(app).get("/api/employees?orderBy=birth_date; DROP TABLE employees")
        finally:
            app.dependency_overrides.pop(get_db, None)

        assert response.status_code == 400
        assert session.method_calls == []

    @pytest.mark.parametrize("query,message", [
        ("gender=X", "gender must be M or F"),
        ("birth_date=1990/01/01", "birth_date must be YYYY-MM-DD"),
        ("hire_date=2020-1-1", "hire_date must be YYYY-MM-DD"),
    ])
    def test_invalid_filter_values(self, client, query, message):
        response = client.get(f"/api/employees?{query}")

        assert response.status_code == 400
        assert response.json() == {"error": message}

    def test_pages_partition_the_result_set(self, client, db_session):
        db_session.add_all([
            Employee(emp_no=20000 + i, birth_date=date(1970, 1, 1), first_name="Pat",
                     last_name=f"Page{i:02d}", gender="M" if i % 2 else "F",
                     hire_date=date(2000, 1, 1 + i % 28))
            for i in range(25)
        ])
        db_session.commit()

        seen = []
        offset = 0
        while True:
            body = client.get(
                f"/api/employees?first_name=pat&orderBy=gender&limit=7&offset={offset}"
            ).json()
            assert body["total"] == 25
            if not body["rows"]:
                break
            seen.extend(emp_nos(body["rows"]))
            offset += 7

        assert len(seen) == 25
        assert len(set(seen)) == 25

    def test_count_and_page_share_the_same_predicates(self, client):
        with patch.object(crud_employee, "count", wraps=crud_employee.count) as count_spy, \
                patch.object(crud_employee, "get_page", wraps=crud_employee.get_page) as page_spy:
            response = client.get("/api/employees?last_name=o&gender=M")

        assert response.status_code == 200
        assert count_spy.call_count == 1
        assert page_spy.call_count == 1
        assert count_spy.call_args.args[1] is page_spy.call_args.args[1]
        assert response.json()["total"] == 1

    def test_api_responses_are_not_cacheable(self, client):
        response = client.get("/api/employees")

        assert response.headers["Cache-Control"] == "no-store"


class TestSearchEmployees:
    """GET /api/employees/search"""

    def test_search_by_first_name(self, client):
        response = client.get("/api/employees/search?q=ali")

        assert response.status_code == 200
        assert emp_nos(response.json()) == [10001]

    def test_search_by_full_name(self, client):
        rows = client.get("/api/employees/search?q=bob%20brown").json()

        assert emp_nos(rows) == [10002]
        assert "birth_date" not in rows[0]

    def test_search_orders_by_emp_no_and_limits(self, client):
        rows = client.get("/api/employees/search?q=e&limit=2").json()

        assert emp_nos(rows) == [10001, 10003]

    @pytest.mark.parametrize("query", ["", "?q=", "?q=%20%20"])
    def test_search_requires_q(self, client, query):
        response = client.get(f"/api/employees/search{query}")

        assert response.status_code == 400
        assert response.json() == {"error": "Parameter q is required"}


class TestGetEmployee:
    """GET /api/employees/{emp_no} and /full"""

    def test_get_employee(self, client):
        response = client.get("/api/employees/10002")

        assert response.status_code == 200
        assert response.json()["first_name"] == "Bob"

    def test_get_missing_employee(self, client):
        response = client.get("/api/employees/99999")

        assert response.status_code == 404
        assert response.json() == {"error": "Employee not found"}

    @pytest.mark.parametrize("emp_no", [
        "abc", "0", "-1", "12a", "1.5",
        "\u0661\u0660\u0660\u0660\u0661",
        "2147483648",
        "99999999999999999999",
    ])
    def test_malformed_emp_no(self, client, emp_no):
        response = client.get(f"/api/employees/{emp_no}")

        assert response.status_code == 400
        assert response.json() == {"error": "emp_no must be a positive integer"}

    def test_full_with_all_current_facets(self, client):
        body = client.get("/api/employees/10001/full").json()

        assert body["first_name"] == "Alice"
        assert body["current_salary"] == 62102
        assert body["current_title"] == "Senior Engineer"
        assert body["current_dept_no"] == "D005"
        assert body["current_dept_name"] == "Development"

    def test_full_without_current_facets(self, client):
        body = client.get("/api/employees/10003/full").json()

        assert body["emp_no"] == 10003
        assert body["current_salary"] is None
        assert body["current_title"] is None
        assert body["current_dept_no"] is None
        assert body["current_dept_name"] is None

    def test_full_missing_employee(self, client):
        response = client.get("/api/employees/424242/full")

        assert response.status_code == 404


class TestCreateEmployee:
    """POST /api/employees"""

    def test_create_allocates_next_emp_no(self, client):
        response = client.post("/api/employees", json=NEW_EMPLOYEE)

        assert response.status_code == 201
        body = response.json()
        assert body["ok"] is True
        assert body["message"] == "Employee created"
        assert body["emp_no"] == 10004
        assert body["data"]["first_name"] == "Dan"
        assert response.headers["Location"] == "/api/employees/10004"

        assert client.get("/api/employees/10004").status_code == 200

    def test_create_with_explicit_emp_no(self, client):
        response = client.post("/api/employees", json={**NEW_EMPLOYEE, "emp_no": 500000})

        assert response.status_code == 201
        assert response.json()["emp_no"] == 500000

    def test_empty_emp_no_means_allocate(self, client):
        response = client.post("/api/employees", json={**NEW_EMPLOYEE, "emp_no": ""})

        assert response.status_code == 201
        assert response.json()["emp_no"] == 10004

    def test_duplicate_emp_no_is_a_conflict(self, client):
        response = client.post("/api/employees", json={**NEW_EMPLOYEE, "emp_no": 10001})

        assert response.status_code == 409
        assert response.json()["error"] == "emp_no 10001 already exists"
        assert client.get("/api/employees/10001").json()["first_name"] == "Alice"

    def test_input_is_normalized(self, client):
        payload = {**NEW_EMPLOYEE, "first_name": "  Dan ", "gender": "m"}

        body = client.post("/api/employees", json=payload).json()

        assert body["data"]["first_name"] == "Dan"
        assert body["data"]["gender"] == "M"

    def test_allocation_retries_after_collision(self, client):
        with patch.object(crud_employee, "next_emp_no", side_effect=[10001, 10004]):
            response = client.post("/api/employees", json=NEW_EMPLOYEE)

        assert response.status_code == 201
        assert response.json()["emp_no"] == 10004

    def test_allocation_gives_up_after_repeated_collisions(self, client):
        with patch.object(crud_employee, "next_emp_no", return_value=10002) as allocator:
            response = client.post("/api/employees", json=NEW_EMPLOYEE)

        assert response.status_code == 409
        assert allocator.call_count == 3

    @pytest.mark.parametrize("field", ["birth_date", "first_name", "last_name", "gender", "hire_date"])
    def test_missing_field(self, client, field):
        payload = {k: v for k, v in NEW_EMPLOYEE.items() if k != field}

        response = client.post("/api/employees", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": f"Missing required field: {field}"}

    @pytest.mark.parametrize("field", ["first_name", "last_name"])
    def test_blank_name(self, client, field):
        response = client.post("/api/employees", json={**NEW_EMPLOYEE, field: "   "})

        assert response.status_code == 400
        assert response.json() == {"error": f"Missing required field: {field}"}

    @pytest.mark.parametrize("change,message", [
        ({"gender": "X"}, "gender must be M or F"),
        ({"birth_date": "17/05/1990"}, "birth_date must be YYYY-MM-DD"),
        ({"hire_date": "2024-1-1"}, "hire_date must be YYYY-MM-DD"),
        ({"emp_no": 0}, "emp_no must be a positive integer"),
        ({"emp_no": -10}, "emp_no must be a positive integer"),
    ])
    def test_invalid_values(self, client, change, message):
        response = client.post("/api/employees", json={**NEW_EMPLOYEE, **change})

        assert response.status_code == 400
        assert response.json() == {"error": message}

    @pytest.mark.parametrize("emp_no", [2**31, 10**20])
    def test_emp_no_beyond_column_range(self, client, emp_no):
        response = client.post("/api/employees", json={**NEW_EMPLOYEE, "emp_no": emp_no})

        assert response.status_code == 400
        assert response.json()["error"].startswith("emp_no")
        assert client.get("/api/employees?limit=100").json()["total"] == 3

    def test_name_too_long(self, client):
        response = client.post("/api/employees", json={**NEW_EMPLOYEE, "first_name": "x" * 15})

        assert response.status_code == 400
        assert response.json()["error"].startswith("first_name")

    def test_impossible_date(self, client):
        response = client.post("/api/employees", json={**NEW_EMPLOYEE, "birth_date": "1990-02-30"})

        assert response.status_code == 400
        assert response.json()["error"].startswith("birth_date")

    def test_body_must_be_an_object(self, client):
        response = client.post("/api/employees", json=["not", "an", "object"])

        assert response.status_code == 400


class TestUpdateEmployee:
    """PUT /api/employees/{emp_no}"""

    def test_full_update(self, client):
        payload = {**NEW_EMPLOYEE, "first_name": "Alicia", "gender": "f"}

        response = client.put("/api/employees/10001", json=payload)

        assert response.status_code == 200
        body = response.json()
        assert body["emp_no"] == 10001
        assert body["first_name"] == "Alicia"
        assert body["gender"] == "F"
        assert body["birth_date"] == "1990-05-17"
        assert client.get("/api/employees/10001").json()["last_name"] == "Diaz"

    def test_update_missing_employee(self, client):
        response = client.put("/api/employees/99999", json=NEW_EMPLOYEE)

        assert response.status_code == 404
        assert response.json() == {"error": "Employee not found"}

    def test_partial_body_is_rejected(self, client):
        response = client.put("/api/employees/10001", json={"first_name": "Alicia"})

        assert response.status_code == 400
        assert response.json()["error"].startswith("Missing required field")
        assert client.get("/api/employees/10001").json()["first_name"] == "Alice"

    def test_update_malformed_emp_no(self, client):
        response = client.put("/api/employees/abc", json=NEW_EMPLOYEE)

        assert response.status_code == 400


class TestDeleteEmployee:
    """DELETE /api/employees/{emp_no}"""

    def test_delete_employee_without_dependents(self, client):
        emp_no = client.post("/api/employees", json=NEW_EMPLOYEE).json()["emp_no"]

        response = client.delete(f"/api/employees/{emp_no}")

        assert response.status_code == 200
        assert response.json() == {"ok": True, "deleted": 1}
        assert client.get(f"/api/employees/{emp_no}").status_code == 404

    def test_delete_referenced_employee_is_a_conflict(self, client):
        response = client.delete("/api/employees/10001")

        assert response.status_code == 409
        assert response.json() == {"error": "Cannot delete: employee has related records"}
        assert client.get("/api/employees/10001").status_code == 200
        assert client.get("/api/employees/10001/full").json()["current_salary"] == 62102

    def test_delete_missing_employee(self, client):
        response = client.delete("/api/employees/99999")

        assert response.status_code == 404
        assert response.json() == {"error": "Employee not found"}

    def test_delete_malformed_emp_no(self, client):
        response = client.delete("/api/employees/0")

        assert response.status_code == 400
