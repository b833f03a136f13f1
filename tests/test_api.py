def view(client, table_key="students", **params):
    response = client.get(f"/v1/tables/{table_key}/view", params=params)
    assert response.status_code == 200, response.text
    return response.json()


def row_names(payload):
    return [cell["display"] for row in payload["rows"] for cell in row["cells"] if cell["key"] == "name"]


# ── Service ──────────────────────────────────────────────


def test_health(client):
    data = client.get("/health").json()
    assert data["status"] == "healthy"
    assert data["tables_loaded"] == 8
    assert data["collections"] == 8


def test_root(client):
    assert client.get("/").json()["endpoints"]["tables"] == "/v1/tables"


# ── Tables ───────────────────────────────────────────────


def test_list_tables(client):
    data = client.get("/v1/tables").json()
    assert len(data) == 8
    assert client.get("/v1/tables", params={"collection": "grades"}).json()[0]["table_key"] == "grades"


def test_get_table(client):
    assert client.get("/v1/tables/students").json()["export_file_name"] == "students"
    assert client.get("/v1/tables/parents").status_code == 404


def test_default_view(client):
    data = view(client)
    assert data["layout"] == "grid"
    assert data["page_info"]["total_rows"] == 8
    assert data["page_info"]["show_controls"] is False
    assert row_names(data)[0] == "Emily Chen"
    assert data["rows"][0]["select_href"] == "/v1/records/students/s1"
    assert [a["name"] for a in data["rows"][0]["actions"]] == ["view", "edit", "delete"]
    assert data["export_url"] == "/v1/tables/students/export"


def test_search(client):
    data = view(client, search="CHEN")
    assert row_names(data) == ["Emily Chen"]
    assert data["state"]["search"] == "CHEN"
    assert data["export_url"] == "/v1/tables/students/export?search=CHEN"


def test_search_by_parent(client):
    assert row_names(view(client, search="carlos")) == ["Maria Garcia"]


def test_sort_descending(client):
    data = view(client, sort="name", direction="desc")
    assert row_names(data)[:2] == ["Sophie Brown", "Olivia Martinez"]
    header = next(h for h in data["columns"] if h["key"] == "name")
    assert header["indicator"] == "↓"


def test_sort_on_unknown_column(client):
    response = client.get("/v1/tables/students/view", params={"sort": "nope"})
    assert response.status_code == 400


def test_sort_on_non_sortable_column_is_ignored(client):
    data = view(client, sort="email")
    assert data["state"]["sort_key"] is None
    assert row_names(data)[0] == "Emily Chen"


def test_page_is_clamped(client):
    data = view(client, page_size=3, page=99)
    assert data["state"]["page"] == 3
    assert data["page_info"]["total_pages"] == 3
    assert len(data["rows"]) == 2
    assert view(client, page_size=3, page=0)["state"]["page"] == 1


def test_card_layout(client):
    data = view(client, viewport_width=375)
    assert data["layout"] == "cards"
    first = data["rows"][0]
    assert first["title"]["display"] == "Emily Chen"
    assert "email" not in [c["key"] for c in first["cells"]]


def test_empty_result(client):
    data = view(client, search="zzz")
    assert data["empty"] is True
    assert data["rows"] == []
    assert data["empty_message"] == "No results found"


def test_non_selectable_table(client):
    row = view(client, "fees")["rows"][0]
    assert row["clickable"] is False
    assert row["select_href"] is None


def test_rendered_values(client):
    fees = view(client, "fees")["rows"][0]["cells"]
    amount = next(c for c in fees if c["key"] == "amount")
    assert amount["value"] == 2500
    assert amount["display"] == "₹2,500"

    classes = view(client, "classes")["rows"][0]["cells"]
    assert next(c for c in classes if c["key"] == "time")["display"] == "08:00 - 14:00"


def test_render_html(client):
    response = client.get("/v1/tables/students/render", params={"page_size": 3})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "<table" in response.text
    assert 'data-testid="row-s1"' in response.text
    assert "Showing 1 to 3 of 8" in response.text

    cards = client.get("/v1/tables/students/render", params={"viewport_width": 375}).text
    assert "card-list" in cards


# ── Export ───────────────────────────────────────────────


def test_export(client):
    response = client.get("/v1/tables/students/export")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"] == 'attachment; filename="students.csv"'
    lines = response.text.split("\n")
    assert lines[0] == "Name,Email,School,Grade,Section,Parent,Status"
    assert lines[1] == "Emily Chen,e.chen@student.edumanage.com,Greenfield High,10,A,Michael Chen,active"
    assert lines[3] == "Maria Garcia,m.garcia@student.edumanage.com,,10,B,Carlos Garcia,active"
    assert len(lines) == 9


def test_export_filtered_and_sorted(client):
    response = client.get(
        "/v1/tables/students/export",
        params={"search": "e", "sort": "name", "direction": "desc"},
    )
    names = [line.split(",")[0] for line in response.text.split("\n")[1:]]
    assert names == sorted(names, reverse=True)
    assert len(names) == 8


def test_export_raw_values(client):
    lines = client.get("/v1/tables/fees/export").text.split("\n")
    assert lines[0] == "Student,Fee Type,Amount,Due Date,Status,Paid Date"
    assert lines[1] == "Emily Chen,Tuition Fee,2500,2026-01-31,paid,2026-01-05"
    assert client.get("/v1/tables/audit_logs/export").headers["content-disposition"].endswith('"audit-logs.csv"')


def test_export_unknown_sort(client):
    assert client.get("/v1/tables/students/export", params={"sort": "nope"}).status_code == 400


# ── Records ──────────────────────────────────────────────


def test_record_counts(client):
    data = client.get("/v1/records").json()
    assert data["students"] == 8
    assert data["audit_logs"] == 4


def test_get_record(client):
    assert client.get("/v1/records/students/s1").json()["name"] == "Emily Chen"
    assert client.get("/v1/records/students/missing").status_code == 404
    assert client.get("/v1/records/parents").status_code == 404


def test_create_record(client):
    response = client.post(
        "/v1/records/students",
        json={"id": "s9", "name": "Aaron Young", "email": "a.young@school.test", "grade": "9", "section": "A"},
    )
    assert response.status_code == 201
    assert view(client, sort="name")["rows"][0]["row_id"] == "s9"


def test_create_invalid_record(client):
    response = client.post("/v1/records/students", json={"name": "No email"})
    assert response.status_code == 400
    assert response.json()["detail"]["errors"]


def test_create_duplicate_record(client):
    response = client.post(
        "/v1/records/students",
        json={"id": "s1", "name": "Dup", "email": "d@school.test", "grade": "9", "section": "A"},
    )
    assert response.status_code == 409


def test_update_record(client):
    response = client.patch("/v1/records/fees/f3", json={"status": "paid"})
    assert response.status_code == 200
    assert response.json()["status"] == "paid"
    assert client.patch("/v1/records/fees/missing", json={}).status_code == 404
    assert client.patch("/v1/records/fees/f3", json={"amount": "lots"}).status_code == 400


def test_delete_shrinks_view(client):
    assert view(client, page_size=3, page=3)["state"]["page"] == 3

    for record_id in ("s1", "s2"):
        response = client.delete(f"/v1/records/students/{record_id}")
        assert response.json() == {"deleted": record_id, "collection": "students"}

    data = view(client, page_size=3, page=3)
    assert data["state"]["page"] == 2
    assert data["page_info"]["total_rows"] == 6
    assert view(client, search="chen")["empty"] is True
    assert client.delete("/v1/records/students/s1").status_code == 404
