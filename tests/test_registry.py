import json

import pytest
from pydantic import ValidationError

from classdesk.tables.builder import build_view, record_href
from classdesk.tables.registry import TableRegistry
from classdesk.tables.schemas import TableDefinition

TABLE_KEYS = ["attendance", "audit_logs", "classes", "fees", "grades", "students", "subjects", "teachers"]


def write_definition(directory, name, data):
    (directory / f"{name}.json").write_text(json.dumps(data), encoding="utf-8")


def minimal(table_key, **overrides):
    return {
        "table_key": table_key,
        "table_name": table_key.title(),
        "collection": table_key,
        "columns": [{"key": "name", "label": "Name"}],
        **overrides,
    }


def test_bundled_definitions_load():
    registry = TableRegistry()
    assert sorted(registry.list_keys()) == TABLE_KEYS
    assert registry.count() == len(TABLE_KEYS)


def test_students_definition():
    table = TableRegistry().get("students")
    assert table.search_keys == ["name", "email", "parent_name"]
    assert table.export_file_name == "students"
    assert table.row_actions == ["view", "edit", "delete"]
    assert [c.key for c in table.columns if c.sortable] == ["name", "grade"]


def test_summaries_filter_by_collection():
    summaries = TableRegistry().list_summaries(collection="fees")
    assert [s.table_key for s in summaries] == ["fees"]
    assert summaries[0].sortable_columns == ["student_name", "due_date"]


def test_invalid_files_are_skipped(tmp_path):
    write_definition(tmp_path, "good", minimal("good"))
    write_definition(tmp_path, "bad_renderer", minimal(
        "bad_renderer", columns=[{"key": "name", "label": "Name", "renderer": "sparkline"}],
    ))
    write_definition(tmp_path, "no_columns", minimal("no_columns", columns=[]))
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")

    registry = TableRegistry(definitions_dir=tmp_path)
    assert registry.list_keys() == ["good"]


def test_missing_directory(tmp_path):
    assert TableRegistry(definitions_dir=tmp_path / "missing").count() == 0


def test_reload_picks_up_new_files(tmp_path):
    write_definition(tmp_path, "one", minimal("one"))
    registry = TableRegistry(definitions_dir=tmp_path)
    assert registry.count() == 1
    write_definition(tmp_path, "two", minimal("two"))
    registry.reload()
    assert sorted(registry.list_keys()) == ["one", "two"]


def test_definition_validation():
    with pytest.raises(ValidationError, match="Duplicate column keys"):
        TableDefinition.model_validate(minimal("x", columns=[
            {"key": "name", "label": "Name"}, {"key": "name", "label": "Again"},
        ]))
    with pytest.raises(ValidationError, match="Unknown row actions"):
        TableDefinition.model_validate(minimal("x", row_actions=["archive"]))
    with pytest.raises(ValidationError):
        TableDefinition.model_validate(minimal("x", page_size=0))


def test_build_view_from_definition():
    table = TableRegistry().get("students")
    view = build_view(table, page_size=3)
    row = {"id": "s1", "name": "Emily Chen", "status": "active"}

    assert view.page_size == 3
    assert view.export_base_name == "students"
    assert view.column("status").display(row) == '<span class="badge badge-default">active</span>'
    assert [a.name for a in view.actions_for(row)] == ["view", "edit", "delete"]
    assert view.actions_for(row)[2].href == "/v1/records/students/s1"
    assert view.rows_clickable


def test_non_selectable_tables():
    view = build_view(TableRegistry().get("fees"))
    assert not view.rows_clickable
    assert view.select_row({"id": "f1"}) is False


def test_record_href():
    assert record_href("fees", {"id": "f1"}) == "/v1/records/fees/f1"
