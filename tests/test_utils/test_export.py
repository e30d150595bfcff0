"""
Tests for CSV export.
"""

import os
import tempfile

from conftest import FIXED_NOW, make_suggestion
from src.models.enums import Status
from src.utils.export import export_tables, review_queue_rows, save_csv, to_csv_text


def test_header_and_row_count():
    rows = [
        {"category": "Safety", "count": 3, "percentage": 60},
        {"category": "Training", "count": 2, "percentage": 40},
    ]

    lines = to_csv_text(rows).split("\n")

    assert len(lines) == len(rows) + 1
    assert lines[0] == "category,count,percentage"
    assert lines[1] == '"Safety",3,60'
    for line in lines[1:]:
        assert len(line.split(",")) == len(lines[0].split(","))


def test_values_are_json_encoded():
    rows = [{"title": 'Say "hi"', "tags": ["a", "b"], "done": True, "note": None, "name": "Zoë"}]

    line = to_csv_text(rows).split("\n")[1]

    assert line == '"Say \\"hi\\"",["a","b"],true,"","Zoë"'


def test_columns_come_from_first_row():
    rows = [{"a": 1, "b": 2}, {"a": 3, "c": 4}]

    assert to_csv_text(rows) == 'a,b\n1,2\n3,""'


def test_empty_rows():
    assert to_csv_text([]) == ""


def test_review_queue_rows():
    suggestions = [
        make_suggestion("1", status=Status.APPROVED, votes=2, days_ago=3),
        make_suggestion("2", days_ago=0),
    ]

    rows = review_queue_rows(suggestions, FIXED_NOW)

    assert list(rows[0]) == [
        "id", "title", "status", "category", "author", "department", "createdAt", "votes", "comments"
    ]
    assert rows[0]["createdAt"] == "3 days ago"
    assert rows[0]["status"] == "approved"
    assert rows[1]["createdAt"] == "just now"

    lines = to_csv_text(rows).split("\n")
    assert len(lines) == 3
    assert all(len(line.split(",")) == 9 for line in lines)


def test_save_csv_and_export_tables():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = save_csv("a,b\n1,2", os.path.join(tmpdir, "nested", "out.csv"))
        with open(path, encoding="utf-8") as f:
            assert f.read() == "a,b\n1,2"

        paths = export_tables(
            {"top_tags": [{"tag": "ai", "count": 2}], "series": []},
            os.path.join(tmpdir, "tables")
        )
        assert [os.path.basename(p) for p in paths] == ["top_tags.csv", "series.csv"]
        with open(paths[1], encoding="utf-8") as f:
            assert f.read() == ""
