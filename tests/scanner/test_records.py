"""Tests for building task records from raw blocks."""

from __future__ import annotations

import hashlib

import pytest

from todoscan.scanner.records import build_record


class TestBuildRecord:
    def test_empty_block_is_discarded(self):
        assert build_record("a.go", 0, "TODO", []) is None

    def test_title_only(self):
        record = build_record("a.go", 4, "TODO", ["write the docs"])

        assert record.type == "TODO"
        assert record.title == "write the docs"
        assert record.body == ""
        assert record.file == "a.go"
        assert record.line == 4

    def test_metadata_line_is_consumed(self):
        record = build_record(
            "main.go", 0, "TODO", ["refactor parser", "category=core issue=7", "needs cleanup"]
        )

        assert record.category == "core"
        assert record.issue == 7
        assert record.body == "needs cleanup"

    def test_non_metadata_second_line_is_body(self):
        record = build_record("a.py", 1, "FIXME", ["title", "first line", "second line"])

        assert record.category == ""
        assert record.body == "first line\nsecond line"

    def test_body_is_trimmed(self):
        record = build_record("a.py", 1, "BUG", ["title", "", "text", ""])

        assert record.body == "text"

    def test_metadata_only_block_has_empty_body(self):
        record = build_record("a.py", 1, "TODO", ["title", "estimate=30m"])

        assert record.estimate == pytest.approx(0.5)
        assert record.body == ""

    def test_metadata_warnings_are_reported(self):
        issues = []

        record = build_record(
            "src/a.py", 9, "TODO", ["ship the release build", "category=ops estimate=5x"], issues=issues
        )

        assert record.category == "ops"
        assert record.estimate == 0.0
        assert len(issues) == 1
        assert issues[0].code == "BAD_ESTIMATE"
        assert issues[0].path == "src/a.py"
        assert "line 9" in issues[0].message


class TestTaskRecord:
    def test_to_dict_omits_unset_fields(self):
        record = build_record("a.go", 3, "TODO", ["title", "plain body"])

        assert record.to_dict() == {
            "type": "TODO",
            "title": "title",
            "body": "plain body",
            "file": "a.go",
            "line": 3,
        }

    def test_to_dict_includes_set_fields(self):
        record = build_record("a.go", 3, "TODO", ["title", "category=bug issue=42 estimate=2h"])

        payload = record.to_dict()

        assert payload["category"] == "bug"
        assert payload["issue"] == 42
        assert payload["estimate"] == pytest.approx(2.0)

    def test_fingerprint_hashes_title_and_body(self):
        record = build_record("a.go", 3, "TODO", ["title", "body"])

        assert record.fingerprint == hashlib.md5(b"titlebody").hexdigest()

    def test_fingerprint_ignores_location_and_type(self):
        first = build_record("a.go", 3, "TODO", ["same title", "same body"])
        second = build_record("b/c.py", 40, "FIXME", ["same title", "same body"])

        assert first.fingerprint == second.fingerprint
