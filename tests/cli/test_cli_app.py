from __future__ import annotations

import json
import logging

import pytest

from todoscan.cli.app import main
from todoscan.cli.display import format_estimate
from todoscan.config.settings import ENV_PREFIX, _ENV_FIELDS


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for suffix in _ENV_FIELDS.values():
        monkeypatch.delenv(ENV_PREFIX + suffix, raising=False)
    yield
    logging.getLogger("todoscan").handlers.clear()


def test_json_output(make_tree, refactor_source, capsys):
    root = make_tree({"main.go": refactor_source})

    exit_code = main([str(root), "--json", "--min-words", "1"])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert set(payload) == {"root", "branch", "author", "project", "comments"}
    assert payload["root"] == str(root.absolute())
    assert payload["comments"] == [
        {
            "type": "TODO",
            "title": "refactor parser",
            "body": "needs cleanup",
            "file": "main.go",
            "line": 0,
            "issue": 7,
            "category": "core",
        }
    ]


def test_include_filter_flag(make_tree, capsys):
    root = make_tree(
        {
            "a.py": "# TODO: python task with enough words\n",
            "b.go": "// TODO: go task with enough words\n",
        }
    )

    main([str(root), "--json", "--include", r"\.go$"])

    comments = json.loads(capsys.readouterr().out)["comments"]
    assert [comment["file"] for comment in comments] == ["b.go"]


def test_all_directories_scanned_unless_excluded(make_tree, capsys):
    root = make_tree(
        {
            "node_modules/lib.js": "// TODO: vendored task with enough words\n",
            "gen/out.py": "# TODO: generated task with enough words\n",
            "app.py": "# TODO: application task with enough words\n",
        }
    )

    main([str(root), "--json"])
    everything = {comment["file"] for comment in json.loads(capsys.readouterr().out)["comments"]}

    main([str(root), "--json", "--skip-common-dirs", "--exclude-dir", "gen"])
    trimmed = {comment["file"] for comment in json.loads(capsys.readouterr().out)["comments"]}

    assert everything == {"node_modules/lib.js", "gen/out.py", "app.py"}
    assert trimmed == {"app.py"}


def test_exclude_dirs_from_environment(make_tree, monkeypatch, capsys):
    root = make_tree(
        {
            "gen/out.py": "# TODO: generated task with enough words\n",
            "app.py": "# TODO: application task with enough words\n",
        }
    )
    monkeypatch.setenv("TODOSCAN_EXCLUDED_DIRS", "gen, build")

    main([str(root), "--json"])

    comments = json.loads(capsys.readouterr().out)["comments"]
    assert [comment["file"] for comment in comments] == ["app.py"]


def test_table_output(make_tree, refactor_source, capsys):
    root = make_tree({"main.go": refactor_source})

    exit_code = main([str(root), "--min-words", "1"])

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "TODO" in out
    assert "tasks=1" in out


def test_table_output_without_tasks(make_tree, capsys):
    root = make_tree({"main.go": "x := 1\n"})

    assert main([str(root)]) == 0
    assert "No tasks found." in capsys.readouterr().out


def test_show_issues_lists_rejections(make_tree, refactor_source, capsys):
    root = make_tree({"main.go": refactor_source})

    main([str(root), "--show-issues"])

    assert "INSUBSTANTIAL_RECORD" in capsys.readouterr().out


def test_missing_root_exits_with_error(tmp_path, capsys):
    exit_code = main([str(tmp_path / "missing")])

    assert exit_code == 1
    assert "ROOT_NOT_FOUND" in capsys.readouterr().err


def test_invalid_filter_exits_with_error(make_tree, capsys):
    root = make_tree({})

    exit_code = main([str(root), "--include", "("])

    assert exit_code == 1
    assert "Invalid settings" in capsys.readouterr().err


@pytest.mark.parametrize(
    "hours, expected",
    [(0.0, ""), (0.5, "30m"), (2.0, "2h"), (1.5, "1.5h")],
)
def test_format_estimate(hours, expected):
    assert format_estimate(hours) == expected
