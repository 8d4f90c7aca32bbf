"""Unit tests for three_minds/taskfile.py."""

import textwrap
from pathlib import Path

from three_minds.taskfile import parse_task_file


def test_parse_task_file_no_frontmatter(tmp_path: Path) -> None:
    """File without frontmatter returns full content and empty metadata."""
    f = tmp_path / "task.md"
    f.write_text("Add retry logic to the HTTP client.\n", encoding="utf-8")
    task, metadata = parse_task_file(f)
    assert task == "Add retry logic to the HTTP client."
    assert metadata == {}


def test_parse_task_file_with_frontmatter(tmp_path: Path) -> None:
    f = tmp_path / "task.md"
    f.write_text(
        textwrap.dedent("""\
            ---
            max_rounds: 3
            config: mixed
            dir: ./project
            timeout_sec: 600
            ---
            Write integration tests for the parser.
        """),
        encoding="utf-8",
    )
    task, metadata = parse_task_file(f)
    assert task == "Write integration tests for the parser."
    assert metadata == {"max_rounds": 3, "config": "mixed", "dir": "./project", "timeout_sec": 600}


def test_parse_task_file_ignores_unknown_keys(tmp_path: Path) -> None:
    f = tmp_path / "task.md"
    f.write_text("---\nmodels: claude\nmax_rounds: 2\n---\nDo it.\n", encoding="utf-8")
    _, metadata = parse_task_file(f)
    assert metadata == {"max_rounds": 2}
