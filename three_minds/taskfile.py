"""Task files: markdown body plus optional YAML frontmatter overrides."""

from pathlib import Path

import frontmatter

# Frontmatter keys a task file may set; anything else is ignored.
TASK_FILE_KEYS = ("max_rounds", "config", "dir", "timeout_sec")


def parse_task_file(file_path: Path) -> tuple[str, dict]:
    """Parse a markdown task file with optional YAML frontmatter.

    Returns:
        (task_text, metadata) where metadata only carries recognized keys:
        max_rounds (int), config (str), dir (str), timeout_sec (int).
        If no frontmatter, metadata is {}.
    """
    post = frontmatter.load(str(file_path))
    task_text = post.content.strip()
    metadata = {k: v for k, v in post.metadata.items() if k in TASK_FILE_KEYS}
    return task_text, metadata
