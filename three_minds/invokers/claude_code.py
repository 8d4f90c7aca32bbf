"""Claude Code CLI backend (`claude --print`)."""

import logging
import os
from pathlib import Path

from three_minds.invokers.process import CliInvoker

logger = logging.getLogger(__name__)

_MAX_TURNS = 10


class ClaudeCodeInvoker(CliInvoker):
    """Anthropic Claude Code in non-interactive print mode."""

    tag = "claude-code"
    binary = "claude"

    def build_args(
        self,
        prompt: str,
        system_prompt: str,
        work_dir: Path,
        model: str | None,
        base_url: str | None,
    ) -> list[str]:
        args = [
            "--print",
            "--output-format", "text",
            "--append-system-prompt", system_prompt,
            "--dangerously-skip-permissions",
            "--max-turns", str(_MAX_TURNS),
        ]
        if model:
            args += ["--model", model]
        args.append(prompt)
        return args

    def build_env(self, model: str | None, base_url: str | None) -> dict[str, str]:
        env: dict[str, str] = {}
        if "HOME" not in os.environ:
            env["HOME"] = str(Path.home())
        key = self._credentials.get("ANTHROPIC_API_KEY")
        if key and not os.environ.get("ANTHROPIC_API_KEY"):
            env["ANTHROPIC_API_KEY"] = key
            logger.info("Claude Code: using ANTHROPIC_API_KEY from credentials file")
        if base_url:
            env["ANTHROPIC_BASE_URL"] = base_url
        return env
