"""Gemini CLI backend (`gemini -p`)."""

import logging
import os
from pathlib import Path

from three_minds.invokers.process import CliInvoker, combine_prompts

logger = logging.getLogger(__name__)


class GeminiCliInvoker(CliInvoker):
    """Google Gemini CLI in yolo mode with plain-text output."""

    tag = "gemini"
    binary = "gemini"

    def build_args(
        self,
        prompt: str,
        system_prompt: str,
        work_dir: Path,
        model: str | None,
        base_url: str | None,
    ) -> list[str]:
        args = ["-y", "-o", "text"]
        if model:
            clean_model = model[len("google/"):] if model.startswith("google/") else model
            args += ["-m", clean_model]
        args += ["-p", combine_prompts(system_prompt, prompt)]
        return args

    def build_env(self, model: str | None, base_url: str | None) -> dict[str, str]:
        env: dict[str, str] = {}
        key = self._credentials.get("GOOGLE_API_KEY")
        if key:
            env["GOOGLE_API_KEY"] = key
            env["GEMINI_API_KEY"] = key
        elif not os.environ.get("GOOGLE_API_KEY"):
            logger.warning("Gemini CLI: GOOGLE_API_KEY not found")
        if base_url:
            env["GOOGLE_GEMINI_BASE_URL"] = base_url
        return env
