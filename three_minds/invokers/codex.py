"""OpenAI Codex CLI backend (`codex exec`), native OpenAI or Azure models."""

import logging
from pathlib import Path

from three_minds.invokers.process import CliInvoker, combine_prompts

logger = logging.getLogger(__name__)

AZURE_PREFIX = "azure/"
_AZURE_PLACEHOLDER_URL = "https://YOUR_AZURE_ENDPOINT.openai.azure.com/openai/v1"


def _is_azure(model: str | None) -> bool:
    return bool(model) and model.lower().startswith(AZURE_PREFIX)


class CodexInvoker(CliInvoker):
    """Codex CLI. Model ids like ``azure/gpt-4o`` go through an Azure provider block."""

    tag = "codex"
    binary = "codex"

    def build_args(
        self,
        prompt: str,
        system_prompt: str,
        work_dir: Path,
        model: str | None,
        base_url: str | None,
    ) -> list[str]:
        args = [
            "exec",
            "--dangerously-bypass-approvals-and-sandbox",
            "--skip-git-repo-check",
            "-C", str(work_dir),
        ]

        actual_model = model
        if _is_azure(model):
            actual_model = model[len(AZURE_PREFIX):]
            endpoint = base_url or self._credentials.get("AZURE_ENDPOINT") or _AZURE_PLACEHOLDER_URL
            args += [
                "-c", "model_provider=azure",
                "-c", f'model_providers.azure.base_url="{endpoint}"',
                "-c", 'model_providers.azure.env_key="AZURE_OPENAI_API_KEY"',
                "-c", 'model_providers.azure.wire_api="responses"',
                "-c", 'model_reasoning_effort="medium"',
            ]
            logger.info("Codex via Azure: model %s", actual_model)

        if actual_model:
            args += ["-m", actual_model]
        args.append(combine_prompts(system_prompt, prompt))
        return args

    def build_env(self, model: str | None, base_url: str | None) -> dict[str, str]:
        env: dict[str, str] = {}
        if _is_azure(model):
            key = self._credentials.get("AZURE_AI_KEY")
            if key:
                env["AZURE_OPENAI_API_KEY"] = key
        elif base_url:
            env["OPENAI_BASE_URL"] = base_url
        return env
