"""OpenCode CLI backend (`opencode run`), the catch-all for other model ids."""

from pathlib import Path

from three_minds.invokers.process import CliInvoker, combine_prompts


class OpenCodeInvoker(CliInvoker):
    tag = "opencode"
    binary = "opencode"

    def build_args(
        self,
        prompt: str,
        system_prompt: str,
        work_dir: Path,
        model: str | None,
        base_url: str | None,
    ) -> list[str]:
        args = ["run"]
        if model:
            args += ["-m", model]
        args.append(combine_prompts(system_prompt, prompt))
        return args
