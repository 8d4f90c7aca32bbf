"""Subprocess plumbing shared by every command-line agent backend."""

import asyncio
import logging
import os
from abc import abstractmethod
from collections.abc import Mapping
from pathlib import Path

from three_minds.invokers.base import DEFAULT_TIMEOUT_SEC, AgentInvocationError, AgentInvoker

logger = logging.getLogger(__name__)

# Agents can print large diffs; keep the stream reader limit generous.
_STREAM_LIMIT = 50 * 1024 * 1024


def combine_prompts(system_prompt: str, prompt: str) -> str:
    """Inline the system prompt for CLIs that have no flag for it."""
    return f"[System Instructions]\n{system_prompt}\n\n[Task]\n{prompt}"


def _first_line(text: str, limit: int = 200) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()[:limit]
    return ""


async def run_command(
    command: list[str],
    cwd: Path,
    env: Mapping[str, str],
    timeout_sec: int,
    backend: str,
) -> str:
    """Run command in cwd and return its stripped stdout.

    Raises:
        AgentInvocationError: If the binary cannot be spawned, exits non-zero
            or runs longer than timeout_sec (the process is killed).
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            *command,
            cwd=str(cwd),
            env=dict(env),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            limit=_STREAM_LIMIT,
        )
    except OSError as exc:
        raise AgentInvocationError(backend, f"Failed to start '{command[0]}': {exc}") from exc

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout_sec)
    except TimeoutError as exc:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        await proc.wait()
        raise AgentInvocationError(backend, f"Timed out after {timeout_sec}s") from exc

    out_text = stdout.decode("utf-8", errors="replace").strip()
    err_text = stderr.decode("utf-8", errors="replace").strip()

    if proc.returncode != 0:
        logger.debug("%s stderr:\n%s", backend, err_text)
        detail = _first_line(err_text) or "no stderr output"
        raise AgentInvocationError(backend, f"exit {proc.returncode}: {detail}")

    if err_text:
        logger.debug("%s stderr (exit 0):\n%s", backend, err_text)
    return out_text


class CliInvoker(AgentInvoker):
    """Base for invokers that shell out to an agent CLI.

    Subclasses set ``tag`` and ``binary`` and build the argument vector;
    credentials are injected at construction, never read during a call.
    """

    tag: str = ""
    binary: str = ""

    def __init__(self, credentials: Mapping[str, str] | None = None, binary: str | None = None) -> None:
        self._credentials = dict(credentials or {})
        self._binary = binary or self.binary

    def name(self) -> str:
        return self.tag

    @abstractmethod
    def build_args(
        self,
        prompt: str,
        system_prompt: str,
        work_dir: Path,
        model: str | None,
        base_url: str | None,
    ) -> list[str]:
        """Return CLI arguments (without the binary itself)."""
        ...

    def build_env(self, model: str | None, base_url: str | None) -> dict[str, str]:
        """Return environment overrides for this call. Default: none."""
        return {}

    def build_command(
        self,
        prompt: str,
        system_prompt: str,
        work_dir: Path,
        model: str | None = None,
        base_url: str | None = None,
    ) -> list[str]:
        return [self._binary, *self.build_args(prompt, system_prompt, work_dir, model, base_url)]

    async def invoke(
        self,
        prompt: str,
        system_prompt: str,
        work_dir: Path,
        model: str | None = None,
        timeout_sec: int = DEFAULT_TIMEOUT_SEC,
        base_url: str | None = None,
    ) -> str:
        command = self.build_command(prompt, system_prompt, work_dir, model, base_url)
        env = os.environ.copy()
        env.update(self.build_env(model, base_url))
        logger.debug("Running %s in %s (model=%s, timeout=%ds)", self._binary, work_dir, model, timeout_sec)
        return await run_command(command, Path(work_dir), env, timeout_sec, self.tag)
