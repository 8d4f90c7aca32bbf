"""Backend selection by model identifier, and an invoker that dispatches on it."""

import logging
from collections.abc import Callable, Mapping
from pathlib import Path

from three_minds.invokers.base import DEFAULT_TIMEOUT_SEC, AgentInvocationError, AgentInvoker
from three_minds.invokers.claude_code import ClaudeCodeInvoker
from three_minds.invokers.codex import CodexInvoker
from three_minds.invokers.gemini_cli import GeminiCliInvoker
from three_minds.invokers.opencode import OpenCodeInvoker

logger = logging.getLogger(__name__)

DEFAULT_BACKEND = "claude-code"
FALLBACK_BACKEND = "opencode"

# Checked in order; first matching prefix wins.
BACKEND_PREFIXES: tuple[tuple[str, str], ...] = (
    ("gemini-", "gemini"),
    ("google/", "gemini"),
    ("gpt-", "codex"),
    ("o1", "codex"),
    ("o3", "codex"),
    ("o4", "codex"),
    ("azure/", "codex"),
    ("claude", "claude-code"),
    ("anthropic/", "claude-code"),
)


def select_backend(model: str | None) -> str:
    """Map a model identifier to a backend tag.

    No model → Claude Code; unknown families → OpenCode, which supports the
    widest range of providers.
    """
    if not model:
        return DEFAULT_BACKEND
    lowered = model.lower()
    for prefix, backend in BACKEND_PREFIXES:
        if lowered.startswith(prefix):
            return backend
    return FALLBACK_BACKEND


class RoutingInvoker(AgentInvoker):
    """Dispatch each call to the invoker registered for the model's backend."""

    def __init__(
        self,
        invokers: Mapping[str, AgentInvoker],
        selector: Callable[[str | None], str] = select_backend,
    ) -> None:
        self._invokers = dict(invokers)
        self._selector = selector

    def name(self) -> str:
        return "router"

    def backend_for(self, model: str | None) -> str:
        return self._selector(model)

    async def invoke(
        self,
        prompt: str,
        system_prompt: str,
        work_dir: Path,
        model: str | None = None,
        timeout_sec: int = DEFAULT_TIMEOUT_SEC,
        base_url: str | None = None,
    ) -> str:
        backend = self.backend_for(model)
        invoker = self._invokers.get(backend)
        if invoker is None:
            raise AgentInvocationError(backend, f"No invoker registered for backend '{backend}'")
        logger.debug("Routing model %s to %s", model, backend)
        return await invoker.invoke(
            prompt,
            system_prompt,
            work_dir,
            model=model,
            timeout_sec=timeout_sec,
            base_url=base_url,
        )


def build_default_invoker(credentials: Mapping[str, str] | None = None) -> RoutingInvoker:
    """Wire the four CLI backends with the given credential mapping."""
    invokers: list[AgentInvoker] = [
        ClaudeCodeInvoker(credentials),
        CodexInvoker(credentials),
        GeminiCliInvoker(credentials),
        OpenCodeInvoker(credentials),
    ]
    return RoutingInvoker({inv.name(): inv for inv in invokers})
