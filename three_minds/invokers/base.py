"""Abstract base for everything that turns a prompt into an agent reply."""

from abc import ABC, abstractmethod
from pathlib import Path

DEFAULT_TIMEOUT_SEC = 300


class AgentInvocationError(Exception):
    """Raised when an agent call fails: spawn failure, non-zero exit or timeout."""

    def __init__(self, backend: str, message: str) -> None:
        self.backend = backend
        super().__init__(f"[{backend}] {message}")


class AgentInvoker(ABC):
    """Abstract base for agent backends."""

    @abstractmethod
    def name(self) -> str:
        """Return the short backend tag (e.g. 'claude-code', 'gemini')."""
        ...

    def backend_for(self, model: str | None) -> str:
        """Return the provenance tag of the backend that would serve this model."""
        return self.name()

    @abstractmethod
    async def invoke(
        self,
        prompt: str,
        system_prompt: str,
        work_dir: Path,
        model: str | None = None,
        timeout_sec: int = DEFAULT_TIMEOUT_SEC,
        base_url: str | None = None,
    ) -> str:
        """Run one agent turn and return its raw textual reply.

        Args:
            prompt: The round prompt for the agent.
            system_prompt: Persona and collaboration rules.
            work_dir: Shared project directory the agent operates in.
            model: Optional model identifier passed to the backend.
            timeout_sec: Hard limit for the whole call.
            base_url: Optional endpoint override for the backend.

        Raises:
            AgentInvocationError: On spawn failure, non-zero exit or timeout.
        """
        ...
