"""Load roster settings into typed dataclasses. Validates roster shape at load."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from dotenv import dotenv_values

logger = logging.getLogger(__name__)

_CONFIG_DIR = Path(__file__).parent
_SETTINGS_PATH = _CONFIG_DIR / "settings.yaml"
_PRESETS_DIR = _CONFIG_DIR / "presets"
_CREDENTIALS_PATH = Path.home() / ".three-minds" / ".env"

DEFAULT_MAX_ROUNDS = 15
DEFAULT_TIMEOUT_SEC = 300
DEFAULT_MIN_TASK_LENGTH = 5
DEFAULT_HISTORY_PREVIEW_CHARS = 800
DEFAULT_EMOJI = "🤖"


class ConfigError(ValueError):
    """Raised when a council config file has an invalid shape."""


@dataclass(frozen=True)
class AgentPersona:
    name: str
    persona: str
    emoji: str = DEFAULT_EMOJI
    model: str | None = None       # routes to a backend CLI; None → Claude Code
    base_url: str | None = None    # endpoint override handed to the backend


@dataclass(frozen=True)
class CouncilConfig:
    agents: tuple[AgentPersona, ...]
    name: str = "Three Minds"
    max_rounds: int = DEFAULT_MAX_ROUNDS
    project_dir: Path = field(default_factory=Path.cwd)
    timeout_sec: int = DEFAULT_TIMEOUT_SEC
    min_task_length: int = DEFAULT_MIN_TASK_LENGTH
    history_preview_chars: int = DEFAULT_HISTORY_PREVIEW_CHARS
    save_transcript: bool = True


def _resolve_config_path(path_or_name: str | Path | None) -> Path:
    """Bare names (no separator, no suffix) map to a bundled preset first."""
    if path_or_name is None:
        return _SETTINGS_PATH
    text = str(path_or_name)
    if "/" not in text and os.sep not in text and not Path(text).suffix:
        preset = _PRESETS_DIR / f"{text}.yaml"
        if preset.exists():
            return preset
    return Path(text)


def _first(raw: dict, *keys: str):
    """Return the first key present in raw. Accepts camelCase spellings from JSON configs."""
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def _parse_agent(raw: object, index: int) -> AgentPersona:
    if not isinstance(raw, dict):
        raise ConfigError(f"Agent #{index + 1} must be a mapping, got {type(raw).__name__}")

    name = str(raw.get("name") or "").strip()
    if not name:
        raise ConfigError(f"Agent #{index + 1} is missing a name")
    persona = str(raw.get("persona") or "").strip()
    if not persona:
        raise ConfigError(f"Agent '{name}' is missing a persona")

    model = raw.get("model")
    base_url = _first(raw, "base_url", "baseUrl")
    return AgentPersona(
        name=name,
        persona=persona,
        emoji=str(raw.get("emoji") or DEFAULT_EMOJI),
        model=str(model) if model else None,
        base_url=str(base_url) if base_url else None,
    )


def _positive_int(value: object, key: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{key}' must be an integer, got {value!r}") from exc
    if number < 1:
        raise ConfigError(f"'{key}' must be >= 1, got {number}")
    return number


def _bool(value: object, key: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{key}' must be true or false, got {value!r}")
    return value


def parse_config(raw: dict, project_dir: Path | None = None) -> CouncilConfig:
    """Build a CouncilConfig from an already-parsed mapping.

    Raises:
        ConfigError: On an empty roster, missing names/personas, duplicate
            names, non-positive numeric settings or a non-boolean
            save_transcript.
    """
    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping")

    agents_raw = raw.get("agents") or []
    if not isinstance(agents_raw, list) or not agents_raw:
        raise ConfigError("Config must define at least one agent")
    agents = tuple(_parse_agent(a, i) for i, a in enumerate(agents_raw))

    seen: set[str] = set()
    for agent in agents:
        if agent.name in seen:
            raise ConfigError(f"Duplicate agent name: {agent.name}")
        seen.add(agent.name)

    max_rounds = _first(raw, "max_rounds", "maxRounds")
    timeout_sec = raw.get("timeout_sec")
    if timeout_sec is None and raw.get("timeoutMs") is not None:
        timeout_sec = _positive_int(raw["timeoutMs"], "timeoutMs") // 1000 or 1
    min_task_length = raw.get("min_task_length")
    preview_chars = raw.get("history_preview_chars")

    if project_dir is None:
        dir_raw = _first(raw, "project_dir", "projectDir")
        project_dir = Path(dir_raw) if dir_raw else Path.cwd()

    return CouncilConfig(
        agents=agents,
        name=str(raw.get("name") or "Three Minds"),
        max_rounds=_positive_int(max_rounds, "max_rounds") if max_rounds is not None else DEFAULT_MAX_ROUNDS,
        project_dir=Path(project_dir).resolve(),
        timeout_sec=_positive_int(timeout_sec, "timeout_sec") if timeout_sec is not None else DEFAULT_TIMEOUT_SEC,
        min_task_length=(
            _positive_int(min_task_length, "min_task_length")
            if min_task_length is not None else DEFAULT_MIN_TASK_LENGTH
        ),
        history_preview_chars=(
            _positive_int(preview_chars, "history_preview_chars")
            if preview_chars is not None else DEFAULT_HISTORY_PREVIEW_CHARS
        ),
        save_transcript=_bool(raw.get("save_transcript", True), "save_transcript"),
    )


def load_config(
    path_or_name: str | Path | None = None,
    project_dir: Path | None = None,
) -> CouncilConfig:
    """Load and validate a council config from YAML (or JSON) on disk.

    Args:
        path_or_name: A file path, or the name of a bundled preset under
            config/presets/. None loads config/settings.yaml.
        project_dir: Overrides the working directory from the file.

    Raises:
        FileNotFoundError: If the resolved file is missing.
        ConfigError: If the file content has an invalid shape.
    """
    settings_path = _resolve_config_path(path_or_name)
    if not settings_path.exists():
        raise FileNotFoundError(f"Config file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Could not parse {settings_path}: {exc}") from exc

    config = parse_config(raw or {}, project_dir=project_dir)
    logger.info(
        "Loaded config '%s' from %s: %d agents, max %d rounds",
        config.name, settings_path, len(config.agents), config.max_rounds,
    )
    return config


def get_default_config(project_dir: Path) -> CouncilConfig:
    """The built-in architect / engineer / reviewer team."""
    return CouncilConfig(
        name="Code Collaboration Trio",
        agents=(
            AgentPersona(
                name="Architect",
                emoji="🏗️",
                persona=(
                    "You are a systems architect.\n"
                    "You care about code structure, design patterns, extensibility and long-term maintainability.\n"
                    "You review the overall design and propose architecture-level improvements.\n"
                    "You may read files, restructure code and refactor modules."
                ),
            ),
            AgentPersona(
                name="Engineer",
                emoji="⚙️",
                persona=(
                    "You are an implementation engineer.\n"
                    "You care about code quality, error handling, edge cases and performance.\n"
                    "You write and modify the code so the feature actually works.\n"
                    "You may read files, write code and run tests."
                ),
            ),
            AgentPersona(
                name="Reviewer",
                emoji="🔍",
                persona=(
                    "You are a code reviewer.\n"
                    "You care about conventions, latent bugs, security issues and documentation.\n"
                    "You review the code closely, find problems and propose fixes.\n"
                    "You may read files, add comments and fix obvious problems."
                ),
            ),
        ),
        max_rounds=DEFAULT_MAX_ROUNDS,
        project_dir=Path(project_dir).resolve(),
    )


def load_credentials(env_file: Path | None = None) -> dict[str, str]:
    """Read backend credentials (ANTHROPIC_API_KEY, AZURE_AI_KEY, ...) from a dotenv file.

    Never raises. A missing or unreadable file yields an empty mapping.
    """
    path = env_file if env_file is not None else _CREDENTIALS_PATH
    if not path.exists():
        logger.debug("No credentials file at %s", path)
        return {}
    try:
        values = dotenv_values(path)
    except OSError as exc:
        logger.warning("Could not read credentials file %s: %s", path, exc)
        return {}
    return {k: v.strip() for k, v in values.items() if v}
