"""Editor tunables with environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "ROSTER_EDITOR_"


def env_int(key: str, fallback: int, *, environ: Optional[Mapping[str, str]] = None) -> int:
    value = (os.environ if environ is None else environ).get(key)
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


@dataclass(frozen=True, slots=True)
class EditorSettings:
    history_depth: int = 50
    preview_delay_ms: int = 300
    history_delay_ms: int = 400
    message_timeout_ms: int = 3000
    default_filename: str = "vehicles.json"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EditorSettings":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            history_depth=max(
                1, env_int(f"{ENV_PREFIX}HISTORY_DEPTH", defaults.history_depth, environ=env)
            ),
            preview_delay_ms=env_int(
                f"{ENV_PREFIX}PREVIEW_DELAY_MS", defaults.preview_delay_ms, environ=env
            ),
            history_delay_ms=env_int(
                f"{ENV_PREFIX}HISTORY_DELAY_MS", defaults.history_delay_ms, environ=env
            ),
            message_timeout_ms=env_int(
                f"{ENV_PREFIX}MESSAGE_TIMEOUT_MS", defaults.message_timeout_ms, environ=env
            ),
            default_filename=env.get(f"{ENV_PREFIX}DEFAULT_FILENAME")
            or defaults.default_filename,
        )


__all__ = ["ENV_PREFIX", "EditorSettings", "env_int"]
