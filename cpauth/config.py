"""Environment driven settings for the authentication server."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import DEFAULT_GROUP, get_group

ENV_PREFIX = "CPAUTH_"


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    group: str = DEFAULT_GROUP
    host: str = "127.0.0.1"
    port: int = 50051
    strict: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        defaults = cls()

        group = env.get(ENV_PREFIX + "GROUP", defaults.group)
        get_group(group)

        raw_port = env.get(ENV_PREFIX + "PORT", str(defaults.port))
        try:
            port = int(raw_port)
        except ValueError as exc:
            raise ValueError(f"{ENV_PREFIX}PORT must be an integer, got {raw_port!r}") from exc
        if not 0 < port < 65536:
            raise ValueError(f"{ENV_PREFIX}PORT out of range: {port}")

        return cls(
            group=group,
            host=env.get(ENV_PREFIX + "HOST", defaults.host),
            port=port,
            strict=_as_bool(env.get(ENV_PREFIX + "STRICT", "false")),
            log_level=env.get(ENV_PREFIX + "LOG_LEVEL", defaults.log_level).upper(),
        )


__all__ = ["ENV_PREFIX", "Settings"]
