"""Help options and the JSON profile they are loaded from."""

from __future__ import annotations

import json
import shlex
from enum import StrEnum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .backends import HelpBackendKind
from .colors import as_escape_sequence, map_console_color
from .constants import (
    BUILTIN_HELP_CATALOG,
    DEFAULT_FULL_HELP_KEY,
    DEFAULT_HELP_TIMEOUT,
    DEFAULT_PARAMETER_HELP_KEY,
)
from .errors import ConfigError
from .path_utils import map_path


class PagerKind(StrEnum):
    INTERNAL = "internal"
    EXTERNAL = "external"


class HelpOptions(BaseModel):
    """Options consumed by the help subsystem.

    ``external_pager_arguments`` is a template; its ``<regex>`` placeholder
    receives the pattern that scrolls the pager to the relevant parameter.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    use_external_pager: bool = False
    external_pager_command: str = ""
    external_pager_arguments: str = ""
    help_timeout: float | None = DEFAULT_HELP_TIMEOUT
    help_backend: HelpBackendKind = HelpBackendKind.CATALOG
    help_catalog: str = BUILTIN_HELP_CATALOG
    full_help_key: str = DEFAULT_FULL_HELP_KEY
    parameter_help_key: str = DEFAULT_PARAMETER_HELP_KEY
    emphasis_color: str = map_console_color("Cyan")
    error_color: str = map_console_color("Red")

    @field_validator("emphasis_color", "error_color", mode="before")
    @classmethod
    def _to_escape_sequence(cls, value: Any) -> str:
        return as_escape_sequence(value)

    @field_validator("help_timeout")
    @classmethod
    def _positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("help_timeout must be positive (or null to wait forever)")
        return value

    @field_validator("external_pager_arguments")
    @classmethod
    def _splittable_arguments(cls, value: str) -> str:
        shlex.split(value)
        return value

    @field_validator("full_help_key", "parameter_help_key")
    @classmethod
    def _non_empty_key(cls, value: str) -> str:
        if not value.split():
            raise ValueError("key binding must not be empty")
        return value

    @property
    def pager_kind(self) -> PagerKind:
        return PagerKind.EXTERNAL if self.use_external_pager else PagerKind.INTERNAL

    def key_sequence(self, full: bool) -> tuple[str, ...]:
        """Key binding for a help entry point, split into prompt_toolkit keys."""
        value = self.full_help_key if full else self.parameter_help_key
        return tuple(value.split())


def load_options(profile_path: str | None) -> HelpOptions:
    """Load help options from a JSON profile.

    A missing profile file yields the defaults. Options may sit at the top
    level or under a ``"help"`` key.

    Raises:
        ConfigError: If the file cannot be parsed or an option is invalid.
    """
    if profile_path is None:
        return HelpOptions()

    try:
        path = Path(map_path(profile_path))
    except ValueError as exc:
        raise ConfigError(f"Invalid profile path: {exc}") from exc

    if not path.exists():
        return HelpOptions()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Cannot read profile {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"Profile {path} must contain a JSON object")

    section = raw.get("help", raw)
    if not isinstance(section, dict):
        raise ConfigError(f"'help' in profile {path} must be a JSON object")

    try:
        return HelpOptions.model_validate(section)
    except ValidationError as exc:
        raise ConfigError(f"Invalid options in profile {path}: {exc}") from exc
