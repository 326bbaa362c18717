"""Help backends: a JSON help catalog and ``<command> --help``."""

from __future__ import annotations

import json
import shutil
import subprocess
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .models import ParameterHelp
from .path_utils import map_path


class HelpBackendKind(StrEnum):
    CATALOG = "catalog"
    COMMAND = "command"


# ---------------------------------------------------------------------------
# Catalog schema
# ---------------------------------------------------------------------------


class CatalogParameter(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type_name: str = Field(default="Object", alias="type")
    description: list[str] = []
    required: bool = False
    position: str = "Named"
    default_value: str = ""
    pipeline_input: bool = False
    wildcards: bool = False

    @field_validator("position", "default_value", mode="before")
    @classmethod
    def _stringify(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _split_description(cls, value: object) -> object:
        if isinstance(value, str):
            return [value]
        return value


class CatalogCommand(BaseModel):
    model_config = ConfigDict(extra="forbid")

    full_help: list[str] = []
    parameters: dict[str, CatalogParameter] = {}

    @field_validator("full_help", mode="before")
    @classmethod
    def _split_full_help(cls, value: object) -> object:
        if isinstance(value, str):
            return value.split("\n")
        return value


class HelpCatalog(BaseModel):
    model_config = ConfigDict(extra="forbid")

    commands: dict[str, CatalogCommand] = {}


def load_help_catalog(path: str) -> HelpCatalog:
    """Load and validate a help catalog file (``~/`` and ``@/`` prefixes allowed)."""
    try:
        catalog_path = Path(map_path(path))
    except ValueError as exc:
        raise ConfigError(f"Invalid help catalog path: {exc}") from exc

    try:
        raw = json.loads(catalog_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigError(f"Help catalog not found: {catalog_path}") from exc
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Cannot read help catalog {catalog_path}: {exc}") from exc

    try:
        return HelpCatalog.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid help catalog {catalog_path}: {exc}") from exc


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------


class CatalogHelpBackend:
    """In-process lookups over a help catalog.

    Command and parameter names match case-insensitively; a parameter may
    also be given by a unique prefix (``-Pa`` for ``-Path``).
    """

    def __init__(self, catalog: HelpCatalog) -> None:
        self._commands = {name.lower(): (name, entry) for name, entry in catalog.commands.items()}

    @classmethod
    def from_file(cls, path: str) -> CatalogHelpBackend:
        return cls(load_help_catalog(path))

    def lookup_full_help(self, command_name: str) -> str | None:
        found = self._commands.get(command_name.lower())
        if found is None:
            return None
        _, entry = found
        text = "\n".join(entry.full_help)
        return text if text.strip() else None

    def lookup_parameter_help(
        self, command_name: str, parameter_name: str
    ) -> ParameterHelp | None:
        found = self._commands.get(command_name.lower())
        if found is None:
            return None
        _, entry = found

        match = _match_parameter(entry.parameters, parameter_name)
        if match is None:
            return None
        name, parameter = match
        return ParameterHelp(
            name=name,
            type_name=parameter.type_name,
            description_lines=tuple(parameter.description),
            required=parameter.required,
            position=parameter.position,
            default_value=parameter.default_value,
            accepts_pipeline_input=parameter.pipeline_input,
            supports_wildcards=parameter.wildcards,
        )


def _match_parameter(
    parameters: dict[str, CatalogParameter], parameter_name: str
) -> tuple[str, CatalogParameter] | None:
    wanted = parameter_name.lower()
    if not wanted:
        return None

    prefixed = []
    for name, parameter in parameters.items():
        if name.lower() == wanted:
            return name, parameter
        if name.lower().startswith(wanted):
            prefixed.append((name, parameter))

    if len(prefixed) == 1:
        return prefixed[0]
    return None


class CommandHelpBackend:
    """Full help from running ``<command> --help``; no parameter help."""

    def __init__(self, help_flag: str = "--help", timeout: float | None = None) -> None:
        self._help_flag = help_flag
        self._timeout = timeout

    def lookup_full_help(self, command_name: str) -> str | None:
        executable = shutil.which(command_name)
        if executable is None:
            return None

        completed = subprocess.run(
            [executable, self._help_flag],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            stdin=subprocess.DEVNULL,
            timeout=self._timeout,
            check=False,
        )
        # Some tools print usage to stderr.
        text = completed.stdout if completed.stdout.strip() else completed.stderr
        return text if text.strip() else None

    def lookup_parameter_help(
        self, command_name: str, parameter_name: str
    ) -> ParameterHelp | None:
        return None
