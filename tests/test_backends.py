from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest

import dynhelp.backends as backends
from dynhelp.backends import (
    CatalogHelpBackend,
    CommandHelpBackend,
    HelpCatalog,
    load_help_catalog,
)
from dynhelp.constants import BUILTIN_HELP_CATALOG
from dynhelp.errors import ConfigError
from dynhelp.models import ParameterHelp


def _write_catalog(tmp_path: Path, data: object) -> str:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def _catalog_backend(commands: dict) -> CatalogHelpBackend:
    return CatalogHelpBackend(HelpCatalog.model_validate({"commands": commands}))


def test_builtin_catalog_has_get_item_path() -> None:
    backend = CatalogHelpBackend.from_file(BUILTIN_HELP_CATALOG)

    record = backend.lookup_parameter_help("Get-Item", "Path")

    assert record == ParameterHelp(
        name="Path",
        type_name="String",
        description_lines=(
            "Specifies the path to an item.",
            "Wildcard characters are permitted.",
        ),
        required=True,
        position="0",
        default_value="",
        accepts_pipeline_input=True,
        supports_wildcards=True,
    )
    assert "    -Path <String[]>" in backend.lookup_full_help("Get-Item").splitlines()


def test_lookup_is_case_insensitive_and_keeps_catalog_spelling() -> None:
    backend = _catalog_backend(
        {"Get-Item": {"full_help": "NAME", "parameters": {"Path": {"type": "String"}}}}
    )

    assert backend.lookup_full_help("get-item") == "NAME"
    assert backend.lookup_parameter_help("GET-ITEM", "path").name == "Path"


def test_parameter_unique_prefix_matches() -> None:
    backend = _catalog_backend(
        {"Get-Item": {"parameters": {"Path": {}, "Filter": {}, "PathType": {}}}}
    )

    assert backend.lookup_parameter_help("Get-Item", "Fil").name == "Filter"
    assert backend.lookup_parameter_help("Get-Item", "Path").name == "Path"
    assert backend.lookup_parameter_help("Get-Item", "PathT").name == "PathType"
    assert backend.lookup_parameter_help("Get-Item", "Pa") is None


def test_unknown_command_or_parameter_is_none() -> None:
    backend = _catalog_backend({"Get-Item": {"full_help": ["", " "], "parameters": {}}})

    assert backend.lookup_full_help("Remove-Item") is None
    assert backend.lookup_full_help("Get-Item") is None
    assert backend.lookup_parameter_help("Get-Item", "Path") is None
    assert backend.lookup_parameter_help("Remove-Item", "Path") is None


def test_catalog_parameter_normalizes_values() -> None:
    backend = _catalog_backend(
        {
            "Get-Item": {
                "parameters": {
                    "Depth": {"description": "One line.", "position": 1, "default_value": 0}
                }
            }
        }
    )

    record = backend.lookup_parameter_help("Get-Item", "Depth")

    assert record.type_name == "Object"
    assert record.description_lines == ("One line.",)
    assert record.position == "1"
    assert record.default_value == "0"


def test_parameter_defaults_to_named_position() -> None:
    backend = _catalog_backend({"Get-Item": {"parameters": {"Force": {}}}})

    assert backend.lookup_parameter_help("Get-Item", "Force").position == "Named"


def test_load_help_catalog_from_file(tmp_path: Path) -> None:
    path = _write_catalog(tmp_path, {"commands": {"tool": {"full_help": "usage: tool"}}})

    catalog = load_help_catalog(path)

    assert catalog.commands["tool"].full_help == ["usage: tool"]


@pytest.mark.parametrize(
    "data",
    [
        {"commands": {"tool": {"unknown_field": 1}}},
        {"commands": {"tool": {"parameters": {"x": {"required": "maybe"}}}}},
        ["not", "an", "object"],
    ],
)
def test_load_help_catalog_rejects_invalid_content(tmp_path: Path, data: object) -> None:
    with pytest.raises(ConfigError, match="Invalid help catalog"):
        load_help_catalog(_write_catalog(tmp_path, data))


def test_load_help_catalog_rejects_malformed_json(tmp_path: Path) -> None:
    path = tmp_path / "catalog.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigError, match="Cannot read help catalog"):
        load_help_catalog(str(path))


def test_load_help_catalog_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_help_catalog(str(tmp_path / "missing.json"))


def test_load_help_catalog_rejects_relative_path() -> None:
    with pytest.raises(ConfigError, match="Invalid help catalog path"):
        load_help_catalog("catalog.json")


def test_command_backend_missing_executable(monkeypatch) -> None:
    monkeypatch.setattr(backends.shutil, "which", lambda name: None)

    assert CommandHelpBackend().lookup_full_help("no-such-tool") is None


def test_command_backend_runs_help_flag(monkeypatch) -> None:
    calls = []

    def _run(argv, **kwargs):
        calls.append((argv, kwargs["timeout"]))
        return subprocess.CompletedProcess(argv, 0, stdout="usage: tool [-v]\n", stderr="")

    monkeypatch.setattr(backends.shutil, "which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(backends.subprocess, "run", _run)

    text = CommandHelpBackend(timeout=3.0).lookup_full_help("tool")

    assert text == "usage: tool [-v]\n"
    assert calls == [(["/usr/bin/tool", "--help"], 3.0)]


def test_command_backend_uses_stderr_when_stdout_empty(monkeypatch) -> None:
    def _run(argv, **kwargs):
        return subprocess.CompletedProcess(argv, 2, stdout="", stderr="usage: tool\n")

    monkeypatch.setattr(backends.shutil, "which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(backends.subprocess, "run", _run)

    assert CommandHelpBackend().lookup_full_help("tool") == "usage: tool\n"


def test_command_backend_has_no_parameter_help() -> None:
    assert CommandHelpBackend().lookup_parameter_help("tool", "v") is None
