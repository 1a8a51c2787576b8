from __future__ import annotations

from pathlib import Path

import pytest

from tscdiag.config import DiffConfig, build_config
from tscdiag.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


def test_defaults() -> None:
    config = build_config()

    assert config == DiffConfig()
    assert config.base_branch == "main"
    assert config.threshold_ms == 300
    assert config.flags == "--noEmit --incremental false"
    assert config.extended_diagnostics is True
    assert config.reporting_enabled is False
    assert config.access_token is None


def test_yaml_file_with_kebab_case_keys(tmp_path: Path) -> None:
    path = tmp_path / "diag.yaml"
    path.write_text("base-branch: develop\nthreshold-ms: 500\nextended_diagnostics: false\n")

    config = build_config(path)

    assert config.base_branch == "develop"
    assert config.threshold_ms == 500
    assert config.extended_diagnostics is False


def test_default_config_file_is_picked_up(tmp_path: Path) -> None:
    (tmp_path / ".tscdiag.yaml").write_text("base-branch: trunk\n")

    assert build_config().base_branch == "trunk"


def test_overrides_win_over_file_and_none_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "diag.yaml"
    path.write_text("base-branch: develop\nthreshold-ms: 500\n")

    config = build_config(path, base_branch="release", threshold_ms=None)

    assert config.base_branch == "release"
    assert config.threshold_ms == 500


def test_negative_threshold_is_rejected() -> None:
    with pytest.raises(ConfigurationError, match="threshold_ms"):
        build_config(threshold_ms=-1)


def test_unknown_key_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "diag.yaml"
    path.write_text("treshold: 100\n")

    with pytest.raises(ConfigurationError, match="treshold"):
        build_config(path)


def test_invalid_yaml(tmp_path: Path) -> None:
    path = tmp_path / "diag.yaml"
    path.write_text("base-branch: [unclosed\n")

    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        build_config(path)


def test_yaml_must_be_a_mapping(tmp_path: Path) -> None:
    path = tmp_path / "diag.yaml"
    path.write_text("- main\n- develop\n")

    with pytest.raises(ConfigurationError, match="mapping"):
        build_config(path)


def test_empty_yaml_file_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "diag.yaml"
    path.write_text("")

    assert build_config(path) == DiffConfig()


def test_blank_strings_become_none() -> None:
    config = build_config(access_token="  ", custom_command="")

    assert config.access_token is None
    assert config.custom_command is None


def test_token_is_not_in_repr() -> None:
    config = DiffConfig(access_token="ghp_secret")

    assert "ghp_secret" not in repr(config)


def test_default_config_file_is_read_from_working_dir(tmp_path: Path) -> None:
    project = tmp_path / "project"
    project.mkdir()
    (project / ".tscdiag.yaml").write_text("base-branch: trunk\n")

    config = build_config(working_dir=str(project))

    assert config.base_branch == "trunk"
    assert config.working_dir == project
