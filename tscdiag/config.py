"""Configuration for a tscdiag run."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tscdiag.diagnostics.comparator import DEFAULT_THRESHOLD_MS
from tscdiag.exceptions import ConfigurationError
from tscdiag.runner.compiler import DEFAULT_FLAGS

DEFAULT_CONFIG_FILE = ".tscdiag.yaml"


class DiffConfig(BaseModel):
    """Options for comparing diagnostics between two branches.

    Attributes:
        reporting_enabled: Post the report as a pull request comment
        base_branch: Branch to measure the baseline on
        threshold_ms: Tolerance for time metrics, in milliseconds
        custom_command: Command to run instead of tsc (must print diagnostics)
        extended_diagnostics: Use --extendedDiagnostics instead of --diagnostics
        access_token: GitHub token used for commenting
        flags: Extra tsc flags
        working_dir: Project directory (contains package.json)
        install_dependencies: Install dependencies before each measurement
        collapsible: Wrap the Markdown table in a <details> block
        comment_marker: Hidden marker identifying the tool's PR comment
        command_timeout: Timeout in seconds for each external command
    """

    model_config = ConfigDict(extra="forbid")

    reporting_enabled: bool = False
    base_branch: str = "main"
    threshold_ms: float = DEFAULT_THRESHOLD_MS
    custom_command: Optional[str] = None
    extended_diagnostics: bool = True
    access_token: Optional[str] = Field(default=None, repr=False)
    flags: str = DEFAULT_FLAGS
    working_dir: Path = Path(".")
    install_dependencies: bool = True
    collapsible: bool = True
    comment_marker: str = "tscdiag-report"
    command_timeout: Optional[float] = None

    @field_validator("threshold_ms")
    @classmethod
    def threshold_not_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("threshold must be >= 0")
        return value

    @field_validator("base_branch", "comment_marker")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @field_validator("custom_command", "access_token")
    @classmethod
    def blank_as_none(cls, value: Optional[str]) -> Optional[str]:
        # Action inputs arrive as empty strings when unset
        if value is not None and not value.strip():
            return None
        return value


def _format_validation_error(source: str, error: ValidationError) -> str:
    errors = []
    for err in error.errors():
        loc = ".".join(str(x) for x in err["loc"])
        errors.append(f"  - {loc}: {err['msg']}")
    return f"Invalid configuration in {source}:\n" + "\n".join(errors)


def load_config_file(path: Union[Path, str]) -> Dict[str, Any]:
    """Read raw option values from a YAML file.

    Raises:
        ConfigurationError: If the file is unreadable or not a YAML mapping
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Failed to read {path}: {e}") from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path} must be a YAML mapping")
    # Allow kebab-case keys, as in action inputs
    return {str(key).replace("-", "_"): value for key, value in raw.items()}


def build_config(
    config_path: Union[Path, str, None] = None,
    **overrides: Any,
) -> DiffConfig:
    """Build a validated configuration.

    Values from the YAML file (if any) are overridden by ``overrides``;
    overrides set to None are ignored.

    Raises:
        ConfigurationError: If the merged options are invalid
    """
    values: Dict[str, Any] = {}
    source = "options"

    default_path = Path(overrides.get("working_dir") or ".") / DEFAULT_CONFIG_FILE
    if config_path is None and default_path.exists():
        config_path = default_path
    if config_path is not None:
        values.update(load_config_file(config_path))
        source = str(config_path)

    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return DiffConfig.model_validate(values)
    except ValidationError as e:
        raise ConfigurationError(_format_validation_error(source, e)) from e
