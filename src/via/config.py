"""
Via project configuration.

Parses the optional ``via.toml`` file into typed configuration. Every value
has a built-in default, so a project without ``via.toml`` behaves exactly
like one with an empty file. Relative paths are resolved against the
directory holding the configuration file.

Example ``via.toml``::

    [project]
    app = "app"
    out = "generated"
    ir = "generated/via.ir.json"

    [codegen]
    async = true
    default_format = "json"
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from via.core.errors import ViaError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "via.toml"
IR_FILENAME = "via.ir.json"


class ProjectConfig(BaseModel):
    """Input and output locations."""

    model_config = ConfigDict(extra="forbid")

    app: str = "app"
    out: str = "generated"
    ir: str | None = None


class CodegenConfig(BaseModel):
    """Code generation options."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    async_handlers: bool = Field(default=True, alias="async")
    default_format: str = "json"


class ViaConfig(BaseModel):
    """Complete Via configuration."""

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    codegen: CodegenConfig = Field(default_factory=CodegenConfig)
    root: Path = Field(default_factory=Path, exclude=True)

    def get_app_dir(self) -> Path:
        """Directory scanned for ``.via`` files."""
        return _resolve(self.root, self.project.app)

    def get_out_dir(self) -> Path:
        """Output root for generated artifacts."""
        return _resolve(self.root, self.project.out)

    def get_ir_path(self) -> Path:
        """IR snapshot location, ``<out>/via.ir.json`` unless configured."""
        if self.project.ir:
            return _resolve(self.root, self.project.ir)
        return self.get_out_dir() / IR_FILENAME


def _resolve(root: Path, value: str) -> Path:
    path = Path(value)
    if path.is_absolute():
        return path
    return root / path


def load_config(toml_path: Path | None = None) -> ViaConfig:
    """
    Load configuration from ``via.toml``.

    Args:
        toml_path: Explicit config file. When omitted, ``via.toml`` in the
            current directory is used if it exists.

    Returns:
        ViaConfig with parsed values or defaults

    Raises:
        ViaError: If an explicit file is missing, or the file is not valid
            TOML or contains unknown or mistyped keys
    """
    if toml_path is None:
        toml_path = Path(CONFIG_FILENAME)
        if not toml_path.exists():
            logger.debug("No %s found, using defaults", CONFIG_FILENAME)
            return ViaConfig()
    elif not toml_path.exists():
        raise ViaError(f"Config file not found: {toml_path}")

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ViaError(f"Invalid TOML in {toml_path}: {e}") from e
    except OSError as e:
        raise ViaError(f"Failed to read config file {toml_path}: {e}") from e

    try:
        config = ViaConfig(
            project=ProjectConfig(**data.get("project", {})),
            codegen=CodegenConfig(**data.get("codegen", {})),
            root=toml_path.parent,
        )
    except (TypeError, ValidationError) as e:
        raise ViaError(f"Invalid configuration in {toml_path}: {e}") from e

    logger.debug("Loaded configuration from %s", toml_path)
    return config
