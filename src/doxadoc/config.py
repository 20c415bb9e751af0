"""Configuration loader for doxadoc.

A single YAML file (doxadoc.yaml) configures document generation::

    document:
      title: libfoo
      toclevels: 3
      include_typedefs: true
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

CONFIG_FILENAME = "doxadoc.yaml"


class DocumentConfig(BaseModel):
    """Configuration for document generation."""

    title: str = "Project"  # Rendered as "<title> API Documentation"
    readme_page: str = "md_README"  # Page compound rendered before the group tree
    source_highlighter: str = "coderay"
    toc: str = "left"
    toclevels: int = Field(default=4, ge=1, le=5)
    source_language: str = "C"  # Language of [source,...] signature blocks
    include_typedefs: bool = False
    strict: bool = False  # Fail the run when any diagnostic was collected


class DoxadocConfig(BaseModel):
    """Top-level configuration file contents."""

    document: DocumentConfig = Field(default_factory=DocumentConfig)


def load_config(config_path: Path | str) -> DoxadocConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to doxadoc.yaml

    Returns:
        Parsed configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open(encoding="utf-8") as f:
        data: Any = yaml.safe_load(f)

    if not data:
        raise ValueError("Empty configuration file")

    if not isinstance(data, dict):
        raise ValueError("Configuration must contain a mapping at the root level")

    # pydantic's ValidationError is a ValueError subclass
    return DoxadocConfig.model_validate(data)
