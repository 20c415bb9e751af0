"""Record loading and configuration discovery."""

from __future__ import annotations

from pathlib import Path

from . import context
from .config import CONFIG_FILENAME, DoxadocConfig, load_config
from .diagnostics import Diagnostics
from .doxygen import INDEX_FILENAME, DoxygenParser
from .exceptions import ParseError
from .logger import DoxadocLogger, get_logger
from .models import RecordSet
from .parser import RecordFileParser

YAML_SUFFIXES = {".yaml", ".yml"}


def discover_config(
    input_path: Path | str,
    config_path: Path | None = None,
) -> DoxadocConfig | None:
    """Discover the configuration from various locations.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. Input directory (or the directory holding the input file) / doxadoc.yaml
    4. Parent of the input directory / doxadoc.yaml
    5. Current directory / doxadoc.yaml
    """
    # 1. Explicit argument
    if config_path and config_path.exists():
        return load_config(config_path)

    # 2. Global context
    ctx_config = context.get_config_path()
    if ctx_config and ctx_config.exists():
        return load_config(ctx_config)

    # 3./4. Next to the input
    input_path = Path(input_path)
    input_dir = input_path if input_path.is_dir() else input_path.parent
    for directory in (input_dir, input_dir.parent):
        dir_config = directory / CONFIG_FILENAME
        if dir_config.exists():
            return load_config(dir_config)

    # 5. Current directory
    cwd_config = Path(CONFIG_FILENAME)
    if cwd_config.exists():
        return load_config(cwd_config)

    return None


def load_records(
    path: Path | str,
    *,
    diagnostics: Diagnostics | None = None,
    logger: DoxadocLogger | None = None,
) -> RecordSet:
    """Load every record of a run.

    A directory or an ``index.xml`` is read as Doxygen XML output, a
    ``.yaml``/``.yml`` file as a record dump.

    Args:
        path: Input path
        diagnostics: Collector for problems tolerated while extracting
        logger: Logger to report progress on

    Returns:
        Records in extraction order

    Raises:
        ParseError: If the input does not exist or has an unsupported type
    """
    log = logger or get_logger()
    path = Path(path)

    if not path.exists():
        raise ParseError(f"Input not found: {path}")

    if path.is_dir() or path.name == INDEX_FILENAME:
        log.changes(f"Reading Doxygen XML from {path}")
        return DoxygenParser(diagnostics, logger=log).parse_index(path)

    if path.suffix.lower() in YAML_SUFFIXES:
        log.changes(f"Reading record dump {path}")
        return RecordFileParser().parse_file(path)

    raise ParseError(
        f"Unsupported input {path}: expected a Doxygen XML directory, "
        f"{INDEX_FILENAME} or a YAML record dump"
    )
