"""Mapping configuration file loader.

Reads the mapping document from disk, as JSON or (for .yaml / .yml paths)
YAML, and validates it into a MappingConfig. Any failure degrades to the
empty configuration so the writer keeps running as a no-op.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from metricsbridge.core.config import MappingConfig, parse_mapping_config

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = frozenset({".yaml", ".yml"})


def _read_document(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in _YAML_SUFFIXES:
        return yaml.safe_load(text)
    return json.loads(text)


def load_mapping_config(path: str | Path | None) -> MappingConfig:
    """Load the mapping file at path.

    Args:
        path: Location of the mapping file. None means not configured.

    Returns:
        The parsed configuration, or MappingConfig.EMPTY if the file
        cannot be read or parsed into valid rules.
    """
    if not path:
        logger.info("No mapping file configured, metrics will not be exported")
        return MappingConfig.EMPTY

    path = Path(path)
    try:
        config = parse_mapping_config(_read_document(path))
    except Exception:
        logger.exception(
            "Failed to load mapping file %s, metrics will not be exported", path
        )
        return MappingConfig.EMPTY

    logger.info("Loaded %d metric mapping(s) from %s", len(config), path)
    return config
