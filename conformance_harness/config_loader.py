"""Load harness configuration from harness.yaml files."""

import asyncio
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from conformance_harness.models.config import HarnessConfig

log = logging.getLogger(__name__)


async def load_harness_config(path: Path) -> HarnessConfig:
    """Load and validate a harness configuration file.

    Args:
        path: Path to the YAML configuration file

    Returns:
        The validated configuration

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is empty, not valid YAML, or fails validation

    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    log.debug("Loading harness config from %s", path)
    text = await asyncio.to_thread(path.read_text)

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        raise ValueError(f"Empty config file: {path}")

    try:
        return HarnessConfig.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid harness config schema in {path}: {exc}") from exc
