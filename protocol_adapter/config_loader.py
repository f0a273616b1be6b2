"""
Protocol manifest loader.

Reads the on-disk protocol manifest (YAML, or JSON which YAML also accepts)
and validates it into a Protocol.
"""
import logging
from typing import Optional

import yaml

from protocol_adapter import config
from protocol_adapter.errors import MalformedConfiguration
from protocol_adapter.models.protocol import Protocol
from protocol_adapter.registry import parse_protocol

logger = logging.getLogger(__name__)


def load_protocol_config(path: Optional[str] = None) -> Protocol:
    """
    Load the protocol manifest from a file.

    Args:
        path: Manifest path, defaults to PROTOCOL_CONFIG_PATH

    Returns:
        The validated Protocol

    Raises:
        MalformedConfiguration: If the file cannot be read, parsed or validated
    """
    path = path or config.PROTOCOL_CONFIG_PATH
    try:
        with open(path, 'r') as f:
            config_data = yaml.safe_load(f)
    except FileNotFoundError as e:
        logger.error(f"Protocol config file not found at: {path}")
        raise MalformedConfiguration(f"Failed to read configuration file {path}: {e}") from e
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load protocol config from {path}: {e}")
        raise MalformedConfiguration(f"Failed to parse configuration {path}: {e}") from e

    protocol = parse_protocol(config_data)
    logger.debug(
        f"Successfully loaded protocol config from: {path} "
        f"({len(protocol.devices)} devices, {len(protocol.models)} models)"
    )
    return protocol
