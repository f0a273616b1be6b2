# protocol_adapter/translation/factory.py
import logging
from typing import Optional

from protocol_adapter import config
from protocol_adapter.config_loader import load_protocol_config
from protocol_adapter.registry import IdentifierRegistry
from .manager import ConverterService, RegistrySource

logger = logging.getLogger(__name__)


class ConverterFactory:
    """Factory for creating converter services from settings."""

    @staticmethod
    def create_service(
        registry_source: Optional[str] = None,
        config_path: Optional[str] = None,
        envelope_version: Optional[str] = None,
        service_logger: Optional[logging.Logger] = None,
    ) -> ConverterService:
        """
        Create a converter service, defaulting every argument from the environment.

        In static mode the protocol manifest at ``config_path`` is loaded once and
        the registry is built up front. In per-call-snapshot mode nothing is
        loaded; each call brings its own snapshot.

        Raises:
            MalformedConfiguration: If the manifest cannot be loaded in static mode
            ValueError: If the registry source is not recognised
        """
        source = RegistrySource(registry_source or config.REGISTRY_SOURCE)
        version = envelope_version or config.ENVELOPE_VERSION

        logger.debug(f"Creating converter service with registry source: {source.value}")

        registry = None
        if source == RegistrySource.STATIC:
            protocol = load_protocol_config(config_path or config.PROTOCOL_CONFIG_PATH)
            registry = IdentifierRegistry.build(protocol)

        return ConverterService(
            registry_source=source,
            registry=registry,
            logger=service_logger,
            envelope_version=version,
        )
