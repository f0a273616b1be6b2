import logging
from enum import Enum
from typing import Dict, List, Optional

from protocol_adapter.errors import ConversionError, MalformedConfiguration
from protocol_adapter.models.messages import DEFAULT_ENVELOPE_VERSION
from protocol_adapter.models.translation import EnvelopeResult, IssueResult, ReportRequestResult
from protocol_adapter.registry import ConfigSource, IdentifierRegistry
from .inbound import InboundConverter
from .outbound import OutboundConverter


class RegistrySource(str, Enum):
    """Where the converter service takes its identifier registry from."""
    STATIC = "static"
    PER_CALL_SNAPSHOT = "per-call-snapshot"


class ConverterService:
    """
    Entry point for the plugin host.

    Resolves the registry for each call (the one built at startup, or a fresh
    one from the snapshot passed with the call), runs the converter, and
    reports conversion errors as failed results instead of raising.
    """

    def __init__(
        self,
        registry_source: RegistrySource = RegistrySource.STATIC,
        registry: Optional[IdentifierRegistry] = None,
        logger: Optional[logging.Logger] = None,
        envelope_version: str = DEFAULT_ENVELOPE_VERSION,
    ):
        """
        Initialize the converter service.

        Args:
            registry_source: 'static' to use ``registry`` for every call,
                'per-call-snapshot' to build a registry from each call's snapshot
            registry: Registry built at startup, required in static mode
            logger: Logger handed to both converters
            envelope_version: Version string written into platform envelopes
        """
        self.registry_source = RegistrySource(registry_source)
        if self.registry_source == RegistrySource.STATIC and registry is None:
            raise ValueError("A registry is required when registry_source is 'static'")

        self.registry = registry
        self.logger = logger or logging.getLogger(__name__)
        self.outbound = OutboundConverter(logger=self.logger)
        self.inbound = InboundConverter(logger=self.logger, envelope_version=envelope_version)

        self.logger.info(f"Initialized ConverterService with registry source '{self.registry_source.value}'")

    def _registry_for_call(self, snapshot: Optional[ConfigSource]) -> IdentifierRegistry:
        if self.registry_source == RegistrySource.STATIC:
            if snapshot is not None:
                self.logger.debug("Ignoring configuration snapshot, registry source is static")
            return self.registry

        if snapshot is None:
            raise MalformedConfiguration("A configuration snapshot is required for every call")
        return IdentifierRegistry.build(snapshot)

    def convert_issue(
        self,
        device_id: str,
        model_id: str,
        feature_id: str,
        values: Dict[str, str],
        snapshot: Optional[ConfigSource] = None,
    ) -> IssueResult:
        """Convert an issue request; failures are returned, not raised."""
        try:
            registry = self._registry_for_call(snapshot)
            return self.outbound.convert_issue(registry, device_id, model_id, feature_id, values)
        except ConversionError as e:
            self.logger.warning(f"Issue conversion failed for device {device_id}, feature {feature_id}: {e.kind}: {e}")
            return IssueResult(success=False, error_kind=e.kind, error=str(e))

    def convert_report_request(
        self,
        model_id: str,
        feature_id: str,
        snapshot: Optional[ConfigSource] = None,
    ) -> ReportRequestResult:
        """Fan a report request out to the devices of a model; failures are returned, not raised."""
        try:
            registry = self._registry_for_call(snapshot)
            messages = self.outbound.convert_report_request(registry, model_id, feature_id)
            return ReportRequestResult(messages=messages)
        except ConversionError as e:
            self.logger.warning(f"Report request conversion failed for model {model_id}: {e.kind}: {e}")
            return ReportRequestResult(success=False, error_kind=e.kind, error=str(e))

    def convert_to_envelope(
        self,
        messages: List[str],
        snapshot: Optional[ConfigSource] = None,
    ) -> EnvelopeResult:
        """Convert device messages to a platform envelope; failures are returned, not raised."""
        try:
            registry = self._registry_for_call(snapshot)
            return self.inbound.convert_to_envelope(registry, messages)
        except ConversionError as e:
            self.logger.warning(f"Envelope conversion failed for {len(messages or [])} messages: {e.kind}: {e}")
            return EnvelopeResult(success=False, error_kind=e.kind, error=str(e))
