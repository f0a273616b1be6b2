from typing import Optional, List, TYPE_CHECKING
from dataclasses import dataclass, field

if TYPE_CHECKING:
    from protocol_adapter.models.messages import PlatformEnvelope


@dataclass(frozen=True)
class IssueResult:
    """Result of converting an internal issue request for a device."""
    success: bool = True
    input_messages: List[str] = field(default_factory=list)
    output_param_ids: List[str] = field(default_factory=list)
    issue_topic: str = ""
    issue_response_topic: str = ""
    error_kind: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class EnvelopeResult:
    """Result of converting device messages to a platform envelope."""
    success: bool = True
    topic: str = ""
    payload: bytes = b""
    envelope: Optional['PlatformEnvelope'] = None
    error_kind: Optional[str] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class ReportRequestResult:
    """Result of fanning a report request out to every device of a model."""
    success: bool = True
    messages: List[str] = field(default_factory=list)
    error_kind: Optional[str] = None
    error: Optional[str] = None
