import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class RequestContext:
    """Per-request metadata attached to every log event of that request."""

    correlation_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    path: Optional[str] = None
    method: Optional[str] = None

    # Arbitrary extras for logging
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self, include_none: bool = False) -> Dict[str, Any]:
        """Convert to dictionary for structured logging."""
        result = {}
        for key, value in {'correlation_id': self.correlation_id, 'path': self.path, 'method': self.method}.items():
            if include_none or value is not None:
                result[key] = value

        result.update(self.extra)
        return result
