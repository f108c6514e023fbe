"""ID generation and timestamp utilities."""

import uuid
from datetime import datetime, timezone


def generate_batch_id() -> str:
    """Generate a unique batch ID (UUID4)."""
    return str(uuid.uuid4())


def generate_module_name(prefix: str = "agentkit_agent") -> str:
    """Generate a unique ``sys.modules`` key for a freshly evaluated source."""
    return f"{prefix}_{uuid.uuid4().hex[:16]}"


def utc_timestamp() -> str:
    """Generate an ISO8601 UTC timestamp."""
    return datetime.now(timezone.utc).isoformat()
