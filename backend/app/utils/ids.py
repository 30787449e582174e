"""
Request ID generation for log correlation.
"""
import uuid
from datetime import datetime, timezone


def generate_request_id(prefix: str = "pal") -> str:
    """Return ``<prefix>-<UTC yyyymmddHHMMSS>-<8 hex chars>``."""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"{prefix}-{stamp}-{uuid.uuid4().hex[:8]}"
