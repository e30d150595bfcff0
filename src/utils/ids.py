"""
Record id generation.
"""

import uuid
from datetime import datetime


def new_record_id(prefix: str, now: datetime) -> str:
    """
    Generate an opaque record id: <prefix>_<epoch-ms>_<9 random hex chars>.

    Args:
        prefix: Collection-specific prefix (e.g. "suggestion", "comment")
        now: Creation time

    Returns:
        Id string, unique with overwhelming probability
    """
    millis = int(now.timestamp() * 1000)
    return f"{prefix}_{millis}_{uuid.uuid4().hex[:9]}"
