"""
blobs.py — Opaque JSON Blob Decoding

Shared by the persistence repository (server side) and the persistence
client. A blob that does not decode to a JSON object is "no saved data".
"""

import json
from typing import Any, Dict, Optional

from fincast.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PROJECT_NAME = "Untitled Project"


def parse_blob(raw: Any) -> Optional[Dict[str, Any]]:
    """
    Decode a stored JSON blob.

    Returns None for anything that does not decode to a JSON object.
    """
    if isinstance(raw, dict):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Discarding malformed saved payload (invalid JSON)")
        return None
    if not isinstance(data, dict):
        logger.warning("Discarding malformed saved payload (expected a JSON object)")
        return None
    return data
