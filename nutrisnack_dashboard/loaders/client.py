"""
Process-wide Supabase client.

The client is created on first use and reused by every request. Creation is
guarded by a lock so concurrent first requests build exactly one client.
"""

import logging
import threading

from supabase import Client, create_client

from .. import config
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

_client: Client | None = None
_lock = threading.Lock()


def get_supabase_client() -> Client:
    """Return the shared client, creating it once."""
    global _client

    if _client is not None:
        return _client

    with _lock:
        if _client is None:
            if not config.SUPABASE_URL or not config.SUPABASE_KEY:
                raise ConfigurationError("SUPABASE_URL and SUPABASE_KEY must be set")
            _client = create_client(config.SUPABASE_URL, config.SUPABASE_KEY)
            logger.info("Supabase client initialised for %s", config.SUPABASE_URL)
    return _client


def reset_supabase_client() -> None:
    """Drop the shared client (used on credential rotation and in tests)."""
    global _client
    with _lock:
        _client = None
