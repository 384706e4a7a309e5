import logging
import os

def _canon_prefix(val):
    """
    Normalize API prefix to always be exactly like '/api':
      - defaults to '/api' when unset/empty
      - ensures a single leading slash
      - removes any trailing slash (except for root)
    """
    val = (val or "/api").strip()
    if not val.startswith("/"):
        val = "/" + val
    if len(val) > 1 and val.endswith("/"):
        val = val[:-1]
    return val


def _log_level(val):
    level = logging.getLevelName((val or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


API_PREFIX = _canon_prefix(os.getenv("API_PREFIX"))
LOG_LEVEL = _log_level(os.getenv("LOG_LEVEL"))

MATCH_CREATE_RATE_LIMIT = os.getenv("MATCH_CREATE_RATE_LIMIT") or "30/minute"
