from typing import List, Optional

import requests

from keydrop.errors import FetchError
from keydrop.logger import get_logger

logger = get_logger("keypool")

NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


def parse_keys(text: str) -> List[str]:
    """
    Split a newline-delimited key list into keys, in file order.
    Surrounding whitespace is trimmed and blank lines are dropped.
    """
    return [line.strip() for line in text.splitlines() if line.strip()]


class KeyPool:
    """Remote plain-text list of license keys, re-read on every fetch."""

    def __init__(self, url: str, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self.url = url
        self.session = session or requests.Session()
        self.timeout = timeout

    def fetch(self) -> List[str]:
        try:
            resp = self.session.get(self.url, headers=NO_CACHE_HEADERS, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("keypool.fetch_error", extra={"url": self.url, "error": str(e)})
            raise FetchError() from e

        if not resp.ok:
            logger.error("keypool.bad_status", extra={"url": self.url, "status": resp.status_code})
            raise FetchError()

        keys = parse_keys(resp.text)
        logger.debug("keypool.fetched", extra={"count": len(keys)})
        return keys
