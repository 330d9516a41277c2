import json
import logging
import time

import requests

from option_chain.config import (
    CONNECT_TIMEOUT_SEC, MAX_RETRIES, NSE_BASE_URL, NSE_HEADERS,
    NSE_OPTION_CHAIN_URL, READ_TIMEOUT_SEC, RETRY_DELAY_SEC
)
from option_chain.models import ChainSnapshot

logger = logging.getLogger(__name__)


class NSEClient:
    """
    Fetches option-chain snapshots from the public NSE API.
    NSE rejects API calls without the cookies set by its home page, so the
    first request on a session visits the home page.
    ReadTimeout is raised to the caller; other failures are logged and
    reported as None.
    """

    def __init__(self, session=None, timeout=(CONNECT_TIMEOUT_SEC, READ_TIMEOUT_SEC)):
        self.session = session or requests.Session()
        self.timeout = timeout
        self._warmed_up = False

    def _warm_up(self):
        if self._warmed_up:
            return
        try:
            self.session.get(NSE_BASE_URL, headers=NSE_HEADERS, timeout=self.timeout)
        except requests.exceptions.ReadTimeout:
            raise
        except requests.RequestException as e:
            logger.warning("NSE session warm-up failed: %s", e)
            return
        self._warmed_up = True

    def fetch_snapshot(self, symbol):
        self._warm_up()
        try:
            response = self.session.get(
                NSE_OPTION_CHAIN_URL,
                params={'symbol': symbol},
                headers=NSE_HEADERS,
                timeout=self.timeout,
            )
        except requests.exceptions.ReadTimeout:
            raise
        except requests.RequestException as e:
            logger.error("Error fetching data for %s: %s", symbol, e)
            return None

        if response.status_code != 200:
            logger.error("Error fetching data: %s", response.status_code)
            # cookies have probably expired
            self._warmed_up = False
            return None
        try:
            payload = response.json()
        except ValueError:
            preview = response.text[:200].replace("\n", " ")
            logger.error("NSE response not JSON. Preview: %s", preview)
            return None

        snapshot = ChainSnapshot.from_json(payload)
        if snapshot is None:
            logger.error("Unexpected option chain payload for %s", symbol)
        return snapshot


def fetch_with_retries(fetch, symbol, max_retries=MAX_RETRIES, delay=RETRY_DELAY_SEC, sleep=time.sleep):
    """
    Call ``fetch(symbol)``, retrying on read timeouts only.
    Returns None once ``max_retries`` retries are exhausted.
    """
    retries = 0
    while True:
        try:
            return fetch(symbol)
        except requests.exceptions.ReadTimeout as e:
            retries += 1
            if retries > max_retries:
                logger.error("Failed after %d retries: %s", max_retries, e)
                return None
            logger.warning("Timeout occurred. Retrying... (Attempt %d)", retries)
            sleep(delay)


def load_snapshot_file(path):
    """Load a saved NSE option-chain JSON response from disk."""
    with open(path, encoding='utf-8') as f:
        payload = json.load(f)
    snapshot = ChainSnapshot.from_json(payload)
    if snapshot is None:
        raise ValueError(f"{path} does not contain an option chain response")
    return snapshot
