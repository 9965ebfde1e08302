"""
EtherMom Bot - Ethermine.org API client.
Fetches wallet-wide and per-worker statistics and turns them into typed
records. Any failure, including an API level "not OK" status, raises
TransportError.
"""

import logging

import requests

from config import API_BASE_URL, REQUEST_TIMEOUT_SECONDS
from errors import TransportError
from models import StatsSnapshot, WorkerSnapshot

STATUS_OK = "OK"

API_FUNCTION_CURRENTSTATS = "currentStats"
API_FUNCTION_WORKERS = "workers"

logger = logging.getLogger("EtherMom")


def _optional_float(value) -> float | None:
    if value is None:
        return None
    return float(value)


def get_api_url(wallet: str, function: str, base_url: str = API_BASE_URL) -> str:
    """Build the URL of a per-wallet API endpoint."""
    return f"{base_url.rstrip('/')}/miner/{wallet}/{function}"


def fetch_api_data(url: str, timeout: float = REQUEST_TIMEOUT_SECONDS):
    """Fetch an Ethermine endpoint and return its ``data`` member."""
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
        payload = resp.json()
    except (requests.RequestException, ValueError) as e:
        raise TransportError(f"API request failed ({url}): {e}") from e

    if not isinstance(payload, dict) or payload.get("status") != STATUS_OK:
        status = payload.get("status") if isinstance(payload, dict) else None
        raise TransportError(f"API is not working ({url}): status={status!r}")

    logger.debug("API response from %s: %s", url, payload)
    return payload.get("data")


class EthermineSource:
    """Stats source for one wallet on the Ethermine pool."""

    def __init__(
        self,
        wallet: str,
        base_url: str = API_BASE_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        self.wallet = wallet
        self.base_url = base_url
        self.timeout = timeout

    def _fetch(self, function: str):
        url = get_api_url(self.wallet, function, self.base_url)
        return fetch_api_data(url, self.timeout)

    def fetch_global(self) -> StatsSnapshot:
        """Fetch the wallet-wide current stats."""
        data = self._fetch(API_FUNCTION_CURRENTSTATS)
        try:
            return StatsSnapshot(
                reported_hashrate=float(data.get("reportedHashrate") or 0),
                stale_shares=int(data.get("staleShares") or 0),
                valid_shares=int(data.get("validShares") or 0),
            )
        except (AttributeError, TypeError, ValueError) as e:
            raise TransportError(f"Malformed currentStats response: {data!r}") from e

    def fetch_workers(self) -> list[WorkerSnapshot]:
        """Fetch the per-worker stats. An empty list means no active workers."""
        data = self._fetch(API_FUNCTION_WORKERS)
        if data is None:
            return []
        try:
            return [
                WorkerSnapshot(
                    worker=str(w["worker"]),
                    reported_hashrate=_optional_float(w.get("reportedHashrate")),
                )
                for w in data
            ]
        except (KeyError, AttributeError, TypeError, ValueError) as e:
            raise TransportError(f"Malformed workers response: {data!r}") from e
