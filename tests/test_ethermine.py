from unittest import mock

import pytest
import requests

import ethermine
from errors import TransportError
from ethermine import EthermineSource

WALLET = "0xabc"


def _response(payload=None, status_code=200, json_error=False):
    resp = mock.Mock()
    resp.status_code = status_code
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    else:
        resp.raise_for_status.return_value = None
    if json_error:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


def test_get_api_url():
    url = ethermine.get_api_url(WALLET, "workers", "https://api.example/")
    assert url == "https://api.example/miner/0xabc/workers"


def test_fetch_global_parses_current_stats():
    payload = {
        "status": "OK",
        "data": {"reportedHashrate": 123_000_000, "staleShares": 3, "validShares": 97},
    }
    with mock.patch("ethermine.requests.get", return_value=_response(payload)) as get:
        stats = EthermineSource(WALLET, base_url="https://api.example").fetch_global()

    assert stats.reported_hashrate == 123_000_000
    assert stats.stale_shares == 3
    assert stats.valid_shares == 97
    assert get.call_args[0][0] == "https://api.example/miner/0xabc/currentStats"
    assert "timeout" in get.call_args[1]


def test_fetch_workers_keeps_missing_hashrate_as_none():
    payload = {
        "status": "OK",
        "data": [
            {"worker": "rig1", "reportedHashrate": 50_000_000},
            {"worker": "rig2", "reportedHashrate": None},
            {"worker": "rig3"},
        ],
    }
    with mock.patch("ethermine.requests.get", return_value=_response(payload)):
        workers = EthermineSource(WALLET).fetch_workers()

    assert [w.worker for w in workers] == ["rig1", "rig2", "rig3"]
    assert workers[0].reported_hashrate == 50_000_000.0
    assert workers[1].reported_hashrate is None
    assert workers[2].reported_hashrate is None


def test_fetch_workers_empty_data():
    payload = {"status": "OK", "data": None}
    with mock.patch("ethermine.requests.get", return_value=_response(payload)):
        assert EthermineSource(WALLET).fetch_workers() == []


def test_not_ok_status_is_transport_error():
    payload = {"status": "ERROR", "error": "Invalid address"}
    with mock.patch("ethermine.requests.get", return_value=_response(payload)):
        with pytest.raises(TransportError, match="not working"):
            EthermineSource(WALLET).fetch_global()


def test_http_error_is_transport_error():
    with mock.patch("ethermine.requests.get", return_value=_response(status_code=502)):
        with pytest.raises(TransportError):
            EthermineSource(WALLET).fetch_workers()


def test_connection_error_is_transport_error():
    with mock.patch(
        "ethermine.requests.get", side_effect=requests.ConnectionError("down")
    ):
        with pytest.raises(TransportError):
            EthermineSource(WALLET).fetch_global()


def test_invalid_json_is_transport_error():
    with mock.patch("ethermine.requests.get", return_value=_response(json_error=True)):
        with pytest.raises(TransportError):
            EthermineSource(WALLET).fetch_global()


def test_malformed_stats_is_transport_error():
    payload = {"status": "OK", "data": "NO DATA"}
    with mock.patch("ethermine.requests.get", return_value=_response(payload)):
        with pytest.raises(TransportError, match="Malformed"):
            EthermineSource(WALLET).fetch_global()
