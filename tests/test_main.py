from __future__ import annotations

import json
import logging
from unittest.mock import MagicMock, patch

import pytest

from acm_client import __main__ as cli
from acm_client.errors import ServerDiscoveryError


@pytest.fixture(autouse=True)
def _quiet_logger(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "get_logger", lambda name: logging.getLogger(name))


def _client_mock() -> MagicMock:
    client = MagicMock()
    client.__enter__.return_value = client
    client.__exit__.return_value = False
    return client


def test_main_prints_merged_config(capsys) -> None:
    client = _client_mock()
    client.pull.return_value = {"b": 2, "a": "x"}

    with patch("acm_client.__main__.AcmClient", return_value=client):
        assert cli.main() == 0

    assert json.loads(capsys.readouterr().out) == {"a": "x", "b": 2}
    client.__exit__.assert_called_once()


def test_main_returns_1_on_fatal_error(capsys) -> None:
    client = _client_mock()
    client.pull.side_effect = ServerDiscoveryError("Get server list failed", status_code=500)

    with patch("acm_client.__main__.AcmClient", return_value=client):
        assert cli.main() == 1

    assert capsys.readouterr().out == ""
    client.__exit__.assert_called_once()


def test_main_returns_2_on_invalid_configuration(monkeypatch, capsys) -> None:
    def broken(name: str) -> logging.Logger:
        raise RuntimeError("Invalid configuration: boom")

    monkeypatch.setattr(cli, "get_logger", broken)

    assert cli.main() == 2
    assert "Invalid configuration" in capsys.readouterr().err
