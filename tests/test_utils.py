from __future__ import annotations

from datetime import datetime, timezone

import pytest

from acm_client.utils.masking import mask_value, redact_headers
from acm_client.utils.time import epoch_millis, parse_utc, utc_now


def test_utc_now_is_aware() -> None:
    assert utc_now().tzinfo is timezone.utc


def test_epoch_millis_tracks_utc_now() -> None:
    millis = epoch_millis()
    assert abs(millis / 1000 - utc_now().timestamp()) < 5


def test_parse_utc_handles_z_suffix() -> None:
    assert parse_utc("2026-01-01T05:20:01Z") == datetime(2026, 1, 1, 5, 20, 1, tzinfo=timezone.utc)


def test_parse_utc_treats_naive_as_utc() -> None:
    assert parse_utc("2026-01-01T05:20:01").tzinfo is timezone.utc


def test_parse_utc_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        parse_utc("tomorrow")


def test_mask_value() -> None:
    assert mask_value("") == ""
    assert mask_value("abc") == "***"
    assert mask_value("LTAI5tAbCdEf") == "LTAI***"


def test_redact_headers_masks_credentials_only() -> None:
    headers = {
        "Spas-AccessKey": "AK",
        "Spas-Signature": "sig",
        "Spas-SecurityToken": "token",
        "timeStamp": "1",
        "Content-Type": "text/plain",
    }

    redacted = redact_headers(headers)

    assert redacted == {
        "Spas-AccessKey": "***",
        "Spas-Signature": "***",
        "Spas-SecurityToken": "***",
        "timeStamp": "1",
        "Content-Type": "text/plain",
    }
    assert headers["Spas-Signature"] == "sig"
