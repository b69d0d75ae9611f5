"""Testes do BulkDispatcher (sequencial, pausa entre envios)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.domain.results import SendResult
from app.services.bulk_dispatcher import BulkDispatcher
from utils.errors import NotConnectedError, TransportError


def _dispatcher(side_effect=None) -> MagicMock:
    dispatcher = MagicMock()
    dispatcher.ensure_connected = MagicMock()
    dispatcher.send_text = AsyncMock(
        side_effect=side_effect,
        return_value=SendResult(success=True, message="ok"),
    )
    return dispatcher


@pytest.mark.asyncio
async def test_rate_limited_target_is_reported_and_order_preserved() -> None:
    dispatcher = _dispatcher(
        side_effect=[SendResult(success=True, message="ok"), TransportError("rate-limited")]
    )
    bulk = BulkDispatcher(dispatcher, default_delay_seconds=2.0, sleep=AsyncMock())

    report = await bulk.send_bulk(["555-1234-5678", "555-0000-0001"], "promo", 0)

    assert [item.to_dict() for item in report.results] == [
        {"number": "555-1234-5678", "success": True},
        {"number": "555-0000-0001", "success": False, "error": "rate-limited"},
    ]
    assert report.to_dict()["total"] == 2
    assert report.succeeded == 1
    assert report.failed == 1


@pytest.mark.asyncio
async def test_delay_between_sends_never_after_last() -> None:
    sleep = AsyncMock()
    dispatcher = _dispatcher()
    bulk = BulkDispatcher(dispatcher, default_delay_seconds=2.0, sleep=sleep)

    report = await bulk.send_bulk(["1", "2", "3"], "oi")

    assert report.total == 3
    assert sleep.await_count == 2
    sleep.assert_awaited_with(2.0)
    assert [call.args for call in dispatcher.send_text.await_args_list] == [
        ("1", "oi"),
        ("2", "oi"),
        ("3", "oi"),
    ]


@pytest.mark.asyncio
async def test_explicit_delay_overrides_default() -> None:
    sleep = AsyncMock()
    bulk = BulkDispatcher(_dispatcher(), default_delay_seconds=2.0, sleep=sleep)

    await bulk.send_bulk(["1", "2"], "oi", delay_seconds=0.25)

    sleep.assert_awaited_once_with(0.25)


@pytest.mark.asyncio
async def test_not_connected_fails_up_front() -> None:
    dispatcher = _dispatcher()
    dispatcher.ensure_connected.side_effect = NotConnectedError()
    bulk = BulkDispatcher(dispatcher, sleep=AsyncMock())

    with pytest.raises(NotConnectedError):
        await bulk.send_bulk(["1", "2"], "oi")

    dispatcher.send_text.assert_not_awaited()


@pytest.mark.asyncio
async def test_every_failure_still_yields_full_report() -> None:
    dispatcher = _dispatcher(side_effect=TransportError("offline"))
    bulk = BulkDispatcher(dispatcher, sleep=AsyncMock())

    report = await bulk.send_bulk(["1", "2", "3"], "oi", 0)

    assert report.total == 3
    assert report.failed == 3
    assert [item.target for item in report.results] == ["1", "2", "3"]


@pytest.mark.asyncio
async def test_negative_delay_and_oversized_batch_rejected() -> None:
    bulk = BulkDispatcher(_dispatcher(), max_targets=2, sleep=AsyncMock())

    with pytest.raises(ValueError):
        await bulk.send_bulk(["1"], "oi", -1)
    with pytest.raises(ValueError, match="Máximo de 2"):
        await bulk.send_bulk(["1", "2", "3"], "oi")
    with pytest.raises(ValueError):
        BulkDispatcher(_dispatcher(), default_delay_seconds=-0.5)


@pytest.mark.asyncio
async def test_empty_targets_returns_empty_report() -> None:
    bulk = BulkDispatcher(_dispatcher(), sleep=AsyncMock())

    report = await bulk.send_bulk([], "oi")

    assert report.results == ()
