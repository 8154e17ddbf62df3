"""Tests for GracefulShutdown."""

from __future__ import annotations

import asyncio

import pytest

from skyflix.infrastructure.graceful_shutdown import GracefulShutdown


class TestRequestTracking:
    def test_starts_idle(self) -> None:
        assert GracefulShutdown().active_requests == 0

    def test_started_and_finished(self) -> None:
        gs = GracefulShutdown()
        gs.request_started()
        gs.request_started()
        gs.request_finished()
        assert gs.active_requests == 1

    def test_never_goes_negative(self) -> None:
        gs = GracefulShutdown()
        gs.request_finished()
        assert gs.active_requests == 0

    @pytest.mark.asyncio()
    async def test_track_context_manager(self) -> None:
        gs = GracefulShutdown()
        async with gs.track():
            assert gs.active_requests == 1
        assert gs.active_requests == 0

    @pytest.mark.asyncio()
    async def test_track_releases_on_error(self) -> None:
        gs = GracefulShutdown()
        with pytest.raises(ValueError):
            async with gs.track():
                raise ValueError("handler failed")
        assert gs.active_requests == 0


class TestReadiness:
    def test_not_ready_initially(self) -> None:
        assert GracefulShutdown().is_ready is False

    def test_ready_after_mark(self) -> None:
        gs = GracefulShutdown()
        gs.mark_ready()
        assert gs.is_ready is True

    @pytest.mark.asyncio()
    async def test_not_ready_once_stopping(self) -> None:
        gs = GracefulShutdown()
        gs.mark_ready()
        await gs.wait_for_drain(timeout=0.1)
        assert gs.is_stopping is True
        assert gs.is_ready is False


class TestDrain:
    @pytest.mark.asyncio()
    async def test_drain_without_requests(self) -> None:
        assert await GracefulShutdown().wait_for_drain(timeout=0.1) is True

    @pytest.mark.asyncio()
    async def test_drain_waits_for_active_request(self) -> None:
        gs = GracefulShutdown()
        gs.request_started()

        async def finish_later() -> None:
            await asyncio.sleep(0.02)
            gs.request_finished()

        finisher = asyncio.create_task(finish_later())
        assert await gs.wait_for_drain(timeout=1.0) is True
        await finisher

    @pytest.mark.asyncio()
    async def test_drain_times_out(self) -> None:
        gs = GracefulShutdown()
        gs.request_started()
        assert await gs.wait_for_drain(timeout=0.02) is False
        assert gs.active_requests == 1
