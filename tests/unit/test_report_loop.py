"""Unit tests for ReportLoop."""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from sensornode.models.status import ErrorKind
from sensornode.models.upload import UploadResult
from sensornode.services.report_loop import ReportLoop


@pytest.mark.unit
class TestReportLoop:
    """Test ReportLoop ticks in isolation."""

    @pytest.fixture
    def clock(self):
        """Fake monotonic clock starting at 0."""
        return MagicMock(return_value=0.0)

    @pytest.fixture
    def report_loop(self, sample_credentials, mock_network, mock_uplink, clock):
        """ReportLoop with a fixed measurement of 42."""
        return ReportLoop(
            sample_credentials,
            mock_network,
            mock_uplink,
            report_interval=15.0,
            clock=clock,
            measure=MagicMock(return_value=42),
        )

    @pytest.mark.asyncio
    async def test_no_upload_before_interval(self, report_loop, mock_uplink):
        """Ticks within 15 s of the reference never upload."""
        for now in (0.0, 1.0, 7.5, 14.0, 14.999, 14.999):
            assert await report_loop.tick(now=now) is None

        mock_uplink.report.assert_not_called()
        assert report_loop.last_report == 0.0

    @pytest.mark.asyncio
    async def test_exactly_one_upload_at_interval(self, report_loop, mock_uplink):
        """At 15 s one upload goes out and the reference moves."""
        # Act
        result = await report_loop.tick(now=15.0)
        again = await report_loop.tick(now=15.0)

        # Assert
        assert result.accepted
        assert again is None
        mock_uplink.report.assert_awaited_once_with("WRITEKEY123", 42)
        assert report_loop.last_report == 15.0

    @pytest.mark.asyncio
    async def test_next_upload_after_another_interval(self, report_loop, mock_uplink):
        await report_loop.tick(now=15.0)
        await report_loop.tick(now=29.9)
        await report_loop.tick(now=30.0)

        assert mock_uplink.report.await_count == 2

    @pytest.mark.asyncio
    async def test_rejected_upload_still_resets_reference(self, report_loop, mock_uplink):
        """A failing endpoint does not tighten the retry spacing."""
        # Arrange
        mock_uplink.report = AsyncMock(return_value=UploadResult(status_code=500))

        # Act
        result = await report_loop.tick(now=16.0)
        await report_loop.tick(now=20.0)

        # Assert
        assert result.status_code == 500
        assert report_loop.last_report == 16.0
        assert report_loop.last_error == ErrorKind.UPLOAD_REJECTED
        mock_uplink.report.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_accepted_upload_clears_error(self, report_loop, mock_uplink):
        mock_uplink.report = AsyncMock(side_effect=[
            UploadResult(status_code=401),
            UploadResult(status_code=200),
        ])

        await report_loop.tick(now=15.0)
        assert report_loop.last_error == ErrorKind.UPLOAD_REJECTED
        await report_loop.tick(now=30.0)
        assert report_loop.last_error is None

    @pytest.mark.asyncio
    async def test_uses_clock_when_no_time_given(self, report_loop, clock, mock_uplink):
        clock.return_value = 15.0

        await report_loop.tick()

        mock_uplink.report.assert_awaited_once()
        assert report_loop.last_report == 15.0

    @pytest.mark.asyncio
    async def test_connected_tick_skips_recovery(self, report_loop, mock_network):
        await report_loop.tick(now=1.0)

        mock_network.recover.assert_not_called()

    @pytest.mark.asyncio
    async def test_lost_connection_is_recovered_before_report(self, report_loop, mock_network, mock_uplink):
        """Watchdog reconnects first, then the due report is sent."""
        mock_network.is_connected = AsyncMock(return_value=False)
        mock_network.recover = AsyncMock(return_value=True)

        result = await report_loop.tick(now=15.0)

        mock_network.recover.assert_awaited_once()
        assert result is not None
        mock_uplink.report.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_recovery_defers_to_next_tick(self, report_loop, mock_network, mock_uplink):
        """Reconnect failure is non-fatal and skips the report."""
        # Arrange
        mock_network.is_connected = AsyncMock(return_value=False)
        mock_network.recover = AsyncMock(return_value=False)

        # Act
        first = await report_loop.tick(now=15.0)
        second = await report_loop.tick(now=16.0)

        # Assert
        assert first is None and second is None
        assert mock_network.recover.await_count == 2
        assert report_loop.last_error == ErrorKind.CONNECT_FAILURE
        mock_uplink.report.assert_not_called()
        assert report_loop.last_report == 0.0

    def test_measurement_range(self, sample_credentials, mock_network, mock_uplink):
        """Default measurement stays in [10, 60)."""
        loop = ReportLoop(sample_credentials, mock_network, mock_uplink)

        values = {loop.read_measurement() for _ in range(500)}

        assert min(values) >= 10
        assert max(values) < 60

    def test_reference_starts_at_construction(self, sample_credentials, mock_network, mock_uplink):
        """First report is due one interval after the loop starts."""
        loop = ReportLoop(sample_credentials, mock_network, mock_uplink, clock=lambda: 100.0)

        assert loop.last_report == 100.0
        assert not loop.report_due(114.0)
        assert loop.report_due(115.0)

    @pytest.mark.asyncio
    async def test_run_forever_ticks_until_cancelled(self, report_loop):
        """Host scheduler keeps ticking with the configured sleep."""
        report_loop.tick = AsyncMock(return_value=None)
        sleep = AsyncMock(side_effect=[None, None, asyncio.CancelledError()])

        with patch("sensornode.services.report_loop.asyncio.sleep", sleep):
            with pytest.raises(asyncio.CancelledError):
                await report_loop.run_forever(tick_interval=2.0)

        assert report_loop.tick.await_count == 3
        sleep.assert_awaited_with(2.0)
