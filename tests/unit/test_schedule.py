"""Unit tests for schedule state and the eligibility window."""

from __future__ import annotations

import datetime as dt

import pytest

from standup.digest.errors import InvalidTimeError
from standup.digest.models import ScheduleSettings
from standup.digest.schedule import ScheduleState, is_within_window, validate_time
from tests.helpers.standup_doubles import at


class TestIsWithinWindow:
    """Tests for the eligibility window test."""

    @pytest.mark.parametrize("minute", [0, 1, 2, 3, 4])
    def test_eligible_inside_window(self, minute: int) -> None:
        """17:00 through 17:04 are eligible for a 17:00 target."""
        assert is_within_window(at(17, minute), 17, 0, window_minutes=5)

    @pytest.mark.parametrize(("hour", "minute"), [(16, 59), (17, 5), (18, 0)])
    def test_not_eligible_outside_window(self, hour: int, minute: int) -> None:
        """16:59, 17:05 and 18:00 are not eligible for a 17:00 target."""
        assert not is_within_window(at(hour, minute), 17, 0, window_minutes=5)

    def test_window_does_not_spill_into_next_hour(self) -> None:
        """A 17:58 target is not eligible at 18:01."""
        assert is_within_window(at(17, 59), 17, 58, window_minutes=5)
        assert not is_within_window(at(18, 1), 17, 58, window_minutes=5)


class TestValidateTime:
    """Tests for validate_time."""

    @pytest.mark.parametrize(("hour", "minute"), [(0, 0), (23, 59), (9, 30)])
    def test_accepts_valid_times(self, hour: int, minute: int) -> None:
        """Times within 00:00-23:59 are accepted."""
        validate_time(hour, minute)

    @pytest.mark.parametrize(("hour", "minute"), [(24, 0), (-1, 0), (12, 60), (0, -1)])
    def test_rejects_out_of_range(self, hour: int, minute: int) -> None:
        """Out-of-range hours or minutes raise InvalidTimeError."""
        with pytest.raises(InvalidTimeError) as excinfo:
            validate_time(hour, minute)
        assert (excinfo.value.hour, excinfo.value.minute) == (hour, minute)


class TestScheduleState:
    """Tests for ScheduleState."""

    @pytest.mark.asyncio
    async def test_defaults_to_five_pm_without_destination(self) -> None:
        """Fresh state uses 17:00 and no destination."""
        settings = await ScheduleState().get()

        assert (settings.hour, settings.minute) == (17, 0), "expected 17:00"
        assert settings.destination is None, "expected no destination"
        assert settings.last_fired is None, "expected no last-fired date"

    @pytest.mark.asyncio
    async def test_set_time_updates_settings(self) -> None:
        """A valid time replaces the target."""
        state = ScheduleState()

        settings = await state.set_time(9, 15)

        assert settings.time_label == "09:15", "expected new time"

    @pytest.mark.asyncio
    async def test_invalid_time_leaves_state_unchanged(self) -> None:
        """Rejected times do not modify the stored settings."""
        state = ScheduleState(ScheduleSettings(hour=8, minute=45))

        with pytest.raises(InvalidTimeError):
            await state.set_time(24, 0)

        settings = await state.get()
        assert settings.time_label == "08:45", "state should be unchanged"

    @pytest.mark.asyncio
    async def test_set_destination_and_mark_fired(self) -> None:
        """Destination and last-fired date are stored independently."""
        state = ScheduleState()

        await state.set_destination("123456")
        settings = await state.mark_fired(dt.date(2025, 7, 14))

        assert settings.destination == "123456", "destination should persist"
        assert settings.last_fired == dt.date(2025, 7, 14), "expected fire date"

    def test_rejects_invalid_initial_settings(self) -> None:
        """Constructing with an out-of-range time fails."""
        with pytest.raises(InvalidTimeError):
            ScheduleState(ScheduleSettings(hour=25, minute=0))
