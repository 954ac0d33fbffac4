"""Tests for ConnectivityState notifications."""

import asyncio

import pytest

from src.common.connectivity import ConnectivityState


class TestConnectivityState:
    def test_starts_disconnected(self):
        assert ConnectivityState().is_connected is False

    def test_notifies_only_on_change(self):
        state = ConnectivityState()
        seen = []
        state.subscribe(seen.append)

        state.set(True)
        state.set(True)
        state.set(False)
        state.set(False)

        assert seen == [True, False]
        assert state.is_connected is False

    def test_unsubscribe_stops_notifications(self):
        state = ConnectivityState()
        seen = []
        unsubscribe = state.subscribe(seen.append)

        state.set(True)
        unsubscribe()
        unsubscribe()
        state.set(False)

        assert seen == [True]

    def test_every_observer_is_notified(self, mocker):
        state = ConnectivityState()
        first = mocker.Mock()
        second = mocker.Mock()
        state.subscribe(first)
        state.subscribe(second)

        state.set(True)

        first.assert_called_once_with(True)
        second.assert_called_once_with(True)

    @pytest.mark.asyncio
    async def test_notifies_on_loop(self):
        loop = asyncio.get_running_loop()
        state = ConnectivityState(loop)
        seen = []
        state.subscribe(seen.append)

        state.set(True)

        # Value is stored immediately, observers run on the next loop turn.
        assert state.is_connected is True
        assert seen == []
        await asyncio.sleep(0)
        assert seen == [True]
