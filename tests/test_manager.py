"""
Tests for sensor.manager - ListenerManager lifecycle
"""

from __future__ import annotations

import asyncio

import pytest

from conftest import free_port, wait_for
from config.constants import NotificationType
from exceptions import NoListenersError
from sensor.manager import LifecycleState, ListenerManager


class TestBinding:
    def test_partial_bind_still_runs(self, make_settings, notifier, blocked_port):
        good = free_port()
        settings = make_settings(ports=[blocked_port, good])

        async def scenario():
            manager = ListenerManager(settings, notifier=notifier)
            await manager.start()
            try:
                return manager.state, manager.active_ports, manager.heartbeat.is_running
            finally:
                await manager.shutdown()

        state, active, heartbeat_running = asyncio.run(scenario())

        assert state == LifecycleState.RUNNING
        assert active == (good,)
        assert heartbeat_running is True

    def test_no_listeners_is_fatal(self, make_settings, notifier, blocked_port, log_messages):
        settings = make_settings(ports=[blocked_port])

        async def scenario():
            manager = ListenerManager(settings, notifier=notifier)
            with pytest.raises(NoListenersError) as exc_info:
                await manager.start()
            return manager, exc_info.value

        manager, err = asyncio.run(scenario())

        assert manager.state == LifecycleState.BINDING
        assert manager.listeners == ()
        assert err.attempted_ports == [blocked_port]
        assert err.recoverable is False
        assert notifier.payloads == []
        assert any("No listeners could be started" in m for m in log_messages)

    def test_ports_bound_in_configured_order(self, make_settings, notifier):
        ports = [free_port(), free_port(), free_port()]
        settings = make_settings(ports=ports)

        async def scenario():
            manager = ListenerManager(settings, notifier=notifier)
            await manager.start()
            try:
                return [lst.port for lst in manager.listeners]
            finally:
                await manager.shutdown()

        assert asyncio.run(scenario()) == list(dict.fromkeys(ports))


class TestRunning:
    def test_startup_health_check_precedes_heartbeats(self, make_settings, notifier):
        settings = make_settings(ports=[free_port()], heartbeat_interval=0.05)

        async def scenario():
            manager = ListenerManager(settings, notifier=notifier)
            await manager.start()
            first = list(notifier.payloads)
            await wait_for(lambda: len(notifier.payloads) >= 2)
            await manager.shutdown()
            return first

        first = asyncio.run(scenario())

        assert len(first) == 1
        assert first[0].type == NotificationType.HEALTH_CHECK
        assert first[0].data == "honeypot started"
        assert first[0].host_name == "sensor-test"
        assert notifier.payloads[1].data == "still alive"

    def test_connections_reported_after_startup(self, make_settings, notifier):
        port = free_port()
        settings = make_settings(ports=[port])

        async def scenario():
            manager = ListenerManager(settings, notifier=notifier)
            await manager.start()
            try:
                _, writer = await asyncio.open_connection("127.0.0.1", port)
                writer.close()
                await wait_for(
                    lambda: notifier.of_type(NotificationType.CONNECTION_ATTEMPT)
                )
                return manager.get_status()
            finally:
                await manager.shutdown()

        status = asyncio.run(scenario())

        (attempt,) = notifier.of_type(NotificationType.CONNECTION_ATTEMPT)
        assert attempt.data.target_port == port
        assert status["state"] == "running"
        assert status["active_ports"] == [port]
        assert status["connections"] == {port: 1}

    def test_run_until_stop_event(self, make_settings, notifier, log_messages):
        port = free_port()
        settings = make_settings(ports=[port])

        async def scenario():
            manager = ListenerManager(settings, notifier=notifier)
            stop = asyncio.Event()
            task = asyncio.create_task(manager.run(stop))
            await wait_for(lambda: manager.state == LifecycleState.RUNNING)
            stop.set()
            await asyncio.wait_for(task, timeout=3)
            return manager

        manager = asyncio.run(scenario())

        assert manager.state == LifecycleState.TERMINATED
        assert manager.listeners == ()
        assert not manager.heartbeat.is_running
        assert any("Shutting down honeypot..." in m for m in log_messages)

    def test_cannot_start_twice(self, make_settings, notifier):
        settings = make_settings(ports=[free_port()])

        async def scenario():
            manager = ListenerManager(settings, notifier=notifier)
            await manager.start()
            try:
                with pytest.raises(RuntimeError):
                    await manager.start()
            finally:
                await manager.shutdown()
                await manager.shutdown()
            return manager.state

        assert asyncio.run(scenario()) == LifecycleState.TERMINATED
