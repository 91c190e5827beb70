"""
Tests for main - configuration gate, exit codes and signal handling.
The signal tests run the sensor as a real child process.
"""

from __future__ import annotations

import os
import signal
import socket
import subprocess
import sys
import time
from unittest.mock import AsyncMock, patch

import pytest
from loguru import logger

import main
from conftest import ROOT, free_port


class TestMainFunction:
    def test_missing_webhook_exits_1_without_binding(self, env):
        env.delenv("WEBHOOK_URL")

        with patch("main.ListenerManager") as manager_cls:
            assert main.main() == main.EXIT_FAILURE

        manager_cls.assert_not_called()

    def test_all_ports_blocked_exits_1(self, env, blocked_port):
        env.setenv("HONEYPOT_PORTS", str(blocked_port))
        env.setenv("HONEYPOT_BIND_HOST", "127.0.0.1")

        assert main.main() == main.EXIT_FAILURE

    def test_configuration_error_is_logged_with_its_details(self, env):
        env.delenv("WEBHOOK_URL")
        records = []
        sink_id = logger.add(lambda m: records.append(m.record), level="DEBUG")
        try:
            with patch("main.setup_logging"):
                assert main.main() == main.EXIT_FAILURE
        finally:
            logger.remove(sink_id)

        (record,) = [r for r in records if r["level"].name == "ERROR"]
        assert record["message"] == "WEBHOOK_URL environment variable is required"
        error = record["extra"]["error"]
        assert error["type"] == "ConfigurationError"
        assert error["error_code"] == 1100
        assert error["recoverable"] is False
        assert error["details"]["config_key"] == "WEBHOOK_URL"

    def test_effective_settings_are_logged_at_startup(self, env):
        records = []
        sink_id = logger.add(lambda m: records.append(m.record), level="DEBUG")
        try:
            with patch("main.setup_logging"), \
                    patch("main.run_sensor", new=AsyncMock(return_value=main.EXIT_OK)):
                assert main.main() == main.EXIT_OK
        finally:
            logger.remove(sink_id)

        (record,) = [r for r in records if "settings" in r["extra"]]
        assert record["extra"]["settings"]["host_name"] == "sensor-test"
        assert record["extra"]["settings"]["ports"][0] == 21

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals only")
    def test_sigterm_during_startup_exits_0(self, env):
        previous = signal.getsignal(signal.SIGTERM)

        def interrupted_load():
            os.kill(os.getpid(), signal.SIGTERM)
            time.sleep(5)
            raise AssertionError("SIGTERM was not delivered")

        with patch("main.load_settings", side_effect=interrupted_load), \
                patch("main.ListenerManager") as manager_cls:
            assert main.main() == main.EXIT_OK

        manager_cls.assert_not_called()
        assert signal.getsignal(signal.SIGTERM) == previous


def _child_env(**extra: str) -> dict:
    child = {k: v for k, v in os.environ.items() if not k.upper().startswith("HONEYPOT_")}
    child.pop("WEBHOOK_URL", None)
    child.update(extra)
    return child


def _wait_until_listening(proc: subprocess.Popen, port: int, timeout: float = 20.0) -> None:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if proc.poll() is not None:
            raise AssertionError(f"sensor exited early with {proc.returncode}")
        try:
            with socket.create_connection(("127.0.0.1", port), timeout=0.5):
                return
        except OSError:
            time.sleep(0.1)
    raise AssertionError("sensor never started listening")


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals only")
class TestProcess:
    def test_missing_webhook_url(self, tmp_path):
        proc = subprocess.run(
            [sys.executable, str(ROOT / "main.py")],
            env=_child_env(),
            cwd=tmp_path,
            capture_output=True,
            text=True,
            timeout=30,
        )

        assert proc.returncode == 1
        assert "WEBHOOK_URL environment variable is required" in proc.stdout

    @pytest.mark.parametrize("sig", [signal.SIGTERM, signal.SIGINT])
    def test_signal_exits_cleanly(self, tmp_path, sig):
        port = free_port()
        webhook_port = free_port()
        proc = subprocess.Popen(
            [sys.executable, str(ROOT / "main.py")],
            env=_child_env(
                WEBHOOK_URL=f"http://127.0.0.1:{webhook_port}/hook",
                HOST_NAME="signal-test",
                HONEYPOT_PORTS=str(port),
                HONEYPOT_BIND_HOST="127.0.0.1",
            ),
            cwd=tmp_path,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
        try:
            _wait_until_listening(proc, port)
            proc.send_signal(sig)
            output, _ = proc.communicate(timeout=20)
        finally:
            if proc.poll() is None:
                proc.kill()
                proc.communicate()

        assert proc.returncode == 0
        assert "Honeypot is running" in output
        assert "Shutting down honeypot..." in output
