import logging

import pytest

from metrics_exporter.core import core
from metrics_exporter.exporter.registry import CollectorRegistry


def test_build_registry_registers_in_order(caplog):
    """Coletores embutidos são registrados na ordem; nomes desconhecidos são ignorados."""
    caplog.set_level(logging.WARNING)
    reg = core.build_registry(["system", "nope", "process"])
    assert len(reg) == 2
    assert [getattr(c, "__name__", "") for c in reg.collectors] == [
        "collect_system_metrics",
        "collect_process_metrics",
    ]
    assert any("nope" in r.getMessage() for r in caplog.records)


def test_run_server_stops_on_keyboard_interrupt(monkeypatch):
    """KeyboardInterrupt encerra o loop e o servidor termina parado."""

    def interrupt(self, poll_interval=0.5):
        raise KeyboardInterrupt

    monkeypatch.setattr(core.ScrapeServer, "serve_forever", interrupt)
    server = core.run_server(port=0, addr="127.0.0.1", registry=CollectorRegistry())
    assert server.state.value == "stopped"


def test_run_server_bind_error_propagates(monkeypatch):
    """Erro de bind propaga para quem chamou."""

    def fail_start(self):
        raise OSError("address in use")

    monkeypatch.setattr(core.ScrapeServer, "start", fail_start)
    with pytest.raises(OSError):
        core.run_server(port=0, addr="127.0.0.1", collector_names=())
