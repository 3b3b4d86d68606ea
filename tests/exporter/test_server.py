import logging
import socket

import pytest
import requests

from metrics_exporter.exporter.descriptor import MetricDescriptor
from metrics_exporter.exporter.encoder import CONTENT_TYPE
from metrics_exporter.exporter.registry import CollectorRegistry
from metrics_exporter.exporter.sample import MetricSample
from metrics_exporter.exporter.server import ScrapeServer, ServerState

DUMMY = MetricDescriptor("dummy_metric", "gauge", "A dummy metric", ["source"])


@pytest.fixture
def registry():
    reg = CollectorRegistry()
    reg.register(lambda: [MetricSample(DUMMY, 1, ["test"])])
    return reg


@pytest.fixture
def server(registry):
    srv = ScrapeServer(registry, port=0, addr="127.0.0.1")
    srv.start_in_thread()
    yield srv
    srv.stop()


def _url(srv, path):
    return f"http://127.0.0.1:{srv.port}{path}"


@pytest.mark.parametrize("path", ["/", "/metrics", "/metrics?x=1"])
def test_metrics_endpoint(server, path):
    """GET em / e /metrics devolve o documento de exposição."""
    resp = requests.get(_url(server, path), timeout=5)
    assert resp.status_code == 200
    assert resp.headers["Content-Type"] == CONTENT_TYPE
    assert resp.text == (
        "# HELP dummy_metric A dummy metric\n# TYPE dummy_metric gauge\ndummy_metric{source=\"test\"} 1"
    )


def test_healthz(server):
    """GET /healthz devolve 200 e OK."""
    resp = requests.get(_url(server, "/healthz"), timeout=5)
    assert resp.status_code == 200
    assert resp.text == "OK"
    assert resp.headers["Content-Type"] == "text/plain"


def test_unknown_path_404(server):
    """Caminho desconhecido devolve 404 Not Found."""
    resp = requests.get(_url(server, "/unknown"), timeout=5)
    assert resp.status_code == 404
    assert resp.text == "Not Found"


@pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD", "BREW"])
def test_non_get_methods_405(server, method):
    """Qualquer método diferente de GET devolve 405 com corpo vazio."""
    resp = requests.request(method, _url(server, "/metrics"), timeout=5)
    assert resp.status_code == 405
    assert resp.content == b""


def test_all_collectors_failing_still_200(registry):
    """Mesmo com todos os coletores falhando, /metrics responde 200 vazio e /healthz segue OK."""
    reg = CollectorRegistry()
    reg.register(lambda: 1 / 0)
    reg.register(lambda: [][1])
    with ScrapeServer(reg, port=0, addr="127.0.0.1") as srv:
        resp = requests.get(_url(srv, "/metrics"), timeout=5)
        assert resp.status_code == 200
        assert resp.text == ""
        assert requests.get(_url(srv, "/healthz"), timeout=5).text == "OK"


def test_response_build_error_returns_500_and_loop_survives(registry, monkeypatch, caplog):
    """Erro ao montar a resposta vira 500 e o servidor continua atendendo."""
    caplog.set_level(logging.INFO)
    calls = {"n": 0}
    original = registry.collect_all

    def flaky():
        calls["n"] += 1
        if calls["n"] == 1:
            raise RuntimeError("encoder quebrou")
        return original()

    monkeypatch.setattr(registry, "collect_all", flaky)
    with ScrapeServer(registry, port=0, addr="127.0.0.1") as srv:
        first = requests.get(_url(srv, "/metrics"), timeout=5)
        second = requests.get(_url(srv, "/metrics"), timeout=5)
    assert first.status_code == 500
    assert second.status_code == 200
    assert any("encoder quebrou" in r.getMessage() for r in caplog.records)


def test_access_lines_logged(server, caplog):
    """Cada requisição gera uma linha de acesso '<remote> "<method> <path>" <status>'."""
    caplog.set_level(logging.INFO)
    requests.get(_url(server, "/healthz"), timeout=5)
    requests.post(_url(server, "/metrics"), timeout=5)
    messages = [r.getMessage() for r in caplog.records]
    assert '127.0.0.1 "GET /healthz" 200' in messages
    assert '127.0.0.1 "POST /metrics" 405' in messages


def test_state_transitions(registry):
    """STOPPED -> LISTENING -> STOPPED; stop é idempotente."""
    srv = ScrapeServer(registry, port=0, addr="127.0.0.1")
    assert srv.state is ServerState.STOPPED
    srv.start_in_thread()
    assert srv.state is ServerState.LISTENING
    assert srv.port != 0
    srv.stop()
    assert srv.state is ServerState.STOPPED
    srv.stop()


def test_bind_error_propagates(registry):
    """Porta ocupada: start() propaga o erro e o estado fica STOPPED."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(1)
    try:
        srv = ScrapeServer(registry, port=sock.getsockname()[1], addr="127.0.0.1")
        with pytest.raises(OSError):
            srv.start()
        assert srv.state is ServerState.STOPPED
    finally:
        sock.close()


def test_start_logs_bind_address(registry, caplog):
    """start() registra o endereço de bind."""
    caplog.set_level(logging.INFO)
    srv = ScrapeServer(registry, port=0, addr="127.0.0.1")
    srv.start()
    try:
        assert any(f"http://127.0.0.1:{srv.port}" in r.getMessage() for r in caplog.records)
    finally:
        srv.stop()


def test_threaded_server_serves_scrapes(registry):
    """Modo multi-thread atende scrapes com a mesma saída."""
    with ScrapeServer(registry, port=0, addr="127.0.0.1", threaded=True) as srv:
        bodies = {requests.get(_url(srv, "/metrics"), timeout=5).text for _ in range(3)}
    assert len(bodies) == 1
    assert bodies.pop().endswith('dummy_metric{source="test"} 1')
