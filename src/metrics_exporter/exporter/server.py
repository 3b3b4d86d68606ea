"""Servidor HTTP de scrape: expõe ``/metrics`` e ``/healthz``.

Cada requisição GET em ``/`` ou ``/metrics`` dispara um ciclo completo de
coleta no ``CollectorRegistry``. Por padrão as requisições são atendidas
em sequência (uma de cada vez); ``threaded=True`` usa uma thread por
conexão.

Observação:
    O endpoint pode expor informações sensíveis do host. Proteja o acesso
    com firewall ou redes privadas quando necessário.
"""

import threading
from enum import Enum
from http.server import BaseHTTPRequestHandler, HTTPServer, ThreadingHTTPServer
from urllib.parse import urlsplit

from .encoder import CONTENT_TYPE
from .registry import CollectorRegistry
from ..system.logs import HTTP_TAG, LogSink

DEFAULT_PORT = 9700
DEFAULT_ADDR = "0.0.0.0"  # nosec B104

METRICS_PATHS = ("/", "/metrics")
HEALTH_PATH = "/healthz"


class ServerState(str, Enum):
    STOPPED = "stopped"
    LISTENING = "listening"


class ScrapeRequestHandler(BaseHTTPRequestHandler):
    """Handler HTTP: roteia por método e caminho.

    Qualquer método diferente de GET responde 405 (ver ``__getattr__``).
    """

    server_version = "metrics-exporter"

    def do_GET(self):
        """Trata GET em ``/``, ``/metrics`` e ``/healthz``; demais caminhos 404."""
        try:
            status, content_type, body = self._build_response(urlsplit(self.path).path)
        except Exception as exc:
            self.server.sink.error(f"Erro ao montar resposta para {self.path}: {exc}", tag=HTTP_TAG, exc_info=exc)
            status, content_type, body = 500, "text/plain", b""
        self._send(status, content_type, body)

    def _build_response(self, path: str):
        if path in METRICS_PATHS:
            text = self.server.registry.collect_all()
            return 200, CONTENT_TYPE, text.encode("utf-8")
        if path == HEALTH_PATH:
            return 200, "text/plain", b"OK"
        return 404, "text/plain", b"Not Found"

    def _method_not_allowed(self):
        self._send(405, None, b"")

    def __getattr__(self, name):
        # BaseHTTPRequestHandler procura do_<MÉTODO>; todo método não-GET vira 405
        if name.startswith("do_"):
            return self._method_not_allowed
        raise AttributeError(name)

    def _send(self, status: int, content_type: str | None, body: bytes) -> None:
        self.send_response(status)
        if content_type:
            self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if body and self.command != "HEAD":
            self.wfile.write(body)

    def log_request(self, code="-", size="-"):
        """Registra uma linha de acesso por requisição no sink."""
        status = getattr(code, "value", code)
        raw_path = getattr(self, "path", "") or ""
        path = urlsplit(raw_path).path
        self.server.sink.access(self.address_string(), getattr(self, "command", None) or "-", path, status)

    def log_message(self, format, *args):
        """Mensagens internas do BaseHTTPRequestHandler vão para o sink em debug."""
        import logging

        self.server.sink.write(format % args, tag=HTTP_TAG, level=logging.DEBUG)


class _ScrapeHTTPServer(HTTPServer):
    # falhas que escapam do handler não derrubam o loop; apenas são registradas
    def handle_error(self, request, client_address):
        import sys

        exc = sys.exc_info()[1]
        self.sink.error(f"Erro ao atender {client_address}: {exc}", tag=HTTP_TAG, exc_info=True)


class _ThreadingScrapeHTTPServer(ThreadingHTTPServer, _ScrapeHTTPServer):
    pass


class ScrapeServer:
    """Ciclo de vida do listener HTTP: ``STOPPED -> LISTENING -> STOPPED``."""

    def __init__(
        self,
        registry: CollectorRegistry,
        port: int = DEFAULT_PORT,
        addr: str = DEFAULT_ADDR,
        sink: LogSink | None = None,
        threaded: bool = False,
    ):
        self.registry = registry
        self.addr = addr
        self._port = int(port)
        self.sink = sink or registry.sink
        self.threaded = threaded
        self.state = ServerState.STOPPED
        self._httpd: HTTPServer | None = None
        self._thread: threading.Thread | None = None
        self._serving = False

    @property
    def port(self) -> int:
        """Porta efetiva (após ``start()`` reflete a porta efêmera quando 0)."""
        if self._httpd is not None:
            return self._httpd.server_address[1]
        return self._port

    def start(self) -> None:
        """Faz o bind do socket e passa para LISTENING.

        Erros de bind (porta em uso, permissão) são propagados e o estado
        permanece STOPPED.
        """
        if self.state is ServerState.LISTENING:
            return
        server_cls = _ThreadingScrapeHTTPServer if self.threaded else _ScrapeHTTPServer
        httpd = server_cls((self.addr, self._port), ScrapeRequestHandler)  # nosec
        httpd.registry = self.registry
        httpd.sink = self.sink
        self._httpd = httpd
        self.state = ServerState.LISTENING
        self.sink.write(
            f"Servindo métricas em http://{self.addr}:{self.port} (/metrics, {HEALTH_PATH})",
            tag=HTTP_TAG,
        )

    def serve_forever(self, poll_interval: float = 0.5) -> None:
        """Loop de atendimento; retorna quando ``stop()`` for chamado."""
        if self._httpd is None:
            self.start()
        self._serving = True
        try:
            self._httpd.serve_forever(poll_interval=poll_interval)
        finally:
            self._serving = False

    def start_in_thread(self) -> threading.Thread:
        """Inicia o servidor e atende requisições numa thread daemon."""
        self.start()
        self._serving = True
        self._thread = threading.Thread(target=self.serve_forever, name="scrape-server", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self) -> None:
        """Encerra o loop e fecha o socket. Idempotente."""
        httpd = self._httpd
        if httpd is None:
            return
        if self._serving:
            httpd.shutdown()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None
        httpd.server_close()
        self._httpd = None
        self.state = ServerState.STOPPED
        self.sink.write("Servidor de métricas encerrado", tag=HTTP_TAG)

    def __enter__(self):
        self.start_in_thread()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()
