"""Fluxo ponta a ponta: bootstrap -> servidor -> scrape -> parser Prometheus."""

import requests
from prometheus_client.parser import text_string_to_metric_families

from metrics_exporter import CollectorRegistry, Diagnostic, MetricDescriptor, MetricSample, ScrapeServer
from metrics_exporter.core.core import build_registry


def test_end_to_end_scrape_with_failing_collector():
    """Coletores ok aparecem no scrape; o que falha some sem quebrar a resposta."""
    jobs = MetricDescriptor("jobs_pending", "gauge", "Jobs pendentes\npor fila", ["queue"])
    runs = MetricDescriptor("runs", "counter", "Execuções")

    reg = CollectorRegistry()
    reg.register(lambda: [MetricSample(jobs, 3, ["default"]), MetricSample(jobs, 0, ['lenta "x"'])])
    reg.register(lambda: (_ for _ in ()).throw(RuntimeError("fonte fora do ar")))
    reg.register(lambda: [Diagnostic("coletor de runs ok"), MetricSample(runs, 17)])

    with ScrapeServer(reg, port=0, addr="127.0.0.1") as srv:
        resp = requests.get(f"http://127.0.0.1:{srv.port}/metrics", timeout=5)

    assert resp.status_code == 200
    families = list(text_string_to_metric_families(resp.text + "\n"))
    by_type = {f.type: f for f in families}
    gauge = by_type["gauge"]
    assert gauge.documentation == "Jobs pendentes por fila"
    assert [(s.labels["queue"], s.value) for s in gauge.samples] == [("default", 3.0), ('lenta "x"', 0.0)]
    assert by_type["counter"].samples[0].value == 17.0


def test_builtin_collectors_expose_parseable_document():
    """Registry montado pelo bootstrap com os coletores embutidos gera exposição válida."""
    reg = build_registry(["process", "system"])
    with ScrapeServer(reg, port=0, addr="127.0.0.1") as srv:
        health = requests.get(f"http://127.0.0.1:{srv.port}/healthz", timeout=5)
        resp = requests.get(f"http://127.0.0.1:{srv.port}/", timeout=5)
    assert health.status_code == 200 and health.text == "OK"
    names = {f.name for f in text_string_to_metric_families(resp.text + "\n")}
    assert {"process_cpu_percent", "host_memory_percent"} <= names
