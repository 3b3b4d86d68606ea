from types import SimpleNamespace

from metrics_exporter.collectors import system as system_mod
from metrics_exporter.exporter.registry import Diagnostic
from metrics_exporter.exporter.sample import MetricSample


def _fake_psutil(monkeypatch, disk_error=None):
    monkeypatch.setattr(system_mod.psutil, "cpu_percent", lambda interval=None: 10.0)
    monkeypatch.setattr(system_mod.psutil, "virtual_memory", lambda: SimpleNamespace(percent=42.0))

    def disk_usage(path):
        if disk_error and path == "/broken":
            raise disk_error
        return SimpleNamespace(percent=55.5)

    monkeypatch.setattr(system_mod.psutil, "disk_usage", disk_usage)


def test_system_metrics_with_load(monkeypatch):
    """Com getloadavg disponível, emite as três janelas de load."""
    _fake_psutil(monkeypatch)
    monkeypatch.setattr(system_mod.os, "getloadavg", lambda: (0.5, 1.0, 1.5), raising=False)
    out = list(system_mod.collect_system_metrics(["/"]))
    rendered = [s.render() for s in out]
    assert rendered == [
        "host_cpu_percent 10",
        "host_memory_percent 42",
        'host_disk_percent{mountpoint="/"} 55.5',
        'host_load_average{period="1m"} 0.5',
        'host_load_average{period="5m"} 1',
        'host_load_average{period="15m"} 1.5',
    ]


def test_system_metrics_without_load(monkeypatch):
    """Sem getloadavg (ex.: Windows) não há amostras de load."""
    _fake_psutil(monkeypatch)
    monkeypatch.delattr(system_mod.os, "getloadavg", raising=False)
    names = {s.name for s in system_mod.collect_system_metrics(["/"])}
    assert "host_load_average" not in names


def test_unreadable_mountpoint_becomes_diagnostic(monkeypatch):
    """Ponto de montagem ilegível vira Diagnostic; os demais seguem."""
    _fake_psutil(monkeypatch, disk_error=OSError("sem acesso"))
    monkeypatch.delattr(system_mod.os, "getloadavg", raising=False)
    out = list(system_mod.collect_system_metrics(["/broken", "/"]))
    diags = [o for o in out if isinstance(o, Diagnostic)]
    assert len(diags) == 1
    assert "/broken" in str(diags[0])
    disks = [o for o in out if isinstance(o, MetricSample) and o.name == "host_disk_percent"]
    assert [d.labels for d in disks] == [{"mountpoint": "/"}]
