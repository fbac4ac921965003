"""
Unit tests for the per-endpoint prober.
"""

import threading

import httpx

from api_health_exporter.errors import ProbeFailure
from api_health_exporter.metrics.registry import HealthMetrics
from api_health_exporter.monitoring.prober import EndpointProber, probe_url


class SpyMetrics(HealthMetrics):
    def __init__(self):
        super().__init__()
        self.writes = []

    def set_status(self, name, address, value):
        self.writes.append((name, address, value))
        super().set_status(name, address, value)


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def _refuse(request):
    raise httpx.ConnectError("connection refused", request=request)


def _start(prober):
    thr = threading.Thread(target=prober.run, daemon=True)
    thr.start()
    return thr


def test_probe_url():
    assert probe_url("1.2.3.4") == "https://1.2.3.4:6443"


def test_probe_once_any_response_is_healthy(metrics):
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(401)

    prober = EndpointProber("svc1", "1.2.3.4", metrics, threading.Event(), client=_client(handler))

    result = prober.probe_once()

    assert result.healthy
    assert result.status_code == 401
    assert result.value == 1
    assert seen == ["https://1.2.3.4:6443"]


def test_probe_once_transport_error_is_unhealthy(metrics):
    prober = EndpointProber("svc1", "1.2.3.4", metrics, threading.Event(), client=_client(_refuse))

    result = prober.probe_once()

    assert not result.healthy
    assert result.value == 0
    assert isinstance(result.error, ProbeFailure)
    assert result.error.name == "svc1"
    assert isinstance(result.error.cause, httpx.ConnectError)


def test_probe_once_timeout_is_unhealthy(metrics):
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    prober = EndpointProber("svc1", "1.2.3.4", metrics, threading.Event(), client=_client(handler))

    assert not prober.probe_once().healthy


def test_run_records_unhealthy_then_removes_on_cancel(metrics, wait_until):
    cancel = threading.Event()
    prober = EndpointProber("svc1", "1.2.3.4", metrics, cancel, interval=0.01, client=_client(_refuse))

    thr = _start(prober)
    assert wait_until(lambda: metrics.get_status("svc1", "1.2.3.4") == 0.0)

    cancel.set()
    thr.join(2)

    assert not thr.is_alive()
    assert metrics.get_status("svc1", "1.2.3.4") is None


def test_run_recovers_from_failure_without_restart(metrics, wait_until):
    calls = []

    def flaky(request):
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200)

    spy = SpyMetrics()
    cancel = threading.Event()
    prober = EndpointProber("svc1", "1.2.3.4", spy, cancel, interval=0.01, client=_client(flaky))

    thr = _start(prober)
    assert wait_until(lambda: spy.get_status("svc1", "1.2.3.4") == 1.0)
    cancel.set()
    thr.join(2)

    values = [value for _, _, value in spy.writes]
    assert values[0] == 0
    assert 1 in values


def test_cancel_before_first_tick_never_probes(metrics):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200)

    cancel = threading.Event()
    cancel.set()
    prober = EndpointProber("svc1", "1.2.3.4", metrics, cancel, interval=0.01, client=_client(handler))

    prober.run()

    assert calls == []
    assert metrics.snapshot() == {}


def test_no_write_after_cancel_during_inflight_probe(wait_until):
    in_flight = threading.Event()
    release = threading.Event()

    def slow(request):
        in_flight.set()
        release.wait(2)
        return httpx.Response(200)

    spy = SpyMetrics()
    cancel = threading.Event()
    prober = EndpointProber("svc1", "1.2.3.4", spy, cancel, interval=0.01, client=_client(slow))

    thr = _start(prober)
    assert in_flight.wait(2)
    cancel.set()
    release.set()
    thr.join(2)

    assert not thr.is_alive()
    assert spy.writes == []
    assert spy.snapshot() == {}


def test_run_closes_client(metrics):
    client = _client(lambda request: httpx.Response(200))
    cancel = threading.Event()
    cancel.set()

    EndpointProber("svc1", "1.2.3.4", metrics, cancel, client=client).run()

    assert client.is_closed


def test_probe_url_brackets_ipv6():
    assert probe_url("2001:db8::1") == "https://[2001:db8::1]:6443"
    assert probe_url("api.example.internal") == "https://api.example.internal:6443"


def test_ipv6_endpoint_is_probed(metrics, wait_until):
    seen = []

    def handler(request):
        seen.append(request.url.host)
        return httpx.Response(200)

    cancel = threading.Event()
    prober = EndpointProber("svc6", "2001:db8::1", metrics, cancel, interval=0.01, client=_client(handler))

    thr = _start(prober)
    assert wait_until(lambda: metrics.get_status("svc6", "2001:db8::1") == 1.0)
    cancel.set()
    thr.join(2)

    assert seen[0] == "2001:db8::1"
    assert metrics.get_status("svc6", "2001:db8::1") is None


def test_malformed_address_is_unhealthy_and_prober_keeps_running(metrics, wait_until):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200)

    cancel = threading.Event()
    prober = EndpointProber("bad", "1.2.3.4:99999", metrics, cancel, interval=0.01, client=_client(handler))

    result = prober.probe_once()
    assert not result.healthy
    assert isinstance(result.error.cause, httpx.InvalidURL)

    thr = _start(prober)
    assert wait_until(lambda: metrics.get_status("bad", "1.2.3.4:99999") == 0.0)
    assert thr.is_alive()
    cancel.set()
    thr.join(2)

    assert calls == []
    assert not thr.is_alive()
