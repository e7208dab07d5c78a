"""
Concurrent calls through one shared client.
"""

import json
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor

from fixtures import Thing, make_client
from jsonwire.http import MockTransport, TransportResponse


def _marker_handler(method, url, headers, body):
    """Echo the item id from the URL back with a unique marker."""
    time.sleep(random.uniform(0, 0.005))
    item_id = int(url.rsplit("/", 1)[-1])
    payload = {"id": item_id, "name": f"marker-{item_id}-{headers.get('Accept')}"}
    return TransportResponse(status_code=200, content=json.dumps(payload).encode(), reason="OK")


def test_concurrent_gets_resolve_independently():
    n = 64
    transport = MockTransport()
    for i in range(n):
        if i % 5 == 0:
            transport.add("GET", f"/items/{i}", status=404, reason=f"Missing {i}")
        else:
            transport.add_handler("GET", f"/items/{i}", _marker_handler)
    client = make_client(transport)

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(lambda i: (i, client.get(f"/items/{i}", Thing)), range(n)))

    for i, thing in results:
        if i % 5 == 0:
            assert thing.failed
            assert thing.status == 404
            assert thing.message == f"Missing {i}"
        else:
            assert thing.succeeded
            assert thing.id == i
            assert thing.name == f"marker-{i}-application/json"
    assert len(transport.calls) == n


def test_concurrent_posts_keep_their_own_bodies():
    transport = MockTransport()

    def echo(method, url, headers, body):
        return TransportResponse(status_code=200, content=body, reason="OK")

    transport.add_handler("POST", "/echo", echo)
    client = make_client(transport)

    def call(i):
        return client.post("/echo", Thing, {"id": i, "name": f"body-{i}"})

    with ThreadPoolExecutor(max_workers=16) as pool:
        things = list(pool.map(call, range(50)))

    assert [t.id for t in things] == list(range(50))
    assert all(t.name == f"body-{t.id}" for t in things)


def test_configuration_changes_during_calls_are_never_torn():
    transport = MockTransport()
    seen: list[dict[str, str]] = []
    lock = threading.Lock()

    def record(method, url, headers, body):
        with lock:
            seen.append(headers)
        return TransportResponse(status_code=200, content=b'{"id": 1}', reason="OK")

    transport.add_handler("GET", "/cfg", record)
    client = make_client(transport)
    client.configure_authorization("Bearer", "v0")
    stop = threading.Event()

    def rotate_token():
        version = 0
        while not stop.is_set():
            version += 1
            client.configure_authorization("Bearer", f"v{version}")
            client.configure_default_header("X-Version", str(version))

    rotator = threading.Thread(target=rotate_token)
    rotator.start()
    try:
        with ThreadPoolExecutor(max_workers=8) as pool:
            things = list(pool.map(lambda _: client.get("/cfg", Thing), range(200)))
    finally:
        stop.set()
        rotator.join()

    assert all(t.succeeded for t in things)
    for headers in seen:
        assert headers["Accept"] == "application/json"
        assert headers["Authorization"].startswith("Bearer v")


def test_snapshot_is_not_affected_by_later_configuration(client):
    client.configure_default_header("X-Tenant", "a")
    before = client.handle.snapshot()

    client.configure_default_header("X-Tenant", "b")
    client.configure_authorization("Bearer", "late")

    assert before.headers["X-Tenant"] == "a"
    assert before.authorization is None
    assert client.handle.snapshot().headers["X-Tenant"] == "b"
