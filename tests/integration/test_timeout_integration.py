"""
Integration tests against real local sockets.

A listening socket that never accepts completes the TCP handshake but
never answers, so only the effective timeout can end the call. Scripted
servers send a valid status line and headers, then stall or trickle the
body, so the timeout has to fire while the body is being read.
"""

import socket
import threading
import time

import pytest

from vane import Client, ConfigBuilder
from vane.core.exceptions import ConnectionError, NetworkError, TimeoutError

pytestmark = pytest.mark.integration

BODY_HEADERS = b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nContent-Length: 100\r\n\r\n"


def _read_request_head(conn):
    data = b""
    while b"\r\n\r\n" not in data:
        chunk = conn.recv(4096)
        if not chunk:
            break
        data += chunk


@pytest.fixture
def scripted_server():
    """
    Фабрика локальных серверов: handler(conn, stop) получает соединение
    после прочтения заголовков запроса.
    """
    stop = threading.Event()
    sockets = []

    def start(handler):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.bind(("127.0.0.1", 0))
        sock.listen(16)
        sock.settimeout(0.1)
        sockets.append(sock)

        def serve_one(conn):
            with conn:
                try:
                    _read_request_head(conn)
                    handler(conn, stop)
                except OSError:
                    # клиент закрыл соединение по таймауту
                    pass

        def accept_loop():
            while not stop.is_set():
                try:
                    conn, _ = sock.accept()
                except socket.timeout:
                    continue
                except OSError:
                    return
                threading.Thread(target=serve_one, args=(conn,), daemon=True).start()

        threading.Thread(target=accept_loop, daemon=True).start()
        host, port = sock.getsockname()
        return f"http://{host}:{port}"

    yield start

    stop.set()
    for sock in sockets:
        sock.close()


def stalled_body(conn, stop):
    """Заголовки и 3 байта из обещанных 100, потом тишина."""
    conn.sendall(BODY_HEADERS + b"abc")
    stop.wait(10)


def trickled_body(conn, stop):
    """Тело по одному байту каждые 0.1 с: ни одно чтение не ждёт дольше таймаута."""
    conn.sendall(BODY_HEADERS)
    for _ in range(100):
        if stop.wait(0.1):
            return
        conn.sendall(b"x")


@pytest.fixture
def silent_server():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(64)
    host, port = sock.getsockname()
    yield f"http://{host}:{port}"
    sock.close()


@pytest.fixture
def closed_port():
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"http://127.0.0.1:{port}"


def test_timeout_against_silent_server(silent_server):
    config = ConfigBuilder().base_url(silent_server).timeout(0.2).build()

    with Client.create(config) as client:
        start = time.monotonic()
        with pytest.raises(TimeoutError) as exc_info:
            client.get("/never")
        elapsed = time.monotonic() - start

    assert exc_info.value.timeout == 0.2
    assert not isinstance(exc_info.value, NetworkError)
    assert elapsed < 2.0


def test_repeated_timeouts_stay_bounded(silent_server):
    """Каждый вызов прерывается по таймауту, без накопления задержки."""
    config = ConfigBuilder().base_url(silent_server).timeout(10).build()

    with Client.create(config) as client:
        durations = []
        for _ in range(5):
            start = time.monotonic()
            with pytest.raises(TimeoutError):
                client.request("/never").timeout(0.2).execute()
            durations.append(time.monotonic() - start)

    assert max(durations) < 2.0


def test_request_timeout_overrides_config(silent_server):
    config = ConfigBuilder().base_url(silent_server).timeout(30).build()

    with Client.create(config) as client:
        start = time.monotonic()
        with pytest.raises(TimeoutError):
            client.request("/never").timeout(0.2).execute()

    assert time.monotonic() - start < 2.0


def test_connection_refused(closed_port):
    with Client.create(ConfigBuilder().base_url(closed_port).timeout(2).build()) as client:
        with pytest.raises(ConnectionError):
            client.get("/x")


def test_httpx_transport_timeout(silent_server):
    pytest.importorskip("httpx")
    from vane.contrib.httpx_transport import HttpxTransport

    config = ConfigBuilder().base_url(silent_server).timeout(0.2).build()

    with Client.create(config, transport=HttpxTransport(config)) as client:
        with pytest.raises(TimeoutError):
            client.get("/never")


def test_timeout_while_body_stalls(scripted_server):
    """Таймаут чтения тела - это TimeoutError, а не ошибка соединения."""
    url = scripted_server(stalled_body)
    config = ConfigBuilder().base_url(url).timeout(0.3).build()

    with Client.create(config) as client:
        start = time.monotonic()
        with pytest.raises(TimeoutError) as exc_info:
            client.get("/x")
        elapsed = time.monotonic() - start

    assert exc_info.value.timeout == 0.3
    assert not isinstance(exc_info.value, NetworkError)
    assert elapsed < 2.0


def test_trickled_body_hits_total_deadline(scripted_server):
    url = scripted_server(trickled_body)
    config = ConfigBuilder().base_url(url).timeout(0.5).build()

    with Client.create(config) as client:
        start = time.monotonic()
        with pytest.raises(TimeoutError):
            client.get("/slow")
        elapsed = time.monotonic() - start

    # 100 байт по 0.1 с заняли бы 10 с
    assert elapsed < 3.0


def test_trickled_body_within_deadline_is_read(scripted_server):
    def short_trickle(conn, stop):
        conn.sendall(b"HTTP/1.1 200 OK\r\nContent-Length: 3\r\n\r\n")
        for byte in (b"a", b"b", b"c"):
            if stop.wait(0.05):
                return
            conn.sendall(byte)

    url = scripted_server(short_trickle)
    config = ConfigBuilder().base_url(url).timeout(5).build()

    with Client.create(config) as client:
        response = client.get("/short")

    assert response.status_code == 200
    assert response.body == b"abc"


@pytest.mark.parametrize("handler", [stalled_body, trickled_body], ids=["stalled", "trickled"])
def test_httpx_transport_body_deadline(scripted_server, handler):
    pytest.importorskip("httpx")
    from vane.contrib.httpx_transport import HttpxTransport

    url = scripted_server(handler)
    config = ConfigBuilder().base_url(url).timeout(0.5).build()

    with Client.create(config, transport=HttpxTransport(config)) as client:
        start = time.monotonic()
        with pytest.raises(TimeoutError):
            client.get("/x")
        elapsed = time.monotonic() - start

    assert elapsed < 3.0
