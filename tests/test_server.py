import socket

import pytest

from webserv.config import ServerConfig
from webserv.response import DEFAULT_HTML
from webserv.server import Server


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("0.0.0.0", 0))
        return sock.getsockname()[1]


def _config(port: int) -> ServerConfig:
    config = ServerConfig()
    config.port = port
    return config


def _exchange(server, port, payload):
    client = socket.create_connection(("127.0.0.1", port))
    client.sendall(payload)
    client.setblocking(False)
    received = b""
    try:
        for _ in range(200):
            server.serve_once(0.05)
            try:
                chunk = client.recv(65536)
            except BlockingIOError:
                continue
            if not chunk:
                return received
            received += chunk
    finally:
        client.close()
    raise AssertionError("server did not close the connection")


def _get(path, port):
    return f"GET {path} HTTP/1.1\r\nHost: localhost:{port}\r\n\r\n".encode()


@pytest.fixture
def running(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    port = _free_port()
    server = Server({1: _config(port)})
    server.open_listeners()
    yield server, port
    server.close()


def test_unique_ports_keeps_first_occurrence_order():
    server = Server({1: _config(8080), 2: _config(8081), 3: _config(8080)})
    assert server.unique_ports() == [8080, 8081]


def test_open_listeners_returns_ports(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    port = _free_port()
    with Server({1: _config(port), 2: _config(port)}) as server:
        assert server.open_listeners() == [port]


def test_root_without_files_serves_default_page(running):
    server, port = running
    response = _exchange(server, port, _get("/", port)).decode("latin-1")
    assert response.startswith("HTTP/1.1 200 OK\n")
    assert response.endswith(DEFAULT_HTML)


def test_serves_file_contents(running, tmp_path):
    server, port = running
    (tmp_path / "www").mkdir()
    (tmp_path / "www" / "hello.txt").write_text("hello")
    response = _exchange(server, port, _get("/hello.txt", port)).decode("latin-1")
    assert "Content-Type: text/plain\n" in response
    assert response.endswith("\n\nhello")


def test_large_response_arrives_whole(running, tmp_path):
    server, port = running
    (tmp_path / "www").mkdir()
    body = "x" * 5000
    (tmp_path / "www" / "big.txt").write_text(body)
    response = _exchange(server, port, _get("/big.txt", port)).decode("latin-1")
    assert response.endswith("\n\n" + body)
    assert "Content-Length: 5000\n" in response


def test_missing_file_is_404(running):
    server, port = running
    response = _exchange(server, port, _get("/missing", port)).decode("latin-1")
    assert response.startswith("HTTP/1.1 404 Not Found\n")


def test_request_sent_in_pieces(running):
    server, port = running
    client = socket.create_connection(("127.0.0.1", port))
    client.sendall(b"GET / HTTP/1.1\r\nHo")
    for _ in range(5):
        server.serve_once(0.05)
    client.sendall(f"st: localhost:{port}\r\n\r\n".encode())
    client.setblocking(False)
    received = b""
    for _ in range(200):
        server.serve_once(0.05)
        try:
            chunk = client.recv(65536)
        except BlockingIOError:
            continue
        if not chunk:
            break
        received += chunk
    client.close()
    assert received.decode("latin-1").endswith(DEFAULT_HTML)


def test_disconnected_client_does_not_stop_server(running):
    server, port = running
    early = socket.create_connection(("127.0.0.1", port))
    early.close()
    for _ in range(5):
        server.serve_once(0.05)
    response = _exchange(server, port, _get("/", port)).decode("latin-1")
    assert response.startswith("HTTP/1.1 200 OK\n")


def test_extra_client_is_refused_when_full(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    port = _free_port()
    with Server({1: _config(port)}, max_clients=1) as server:
        server.open_listeners()
        first = socket.create_connection(("127.0.0.1", port))
        server.serve_once(0.2)
        second = socket.create_connection(("127.0.0.1", port))
        server.serve_once(0.2)
        second.settimeout(2)
        try:
            assert second.recv(10) == b""
        finally:
            first.close()
            second.close()


def test_serve_once_without_activity_returns_zero(running):
    server, _ = running
    assert server.serve_once(0) == 0


def test_close_stops_listening(running):
    server, port = running
    server.close()
    with pytest.raises(ConnectionRefusedError):
        socket.create_connection(("127.0.0.1", port), timeout=2)