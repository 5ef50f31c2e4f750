"""The event loop that accepts clients, reads requests and sends responses."""

import selectors
import socket
from dataclasses import dataclass

from webserv.request import HttpRequest
from webserv.response import build_response

SEND_SIZE = 1000
MAX_CLIENTS = 5
BUFFER_SIZE = 100000
LISTEN_ADDRESS = "0.0.0.0"


@dataclass
class _Client:
    sock: socket.socket
    address: tuple
    request: HttpRequest
    outgoing: bytes = b""


class Server:
    """Serves every configured server block on its port."""

    def __init__(self, servers, max_clients: int = MAX_CLIENTS):
        self.servers = servers
        self.max_clients = max_clients
        self._selector = selectors.DefaultSelector()
        self._listeners: list[socket.socket] = []
        self._clients: dict[socket.socket, _Client] = {}

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def unique_ports(self) -> list[int]:
        """Return each configured port once, in server order."""
        ports: list[int] = []
        for key in sorted(self.servers):
            port = self.servers[key].port
            if port not in ports:
                ports.append(port)
        return ports

    def open_listeners(self) -> list[int]:
        """Bind and listen on every unique port; return the ports."""
        ports = self.unique_ports()
        for port in ports:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP)
            try:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
                sock.bind((LISTEN_ADDRESS, port))
                sock.listen(self.max_clients)
                sock.setblocking(False)
            except OSError:
                sock.close()
                self.close()
                raise
            self._selector.register(sock, selectors.EVENT_READ, data=None)
            self._listeners.append(sock)
            print(f"socket has opened on port {port}")
        return ports

    def serve_once(self, timeout=None) -> int:
        """Wait for activity once and handle it; return the number of events."""
        events = self._selector.select(timeout)
        for key, mask in events:
            if key.data is None:
                self._accept(key.fileobj)
            elif key.data.sock not in self._clients:
                continue
            elif mask & selectors.EVENT_READ:
                self._read(key.data)
            elif mask & selectors.EVENT_WRITE:
                self._write(key.data)
        return len(events)

    def serve_forever(self) -> None:
        """Handle requests until interrupted."""
        while True:
            self.serve_once(None)

    def close(self) -> None:
        """Close every client and listening socket."""
        for client in list(self._clients.values()):
            self._drop(client)
        for sock in self._listeners:
            try:
                self._selector.unregister(sock)
            except (KeyError, ValueError):
                pass
            sock.close()
        self._listeners.clear()

    def _accept(self, listener: socket.socket) -> None:
        try:
            conn, address = listener.accept()
        except OSError:
            return
        if len(self._clients) >= self.max_clients:
            conn.close()
            return
        conn.setblocking(False)
        request = HttpRequest(fd=conn.fileno(), client_ip=address[0])
        client = _Client(sock=conn, address=address, request=request)
        self._clients[conn] = client
        self._selector.register(conn, selectors.EVENT_READ, data=client)

    def _read(self, client: _Client) -> None:
        try:
            data = client.sock.recv(BUFFER_SIZE)
        except BlockingIOError:
            return
        except OSError:
            self._drop(client)
            return
        if not data:
            self._drop(client)
            return
        if not client.request.feed(data):
            return
        try:
            response = build_response(client.request, self.servers)
        except LookupError:
            self._drop(client)
            return
        client.outgoing = response.encode("latin-1", errors="replace")
        self._selector.modify(client.sock, selectors.EVENT_WRITE, data=client)

    def _write(self, client: _Client) -> None:
        chunk = client.outgoing[:SEND_SIZE]
        if not chunk:
            self._drop(client)
            return
        try:
            sent = client.sock.send(chunk)
        except BlockingIOError:
            return
        except OSError:
            self._drop(client)
            return
        if sent == 0:
            self._drop(client)
            return
        client.outgoing = client.outgoing[sent:]
        if not client.outgoing:
            ip, port = client.address[0], client.address[1]
            print(f"Host disconnected, ip {ip} , port {port}")
            self._drop(client)

    def _drop(self, client: _Client) -> None:
        try:
            self._selector.unregister(client.sock)
        except (KeyError, ValueError):
            pass
        client.sock.close()
        self._clients.pop(client.sock, None)