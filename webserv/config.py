"""Server block configuration."""

import re
from dataclasses import dataclass, field

from webserv.directives import ConfigError, Directives

_ALLOWED_HOSTS = frozenset({"127.0.0.1", "0.0.0.0", "localhost"})
_MIN_PORT = 1024
_MAX_PORT = 49151
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _check_host(host: str) -> None:
    if host not in _ALLOWED_HOSTS:
        raise ConfigError("failed to bind")


def _check_port(port: int) -> None:
    if not _MIN_PORT <= port <= _MAX_PORT:
        raise ConfigError("failed port")


@dataclass
class ServerConfig(Directives):
    """A server block: its directives, listen address and locations."""

    server_name: list[str] = field(default_factory=list)
    listen: str = ""
    host: str = "0.0.0.0"
    port: int = 8000
    locations: list[tuple[str, Directives]] = field(default_factory=list)

    def add_location(self, path: str, location: Directives) -> None:
        """Append a location block for ``path``."""
        self.locations.append((path, location))

    def set_listen(self, values: list[str]) -> None:
        """Set the listen address and derive host and port from it."""
        if not values:
            raise ConfigError("Invalid syntax: 'listen' needs a value")
        self.listen = values[0]
        self._parse_listen()

    def _parse_listen(self) -> None:
        listen = self.listen
        host, sep, port = listen.partition(":")
        if sep:
            self.host = host
            _check_host(host)
            self.port = _atoi(port)
            _check_port(self.port)
        elif "." in listen:
            self.host = listen
            _check_host(listen)
        else:
            if listen == "localhost":
                self.host = "127.0.0.1"
            number = _atoi(listen)
            if number != 0:
                self.port = number
                _check_port(number)

    def set_server_name(self, values: list[str]) -> None:
        """Set the names this server answers to."""
        self.server_name = list(values)

    def fill_locations(self) -> None:
        """Let each location inherit server settings it leaves unset."""
        for _, loc in self.locations:
            if loc.autoindex in ("", "off"):
                loc.autoindex = self.autoindex
            if loc.root in ("", "www"):
                loc.root = self.root
            if not loc.index:
                loc.index = list(self.index)
            if not loc.client_max_body_size:
                loc.client_max_body_size = self.client_max_body_size
            if not loc.methods:
                loc.methods = list(self.methods)
            if loc.upload_path in ("", "www"):
                loc.upload_path = self.upload_path
            if not loc.error_page:
                loc.error_page = list(self.error_page)
            if not loc.cgi:
                loc.cgi = list(self.cgi)

    def describe(self) -> str:
        """Return a human-readable dump of the server block."""
        lines = [
            "------- Config members -------",
            f"listen: {self.listen}",
            f"host: {self.host}",
            f"port: {self.port}",
            f"server_name: {' '.join(self.server_name)}",
            *self._describe_body(),
        ]
        return "\n".join(lines) + "\n"