"""Choosing the server block and location that serve a request."""

from dataclasses import dataclass

from webserv.config import ServerConfig
from webserv.directives import Directives
from webserv.fsutils import find_index_of_max, find_position, longest_common_prefix


@dataclass
class Resolution:
    """Where a request is served from."""

    server: ServerConfig
    location: Directives
    location_path: str
    serve_root: str
    has_default_location: bool


def match_server_name(candidates: list[ServerConfig], host: str) -> ServerConfig:
    """Pick among servers sharing a port by listen value or server name."""
    for server in candidates:
        if server.listen == host:
            return server
    positions = [
        server.server_name.index(host) if host in server.server_name else -1
        for server in candidates
    ]
    position = find_position(positions)
    if position != -1:
        return candidates[position]
    prefixes = [longest_common_prefix(host, server.server_name) for server in candidates]
    return candidates[find_index_of_max(prefixes)]


def find_server(servers: dict[int, ServerConfig], port: int, host: str) -> ServerConfig:
    """Return the server block that should answer a request on ``port``."""
    same_port = [servers[key] for key in sorted(servers) if servers[key].port == port]
    if not same_port:
        raise LookupError(f"no server listens on port {port}")
    if len(same_port) == 1:
        return same_port[0]
    return match_server_name(same_port, host)


def _location_for(server: ServerConfig, path: str):
    return next((loc for loc_path, loc in server.locations if loc_path == path), None)


def find_location(server: ServerConfig, route: str) -> tuple[str, Directives]:
    """Return the location path and directives that match ``route``.

    The route is shortened one path segment at a time until a declared
    location matches; otherwise ``/`` or the server block itself is used.
    """
    current = route
    while "/" in current:
        location = _location_for(server, current)
        if location is not None:
            return current, location
        current = current[:current.rfind("/")]
    default = _location_for(server, "/")
    return "/", default if default is not None else server


def build_serve_root(route: str, location_path: str, root: str) -> str:
    """Map ``route`` under ``location_path`` onto the filesystem ``root``."""
    if location_path not in route:
        return ""
    rest = route[len(location_path):]
    if not rest.startswith("/"):
        rest = "/" + rest
    return root + rest


def resolve(servers: dict[int, ServerConfig], request) -> Resolution:
    """Find server, location and file path for a parsed request."""
    server = find_server(servers, request.port, request.host)
    has_default = _location_for(server, "/") is not None
    location_path, location = find_location(server, request.route)
    return Resolution(
        server=server,
        location=location,
        location_path=location_path,
        serve_root=build_serve_root(request.route, location_path, location.root),
        has_default_location=has_default,
    )