"""Reading the server configuration file into server blocks."""

import copy
from dataclasses import fields
from pathlib import Path

from webserv.config import ServerConfig
from webserv.directives import ConfigError, Directives

DEFAULT_CONFIG_PATH = "src/config/config.conf"

DIRECTIVE_NAMES: tuple[str, ...] = (
    "server_name",
    "listen",
    "root",
    "index",
    "autoindex",
    "error_page",
    "client_max_body_size",
    "cgi",
    "allow_methods",
    "return",
    "upload_path",
    "methods",
)

# Location blocks may not use the first two names (server_name, listen).
_LOCATION_START = 2
_SERVER_START = 0


def validate_directive(name: str, start: int) -> str:
    """Return ``name`` if it is a known directive from index ``start`` on."""
    if name not in DIRECTIVE_NAMES[start:]:
        raise ConfigError(f"invalid directive: {name}")
    return name


def check_parentheses(text: str) -> None:
    """Raise ConfigError unless every brace in ``text`` is balanced."""
    depth = 0
    for char in text:
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                raise ConfigError("Invalid parentheses: unexpected '}'")
    if depth != 0:
        raise ConfigError("Invalid parentheses")


def find_server_end(text: str) -> int:
    """Return the index of the brace that closes the first server block.

    A closing brace ends a server block when it is the last character or
    is followed by a space and the next ``server`` keyword.
    """
    last = len(text) - 1
    position = text.find("}")
    while position != -1 and position != last and text[position + 2:position + 3] != "s":
        position = text.find("}", position + 1)
    return last if position == -1 else position


def _values(tokens) -> list[str]:
    values = []
    for token in tokens:
        if token in DIRECTIVE_NAMES:
            raise ConfigError(f"Invalid syntax: unexpected '{token}'")
        values.append(token)
    return values


def _inherit(server: Directives) -> Directives:
    return Directives(
        **{f.name: copy.deepcopy(getattr(server, f.name)) for f in fields(Directives)}
    )


def make_location(block: str, server: ServerConfig) -> Directives:
    """Parse one ``location`` block and add it to ``server``."""
    location = _inherit(server)
    path = ""
    for fragment in block.split(";"):
        tokens = iter(fragment.split())
        for key in tokens:
            if key == "location":
                path = next(tokens, "")
                if "{" in path:
                    opener = "{"
                    path = path.replace("{", "", 1)
                else:
                    opener = next(tokens, "")
                if len(opener) != 1 and "{" in opener:
                    key = opener.replace("{", "", 1)
                else:
                    key = next(tokens, "")
            values = _values(tokens)
            if key in ("}", ""):
                continue
            validate_directive(key, _LOCATION_START)
            location.add_directive(key, values)
    if len(path) > 1 and path.endswith("/"):
        path = path[:-1]
    server.add_location(path, location)
    return location


def cut_locations(block: str, server: ServerConfig) -> str:
    """Parse every location block in ``block`` into ``server``.

    Returns the block with the location blocks removed.
    """
    start = block.find("location")
    if start != -1 and (start < 2 or block[start - 2] != ";"):
        raise ConfigError("Syntax error")
    while start != -1:
        end = block.find("}")
        if end == -1:
            raise ConfigError("Syntax error")
        make_location(block[start:end + 1], server)
        block = block[:start] + block[end + 1:]
        start = block.find("location")
    return block


def make_server(block: str) -> ServerConfig:
    """Parse one ``server`` block, locations included."""
    server = ServerConfig()
    rest = cut_locations(block, server)
    for fragment in rest.split(";"):
        tokens = iter(fragment.split())
        for key in tokens:
            if "{" in key:
                key = next(tokens, "")
            elif key == "server":
                key = next(tokens, "")
                if len(key) != 1 and "{" in key:
                    key = key.replace("{", "", 1)
                else:
                    key = next(tokens, "")
            values = _values(tokens)
            if key in ("}", ""):
                continue
            validate_directive(key, _SERVER_START)
            if key == "listen":
                server.set_listen(values)
            elif key == "server_name":
                server.set_server_name(values)
            else:
                server.add_directive(key, values)
    server.fill_locations()
    return server


def parse_config(text: str) -> dict[int, ServerConfig]:
    """Parse configuration text into server blocks numbered from 1."""
    tokens = text.split()
    if not tokens or tokens[0] not in ("server", "server{"):
        raise ConfigError("Not server")
    full = tokens[0] + " " + "".join(" " + token for token in tokens[1:])
    check_parentheses(full)
    servers: dict[int, ServerConfig] = {}
    while full:
        end = find_server_end(full)
        servers[len(servers) + 1] = make_server(full[:end + 1])
        full = full[end + 1:]
    return servers


def load_config(path=None) -> dict[int, ServerConfig]:
    """Read and parse the configuration file at ``path``."""
    target = Path(path) if path else Path(DEFAULT_CONFIG_PATH)
    try:
        text = target.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        raise ConfigError("Configuration file not found") from exc
    return parse_config(text)


def get_location(servers: dict[int, ServerConfig], number: int, path: str):
    """Return the location of server ``number`` declared for ``path``, or None."""
    for location_path, location in servers[number].locations:
        if location_path == path:
            return location
    return None