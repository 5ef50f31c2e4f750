"""Per-location configuration directives."""

from dataclasses import dataclass, field


class ConfigError(ValueError):
    """Raised when a configuration value is invalid."""


def _default_methods() -> list[str]:
    return ["GET", "POST", "DELETE"]


def _first(name: str, values: list[str]) -> str:
    if not values:
        raise ConfigError(f"Invalid syntax: '{name}' needs a value")
    return values[0]


def _pair(name: str, values: list[str]) -> tuple[str, str]:
    if len(values) < 2:
        raise ConfigError(f"Invalid syntax: '{name}' needs two values")
    return values[0], values[1]


def _www_path(name: str, value: str) -> str:
    position = value.find("./")
    if position != -1:
        value = value[position + 2:]
    elif value.startswith("/"):
        value = value[1:]
    if not value.startswith("www"):
        raise ConfigError(f"Invalid syntax: '{name}' should start www")
    if len(value) > 3 and not value.startswith("www/"):
        raise ConfigError(f"Invalid syntax: '{name}' should start with www/")
    return value


@dataclass
class Directives:
    """Settings that apply to a server block or a location block."""

    autoindex: str = "off"
    index: list[str] = field(default_factory=list)
    root: str = "www"
    upload_path: str = "www"
    client_max_body_size: str = ""
    error_page: list[tuple[str, str]] = field(default_factory=list)
    methods: list[str] = field(default_factory=_default_methods)
    cgi: list[tuple[str, str]] = field(default_factory=list)
    redirect: str = ""

    def add_directive(self, name: str, values: list[str]) -> None:
        """Apply one directive; unknown names are ignored."""
        if name == "autoindex":
            self.autoindex = _first(name, values)
        elif name == "index":
            self.index.extend(values)
        elif name == "root":
            self.root = _www_path(name, _first(name, values))
        elif name == "upload_path":
            self.upload_path = _www_path(name, _first(name, values))
        elif name == "client_max_body_size":
            self.client_max_body_size = _first(name, values)
        elif name == "cgi":
            self.cgi.append(_pair(name, values))
        elif name == "return":
            self.redirect = _first(name, values)
        elif name == "methods":
            self.methods = list(values)
        elif name == "error_page":
            self.error_page.append(_pair(name, values))

    def _describe_body(self) -> list[str]:
        lines = [
            f"autoindex: {self.autoindex}",
            f"index: {' '.join(self.index)}",
            f"root: {self.root}",
            f"upload_path: {self.upload_path}",
            f"client_max_body_size: {self.client_max_body_size}",
        ]
        lines += [f"error_page: ({code}, {path})" for code, path in self.error_page]
        lines.append(f"methods: {' '.join(self.methods)}")
        lines += [f"cgi: ({ext}, {path})" for ext, path in self.cgi]
        lines.append(f"return: {self.redirect}")
        return lines

    def describe(self) -> str:
        """Return a human-readable dump of the directives."""
        return "\n".join(["---- Directive ----", *self._describe_body()]) + "\n"