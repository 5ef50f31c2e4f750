"""Incremental parsing of HTTP requests."""

import re

from webserv.textutils import split_pair

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_SLASH_RUN = re.compile(r"//+")
_HEADER_END = "\r\n\r\n"
_CHUNKED_END = "0\r\n\r\n"


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def remove_duplicate_slashes(text: str) -> str:
    """Collapse every run of slashes into a single slash."""
    return _SLASH_RUN.sub("/", text)


class HttpRequest:
    """An HTTP request built up from the chunks a client sends.

    Data is kept as text decoded as Latin-1 so that every byte survives.
    """

    def __init__(self, fd=None, client_ip: str = ""):
        self.fd = fd
        self.client_ip = client_ip
        self.method = ""
        self.route = ""
        self.query_string = ""
        self.http_version = ""
        self.host = ""
        self.port = 0
        self.port_str = ""
        self.content_type = ""
        self.content_length = ""
        self.content_length_int = 0
        self.transfer_encoding = ""
        self.content_disposition = ""
        self.boundary = ""
        self.is_multipart = False
        self.post_req_filename = ""
        self.body = ""
        self.raw = ""
        self.start_line = ""
        self.headers: dict[str, str] = {}
        self.headers_complete = False
        self.is_req_end = False
        self._pending = ""

    @property
    def body_bytes(self) -> bytes:
        """The request body as raw bytes."""
        return self.body.encode("latin-1")

    def feed(self, data) -> bool:
        """Consume a chunk of the request; return True once it is complete."""
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data).decode("latin-1")
        self.raw += data
        position = 0
        while position < len(data) and not self.headers_complete:
            newline = data.find("\n", position)
            stop = len(data) if newline == -1 else newline + 1
            line = self._pending + data[position:stop]
            self._pending = ""
            position = stop
            if newline == -1:
                self._pending = line
            else:
                self._handle_line(line)
        if self.headers_complete:
            self.body += data[position:]
        self._check_complete()
        return self.is_req_end

    def _handle_line(self, line: str) -> None:
        if not self.method:
            self.method = line.partition(" ")[0]
            if not self.start_line:
                self.start_line = line
        elif line == "\r\n":
            self.headers_complete = True
            self._set_properties()
        else:
            key, value = split_pair(line, ":")
            self.headers.setdefault(key, value)

    def _set_properties(self) -> None:
        self._parse_route()
        query = self.route.find("?")
        if query != -1:
            self.query_string = self.route[query + 1:]
        self.host = self.headers.get("Host", self.host)
        if self.host:
            _, self.port_str = split_pair(self.host, ":")
            self.port = _atoi(self.port_str)
        if self.method != "POST":
            return
        self.content_type = self.headers.get("Content-Type", self.content_type)
        self.content_disposition = self.headers.get(
            "Content-Disposition", self.content_disposition
        )
        if "multipart/form-data" in self.content_type:
            self.is_multipart = True
            marker = self.content_type.find("boundary=")
            if marker != -1:
                self.boundary = self.content_type[marker + len("boundary="):]
        if "Content-Length" in self.headers:
            self.content_length = self.headers["Content-Length"]
            self.content_length_int = _atoi(self.content_length)
        self.transfer_encoding = self.headers.get("Transfer-Encoding", self.transfer_encoding)

    def _parse_route(self) -> None:
        line = self.start_line
        start = line.find("/")
        if start == -1:
            return
        end = line.find(" ", start)
        if end == -1:
            return
        route = line[start:end]
        if len(route) > 1 and route.endswith("/"):
            route = route[:-1]
        self.route = remove_duplicate_slashes(route)
        self.http_version = line[line.rfind("/") + 1:].rstrip("\r\n")

    def _check_complete(self) -> None:
        if _HEADER_END not in self.raw:
            return
        if self.method != "POST" or self.content_length_int == 0:
            self.is_req_end = True
        elif self.transfer_encoding != "chunked":
            if len(self.body) == self.content_length_int:
                self.is_req_end = True
        elif self.raw.endswith(_CHUNKED_END):
            self.is_req_end = True

    def parse_multipart_form_data(self, body: str, boundary: str) -> None:
        """Extract the uploaded file name and content from a multipart body."""
        end_delimiter = f"--{boundary}--"
        marker = 'filename="'
        position = body.find(marker)
        if position != -1:
            position += len(marker)
            end = body.find('"', position)
            self.post_req_filename = body[position:] if end == -1 else body[position:end]
        content_start = body.find(_HEADER_END)
        if content_start == -1:
            return
        content_start += len(_HEADER_END)
        end = body.find(end_delimiter)
        if end == -1:
            return
        self.body = body[content_start:] if end < content_start else body[content_start:end]