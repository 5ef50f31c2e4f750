"""Building the HTTP response for a parsed request."""

import os
from pathlib import Path

from webserv.cgi import CgiError, execute
from webserv.fsutils import current_time_millis, directory_listing_html, is_number
from webserv.mime import content_type_line, extension_for
from webserv.routing import resolve
from webserv.status import error_response, status_line
from webserv.textutils import concat_paths

DEFAULT_HTML = (
    '<html><body><h1 style="color:blue;text-align:center">'
    'Welcome to "Webserv" 42 project</body></html></h1>'
)
UPLOAD_SCRIPT = "src/cgi/upload.py"
NO_CONTENT_RESPONSE = "HTTP/1.1 204 No Content\r\nContent-Length: 0\r\n\r\n"
HTTP_METHODS = ("GET", "POST", "DELETE")

_SIZE_SUFFIXES = {"k": 1000, "K": 1000, "m": 1_000_000, "M": 1_000_000}


class HttpError(Exception):
    """Raised while building a response to answer with an error status."""

    def __init__(self, status: int):
        super().__init__(f"HTTP error {status}")
        self.status = status


def _read_text(path: str) -> str:
    if not os.path.isfile(path):
        return ""
    return Path(path).read_bytes().decode("latin-1")


def response_for_path(status: int, path: str) -> str:
    """Return a response whose body is the file at ``path``."""
    size = os.stat(path).st_size
    head = status_line(status) + content_type_line(path) + f"Content-Length: {size}\n\n"
    return head + _read_text(path)


def response_for_string(status: int, content: str) -> str:
    """Return an HTML response whose body is ``content``."""
    return (
        status_line(status)
        + f"Content-Type:text/html\nContent-Length: {len(content)}\n\n"
        + content
    )


class ResponseBuilder:
    """Builds the response for one request against the configured servers."""

    def __init__(self, request, servers):
        self.request = request
        self.servers = servers
        self.resolution = resolve(servers, request)
        self.location = self.resolution.location
        self.serve_root = self.resolution.serve_root
        self.response = ""

    def build(self) -> str:
        """Build, store and return the response text."""
        handlers = {
            "GET": self.get_response,
            "POST": self.post_response,
            "DELETE": self.delete_response,
        }
        try:
            self.check_allowed_method()
            self.response = handlers[self.request.method]()
        except (HttpError, CgiError) as exc:
            self.response = error_response(exc.status, self.location)
        return self.response

    def check_allowed_method(self) -> None:
        """Raise 405 unless the method is known and allowed here."""
        method = self.request.method
        if method not in HTTP_METHODS or method not in self.location.methods:
            raise HttpError(405)

    def check_max_body_size(self) -> None:
        """Raise 413 if the body exceeds ``client_max_body_size``."""
        limit = self.location.client_max_body_size
        if not limit:
            return
        multiplier = _SIZE_SUFFIXES.get(limit[-1], 1)
        if limit[-1] in _SIZE_SUFFIXES:
            limit = limit[:-1]
        if not is_number(limit):
            return
        if int(limit) * multiplier < len(self.request.body):
            raise HttpError(413)

    def check_upload_path(self) -> None:
        """Raise 400 unless the upload path is an existing directory."""
        if not os.path.isdir(self.location.upload_path):
            raise HttpError(400)

    def _root_or_404(self) -> str:
        if self.request.route == "/":
            return response_for_string(200, DEFAULT_HTML)
        raise HttpError(404)

    def _cgi_response(self):
        root = self.serve_root
        dot = root.rfind(".")
        extension = root[dot + 1:] if dot != -1 else ""
        if not extension:
            return None
        for cgi_extension, interpreter in self.location.cgi:
            if extension != cgi_extension:
                continue
            if not os.path.exists(interpreter):
                raise HttpError(500)
            if not os.path.exists(root):
                raise HttpError(404)
            output = execute(self.request, self.location, root, interpreter)
            return response_for_string(200, output.decode("latin-1"))
        return None

    def get_response(self) -> str:
        """Answer a GET: redirect, CGI, file, index, listing or default page."""
        location = self.location
        root = self.serve_root
        if "favicon.ico" in root and not os.path.exists(root):
            return ""
        if location.redirect:
            return (
                status_line(302)
                + f"Location: {location.redirect}\n"
                + "Content-Length: 0\n\n"
            )
        if location.cgi:
            cgi = self._cgi_response()
            if cgi is not None:
                return cgi
        if not os.path.exists(root):
            return self._root_or_404()
        size = os.stat(root).st_size
        if os.path.isfile(root) or size == 0:
            return response_for_path(200, root)
        if not location.index:
            if location.autoindex == "on":
                return response_for_string(200, directory_listing_html(root))
            return self._root_or_404()
        # Only the first index entry is consulted.
        candidate = concat_paths(root, location.index[0])
        if os.path.exists(candidate) and (os.path.isfile(candidate) or size == 0):
            return response_for_path(200, candidate)
        return self._root_or_404()

    def _upload_name(self) -> str:
        disposition = self.request.content_disposition
        if not disposition:
            return str(current_time_millis())
        marker = disposition.find("filename=")
        if marker == -1:
            return disposition
        name = disposition[marker + 10:]
        return name[1:len(name) - 1] if len(name) >= 2 else ""

    def _store_upload(self) -> None:
        extension = extension_for(self.request.content_type) or ".txt"
        filename = self._upload_name() + extension
        upload_path = self.location.upload_path
        if upload_path and not upload_path.endswith("/"):
            upload_path += "/"
        try:
            Path(upload_path + filename).write_bytes(self.request.body_bytes)
        except OSError as exc:
            raise HttpError(400) from exc

    def post_response(self) -> str:
        """Store the uploaded body and answer 204."""
        self.check_max_body_size()
        self.check_upload_path()
        if self.request.is_multipart:
            self.serve_root = UPLOAD_SCRIPT
            execute(self.request, self.location, self.serve_root, None)
        elif self.request.content_type:
            self._store_upload()
        else:
            raise HttpError(400)
        return NO_CONTENT_RESPONSE

    def delete_response(self) -> str:
        """Remove the requested file; raise 404 if that fails."""
        try:
            if os.path.isdir(self.serve_root):
                os.rmdir(self.serve_root)
            else:
                os.remove(self.serve_root)
        except OSError as exc:
            raise HttpError(404) from exc
        return ""


def build_response(request, servers) -> str:
    """Return the full response text for ``request``."""
    return ResponseBuilder(request, servers).build()