"""HTTP status texts and error responses."""

from pathlib import Path

from webserv.textutils import concat_paths

DEFAULT_ERROR_PAGE = "src/default_files/not_found.html"
_PLACEHOLDER = "Error 404"

STATUS_TEXTS: dict[int, str] = {
    100: "Continue",
    101: "Switching protocols",
    102: "Processing",
    103: "Early Hints",
    200: "OK",
    201: "Created",
    202: "Accepted",
    203: "Non-Authoritative Information",
    204: "No Content",
    205: "Reset Content",
    206: "Partial Content",
    207: "Multi-Status",
    208: "Already Reported",
    226: "IM Used",
    300: "Multiple Choices",
    301: "Moved Permanently",
    302: 'Found (Previously "Moved Temporarily")',
    303: "See Other",
    304: "Not Modified",
    305: "Use Proxy",
    306: "Switch Proxy",
    307: "Temporary Redirect",
    308: "Permanent Redirect",
    400: "Bad Request",
    401: "Unauthorized",
    402: "Payment Required",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    406: "Not Acceptable",
    407: "Proxy Authentication Required",
    408: "Request Timeout",
    409: "Conflict",
    410: "Gone",
    411: "Length Required",
    412: "Precondition Failed",
    413: "Payload Too Large",
    414: "URI Too Long",
    415: "Unsupported Media Type",
    416: "Range Not Satisfiable",
    417: "Expectation Failed",
    418: "I'm a Teapot",
    421: "Misdirected Request",
    422: "Unprocessable Entity",
    423: "Locked",
    424: "Failed Dependency",
    425: "Too Early",
    426: "Upgrade Required",
    428: "Precondition Required",
    429: "Too Many Requests",
    431: "Request Header Fields Too Large",
    451: "Unavailable For Legal Reasons",
    500: "Internal Server Error",
    501: "Not Implemented",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Timeout",
    505: "HTTP Version Not Supported",
    506: "Variant Also Negotiates",
    507: "Insufficient Storage",
    508: "Loop Detected",
    510: "Not Extended",
    511: "Network Authentication Required",
}


def status_text(code: int) -> str:
    """Return the reason phrase for ``code``, or an empty string."""
    return STATUS_TEXTS.get(code, "")


def status_line(code: int) -> str:
    """Return the HTTP/1.1 status line for ``code``."""
    return f"HTTP/1.1 {code} {status_text(code)}\n"


def error_page_path(status: int, location) -> str:
    """Return the configured error page path for ``status``, or ''."""
    wanted = str(status)
    for code, path in location.error_page:
        if code == wanted:
            return concat_paths(location.root, path)
    return ""


def _read(path: str):
    try:
        return Path(path).read_bytes().decode("latin-1")
    except OSError:
        return None


def error_response(status: int, location) -> str:
    """Return a complete error response for ``status``.

    A configured error page is sent as it is; otherwise the default page is
    sent with its "Error 404" heading changed to the actual status.
    """
    reason = STATUS_TEXTS[status]
    configured = error_page_path(status, location)
    content = _read(configured or DEFAULT_ERROR_PAGE)
    if content is None:
        content = _read(DEFAULT_ERROR_PAGE) or ""
    head = f"HTTP/1.1 {status} {reason}\nContent-Type:text/html\nContent-Length: {len(content)}\n\n"
    if not configured:
        found = content.find(_PLACEHOLDER)
        if found != -1:
            replacement = f"Error {status}"
            content = content[:found] + replacement + content[found + len(replacement):]
    return head + content