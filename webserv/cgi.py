"""Running CGI interpreters for a request."""

import os
import subprocess
import sys

if sys.platform.startswith("linux"):
    PHP_CGI_PATH = "src/cgi/cgi_interpreters/php-cgi-linux"
    PYTHON_CGI_PATH = "src/cgi/cgi_interpreters/python-cgi-linux"
else:
    PHP_CGI_PATH = "src/cgi/cgi_interpreters/php-cgi-mac"
    PYTHON_CGI_PATH = "src/cgi/cgi_interpreters/python-cgi-mac"

CGI_TIMEOUT = 120
# The child is given this many seconds before it is stopped.
CGI_ALARM_SECONDS = 1


class CgiError(Exception):
    """Raised when a CGI program cannot be started; carries an HTTP status."""

    def __init__(self, status: int, message: str = ""):
        super().__init__(message or f"CGI failed with status {status}")
        self.status = status


def build_environment(request, location, script_path: str) -> dict[str, str]:
    """Return the CGI environment for ``request`` served from ``script_path``."""
    cwd = os.getcwd()
    upload_path = location.upload_path
    write_path = upload_path
    if write_path and not write_path.endswith("/"):
        write_path += "/"
    env = {
        "AUTH_TYPE": "Basic",
        "CONTENT_TYPE": request.content_type,
        "GATEWAY_INTERFACE": "CGI/1.1",
        "PATH_INFO": script_path,
        "PATH_TRANSLATED": f"{cwd}/{script_path}",
        "QUERY_STRING": request.query_string,
        "REMOTE_ADDR": request.client_ip or "",
        "REMOTE_HOST": request.host,
        "REMOTE_USER": cwd,
        "REQUEST_METHOD": request.method,
        "SCRIPT_NAME": script_path,
        "SCRIPT_FILENAME": f"{cwd}/{script_path}",
        "SERVER_NAME": "web_serv",
        "SERVER_PORT": request.port_str,
        "SERVER_PROTOCOL": "HTTP/1.1",
        "SERVER_SOFTWARE": "Web_serv",
        "SERVER_WRITE_PATH": write_path,
        "UPLOAD_DIR": upload_path,
        "LC_CTYPE": "C.UTF-8",
        "REDIRECT_STATUS": "true",
    }
    if request.content_length:
        env["CONTENT_LENGTH"] = request.content_length
    return dict(sorted(env.items()))


def execute(request, location, script_path: str, cgi_path=None) -> bytes:
    """Run the CGI interpreter on ``script_path`` and return what it printed.

    A POST body is given to the program on its standard input.  The program
    is stopped after a short time; whatever it wrote until then is returned.
    """
    interpreter = cgi_path or PYTHON_CGI_PATH
    env = build_environment(request, location, script_path)
    if request.method == "POST":
        stdin_args = {"input": request.body_bytes}
    else:
        stdin_args = {"stdin": subprocess.DEVNULL}
    try:
        completed = subprocess.run(
            [interpreter, script_path],
            stdout=subprocess.PIPE,
            env=env,
            timeout=CGI_ALARM_SECONDS,
            check=False,
            **stdin_args,
        )
    except subprocess.TimeoutExpired as exc:
        return exc.output or b""
    except OSError as exc:
        raise CgiError(501, "Cgi Error") from exc
    return completed.stdout