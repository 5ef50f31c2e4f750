"""A configurable HTTP/1.1 server with static files, uploads, redirects and CGI."""

__version__ = "0.1.0"