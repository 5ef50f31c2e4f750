"""Command line entry point: read the configuration and run the server."""

import sys

from webserv.config_parser import load_config
from webserv.directives import ConfigError
from webserv.server import Server


def main(argv=None) -> int:
    """Run the server with the configuration file named in ``argv``."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) > 1:
        print("invalid: too many arguments")
        return 0
    try:
        servers = load_config(args[0] if args else None)
    except ConfigError as exc:
        print(exc, file=sys.stderr)
        return 0
    except Exception:
        print("Some error has occurred")
        return 0
    server = Server(servers)
    try:
        server.open_listeners()
    except OSError:
        print("Fail to bind to local port")
        return 1
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())