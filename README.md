# webserv

A small HTTP/1.1 server that reads an nginx-style configuration file. It serves
static files and directory listings. It stores uploaded bodies sent by POST,
removes files on DELETE, follows `return` redirects and serves configured error
pages. For configured file extensions it runs a CGI interpreter.

## Running

```
webserv                  # reads src/config/config.conf in the current directory
webserv path/to/site.conf
```

With more than one argument the command prints `invalid: too many arguments`
and exits. If the configuration cannot be read or is invalid, the command
prints the error and exits. Otherwise it opens one listening socket for each
distinct configured port, always bound to `0.0.0.0`. It serves until
interrupted. The server holds at most five clients at once. It closes each
connection after sending the response, in pieces of 1000 bytes.

## Configuration

A file holds one or more `server` blocks. Each block may hold `location` blocks.
Write the location blocks after the server's own directives:

```
server {
    listen 127.0.0.1:8080;
    server_name example.com;
    root www;
    index index.html;
    autoindex off;
    client_max_body_size 10M;
    error_page 404 errors/404.html;
    methods GET POST DELETE;
    upload_path www/uploads;
    location /scripts {
        cgi py /usr/bin/python3;
    }
    location /old {
        return /new;
    }
}
```

- The accepted directive names are `server_name`, `listen`, `root`, `index`,
  `autoindex`, `error_page`, `client_max_body_size`, `cgi`, `allow_methods`,
  `return`, `upload_path` and `methods`. Any other name is an error.
  `allow_methods` is accepted but has no effect; use `methods`.
- `server_name` and `listen` are allowed only at server level.
- `root` and `upload_path` must be `www` or lie under `www/`. A leading `./` or
  `/` is dropped.
- `listen` takes `host:port`, a host, or a port. The host must be `127.0.0.1`,
  `0.0.0.0` or `localhost`. The port must lie between 1024 and 49151. The
  default is port 8000.
- `client_max_body_size` is a number of bytes. It may end in `k`/`K` (×1000)
  or `m`/`M` (×1000000).
- If a location leaves autoindex, root, index, body size, methods, upload
  path, error pages or CGI unset, it takes the server's value.

Braces must balance. The file must start with `server`.

## How requests are served

- The server block is chosen by the port in the `Host` header. If several
  blocks share that port, the choice goes to an exact `listen` match first,
  then an exact `server_name`, and then the longest common name prefix.
- The location is the longest declared location path that is a leading segment
  of the route. Failing that, `/` is used if it is declared, or the server
  block itself.
- GET answers, in this order:
  1. a `302` redirect when the location sets `return`;
  2. CGI output when the file extension matches a `cgi` entry;
  3. the file itself;
  4. the first `index` entry for a directory;
  5. a directory listing when `autoindex on`;
  6. a built-in welcome page for `/`;
  7. otherwise `404`.
- POST first checks the body size (`413`) and the upload directory (`400`). It
  then writes the body to the upload directory and answers
  `204 No Content`. The file name comes from `Content-Disposition`, or is
  the current time in milliseconds. The extension comes from the
  `Content-Type`, or is `.txt`. A multipart body is handed instead to the
  CGI upload script at `src/cgi/upload.py`.
- DELETE removes the file, or an empty directory, and answers `404` if that
  fails.
- A method that is not allowed gets `405`. Error responses use the configured
  `error_page`, or else `src/default_files/not_found.html`, with its
  "Error 404" heading changed to the actual status.

## Library use

- `webserv.config_parser.parse_config(text)` and `load_config(path)` return a
  dict of `ServerConfig` objects numbered from 1. They raise
  `webserv.directives.ConfigError` on invalid input.
- `webserv.request.HttpRequest` parses a request in pieces. `feed(data)`
  returns `True` once the request is complete.
- `webserv.response.build_response(request, servers)` returns the full
  response text. `ResponseBuilder` exposes the individual steps.
- `webserv.routing.resolve(servers, request)` returns the chosen server,
  location and file path.
- `webserv.server.Server` runs the `selectors`-based event loop with
  `open_listeners()`, `serve_once(timeout)`, `serve_forever()` and `close()`.
  It can be used as a context manager.
- Smaller helpers: `webserv.mime` covers content types, `webserv.status`
  covers status lines and error responses, and `webserv.cgi` covers the CGI
  environment and its execution.

## What it does not provide

The package ships no configuration file. It has no default error page, no
upload script and no CGI interpreters. It looks for `src/config/config.conf`,
`src/default_files/not_found.html`, `src/cgi/upload.py` and
`src/cgi/cgi_interpreters/*` relative to the working directory. You have to
supply them.

A CGI program is stopped after one second. Only the output written up to then
is returned.

Chunked request bodies are not decoded. There is no keep-alive, no TLS and no
logging beyond a few console messages.