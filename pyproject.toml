[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "webserv"
version = "0.1.0"
description = "A small HTTP/1.1 server driven by an nginx-style configuration file, with static files, uploads, redirects and CGI"
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "server", "cgi", "static-files", "configuration"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
webserv = "webserv.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["webserv"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
