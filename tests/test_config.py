import pytest

from webserv.config import ServerConfig
from webserv.directives import ConfigError, Directives


def test_defaults():
    s = ServerConfig()
    assert s.host == "0.0.0.0"
    assert s.port == 8000
    assert s.locations == []
    assert s.root == "www"


def test_listen_port_only():
    s = ServerConfig()
    s.set_listen(["8080"])
    assert (s.listen, s.host, s.port) == ("8080", "0.0.0.0", 8080)


def test_listen_host_and_port():
    s = ServerConfig()
    s.set_listen(["127.0.0.1:9000"])
    assert (s.host, s.port) == ("127.0.0.1", 9000)


def test_listen_localhost_maps_to_loopback():
    s = ServerConfig()
    s.set_listen(["localhost"])
    assert (s.host, s.port) == ("127.0.0.1", 8000)


def test_listen_address_only():
    s = ServerConfig()
    s.set_listen(["0.0.0.0"])
    assert (s.host, s.port) == ("0.0.0.0", 8000)


@pytest.mark.parametrize("value", ["10.0.0.1:8080", "192.168.1.1", "example.com:8080"])
def test_listen_rejects_foreign_hosts(value):
    with pytest.raises(ConfigError, match="failed to bind"):
        ServerConfig().set_listen([value])


@pytest.mark.parametrize("value", ["80", "1023", "49152", "localhost:80", "127.0.0.1:0"])
def test_listen_rejects_ports_out_of_range(value):
    with pytest.raises(ConfigError, match="failed port"):
        ServerConfig().set_listen([value])


@pytest.mark.parametrize("value", ["1024", "49151"])
def test_listen_accepts_port_bounds(value):
    s = ServerConfig()
    s.set_listen([value])
    assert s.port == int(value)


def test_set_server_name():
    s = ServerConfig()
    s.set_server_name(["example.com", "www.example.com"])
    assert s.server_name == ["example.com", "www.example.com"]


def test_fill_locations_inherits_unset_values():
    s = ServerConfig()
    s.add_directive("root", ["www/site"])
    s.add_directive("autoindex", ["on"])
    s.add_directive("index", ["index.html"])
    s.add_directive("client_max_body_size", ["1M"])
    s.add_directive("error_page", ["404", "404.html"])
    s.add_directive("cgi", ["py", "bin/py"])
    loc = Directives()
    s.add_location("/docs", loc)
    s.fill_locations()
    assert loc.root == "www/site"
    assert loc.autoindex == "on"
    assert loc.index == ["index.html"]
    assert loc.client_max_body_size == "1M"
    assert loc.error_page == [("404", "404.html")]
    assert loc.cgi == [("py", "bin/py")]


def test_fill_locations_keeps_explicit_values():
    s = ServerConfig()
    s.add_directive("root", ["www/site"])
    s.add_directive("index", ["index.html"])
    loc = Directives()
    loc.add_directive("root", ["www/other"])
    loc.add_directive("index", ["other.html"])
    loc.add_directive("methods", ["GET"])
    s.add_location("/other", loc)
    s.fill_locations()
    assert loc.root == "www/other"
    assert loc.index == ["other.html"]
    assert loc.methods == ["GET"]


def test_fill_locations_empty_methods_inherit():
    s = ServerConfig()
    s.add_directive("methods", ["GET", "DELETE"])
    loc = Directives()
    loc.add_directive("methods", [])
    s.add_location("/", loc)
    s.fill_locations()
    assert loc.methods == ["GET", "DELETE"]


def test_add_location_keeps_order():
    s = ServerConfig()
    first, second = Directives(), Directives()
    s.add_location("/a", first)
    s.add_location("/b", second)
    assert [path for path, _ in s.locations] == ["/a", "/b"]
    assert s.locations[1][1] is second


def test_describe_includes_listen_and_names():
    s = ServerConfig()
    s.set_listen(["127.0.0.1:9000"])
    s.set_server_name(["example.com"])
    text = s.describe()
    assert "listen: 127.0.0.1:9000" in text
    assert "port: 9000" in text
    assert "server_name: example.com" in text
    assert "root: www" in text