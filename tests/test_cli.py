import socket

import pytest

from webserv.cli import main


def test_too_many_arguments(capsys):
    assert main(["a.conf", "b.conf"]) == 0
    assert "too many" in capsys.readouterr().out


def test_missing_default_config(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main([]) == 0
    assert "Configuration file not found" in capsys.readouterr().err


def test_missing_named_config(tmp_path, capsys):
    assert main([str(tmp_path / "absent.conf")]) == 0
    assert "Configuration file not found" in capsys.readouterr().err


def test_config_not_starting_with_server(tmp_path, capsys):
    path = tmp_path / "bad.conf"
    path.write_text("listen 8080;")
    assert main([str(path)]) == 0
    assert "Not server" in capsys.readouterr().err


def test_unbalanced_braces(tmp_path, capsys):
    path = tmp_path / "bad.conf"
    path.write_text("server { listen 8080;")
    assert main([str(path)]) == 0
    assert "Invalid parentheses" in capsys.readouterr().err


@pytest.fixture
def occupied_port():
    for port in range(30000, 30200):
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.bind(("0.0.0.0", port))
            sock.listen(1)
        except OSError:
            sock.close()
            continue
        yield port
        sock.close()
        return
    raise RuntimeError("no free port found")


def test_bind_failure_exits_with_error(tmp_path, capsys, occupied_port):
    path = tmp_path / "server.conf"
    path.write_text(f"server {{\n    listen {occupied_port};\n}}\n")
    assert main([str(path)]) == 1
    assert "Fail to bind" in capsys.readouterr().out