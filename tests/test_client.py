import logging
import socket
import threading

import pytest

from tp0net import client
from tp0net.protocol import OpCode, Package, decode_items, encode_message


def _feeder(lines):
    it = iter(lines)

    def reader(prompt):
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return reader


def test_read_lines_stops_at_exit():
    assert list(client.read_lines(_feeder(["a", "b", "exit", "c"]))) == ["a", "b"]


def test_read_lines_stops_at_eof():
    assert list(client.read_lines(_feeder(["x", "y"]))) == ["x", "y"]


def test_load_config(tmp_path):
    path = tmp_path / "cliente.config"
    path.write_text("# comment\nIP=127.0.0.1\n\nPUERTO=4444\nCLAVE=a=b\n")
    assert client.load_config(path) == {"IP": "127.0.0.1", "PUERTO": "4444", "CLAVE": "a=b"}


def test_load_config_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        client.load_config(tmp_path / "nope.config")


def test_build_package_collects_lines():
    package = client.build_package(_feeder(["uno", "dos", "exit"]))
    assert decode_items(bytes(package.buffer)) == [b"uno\0", b"dos\0"]
    assert package.op_code == OpCode.PACKAGE


def test_read_console_logs_lines(tmp_path):
    logger = client.create_logger(tmp_path / "tp0.log")
    client.read_console(logger, _feeder(["primera", "exit"]))
    for handler in logger.handlers:
        handler.flush()
    assert "primera" in (tmp_path / "tp0.log").read_text()


def _recv_all(conn):
    chunks = []
    while True:
        data = conn.recv(4096)
        if not data:
            return b"".join(chunks)
        chunks.append(data)


def test_send_message_and_package_over_socket():
    left, right = socket.socketpair()
    with left, right:
        package = Package()
        package.add("z")
        client.send_message("hola", left)
        client.send_package(package, left)
        left.shutdown(socket.SHUT_WR)
        assert _recv_all(right) == encode_message("hola") + package.serialize()


def test_create_connection_refused():
    probe = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    with pytest.raises(OSError):
        client.create_connection("127.0.0.1", port)


def test_main_sends_key_and_package(tmp_path, monkeypatch):
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(1)
    port = server.getsockname()[1]
    received = {}

    def accept():
        conn, _ = server.accept()
        with conn:
            received["data"] = _recv_all(conn)

    thread = threading.Thread(target=accept)
    thread.start()

    config = tmp_path / "cliente.config"
    config.write_text(f"IP=127.0.0.1\nPUERTO={port}\nCLAVE=hola\n")
    monkeypatch.setattr("builtins.input", _feeder(["consola", "exit", "x", "y", "exit"]))
    result = client.main(["--config", str(config), "--log", str(tmp_path / "tp0.log")])
    thread.join(timeout=5)
    server.close()

    expected = Package()
    expected.add("x")
    expected.add("y")
    assert result == 0
    assert received["data"] == encode_message("hola") + expected.serialize()


def test_main_missing_config(tmp_path):
    result = client.main(["--config", str(tmp_path / "none"), "--log", str(tmp_path / "tp0.log")])
    assert result == 1
    assert logging.getLogger("TP0").handlers == []