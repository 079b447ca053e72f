"""Client: reads configuration and console input, then sends them to the server."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

from tp0net.protocol import Package, encode_message

InputFunc = Callable[[str], str]

_LOG_FORMAT = "[%(levelname)s] %(asctime)s %(name)s - %(message)s"


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def create_logger(path: str | Path = "tp0.log") -> logging.Logger:
    """Return the client logger, writing to the file and to the console."""
    logger = logging.getLogger("TP0")
    _reset_handlers(logger)
    logger.setLevel(logging.INFO)
    formatter = logging.Formatter(_LOG_FORMAT)
    for handler in (logging.FileHandler(path), logging.StreamHandler()):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def load_config(path: str | Path = "cliente.config") -> dict[str, str]:
    """Read a KEY=VALUE file; blank lines and lines starting with # are ignored."""
    config: dict[str, str] = {}
    with open(path, encoding="utf-8") as handle:
        for raw in handle:
            line = raw.rstrip("\r\n")
            if not line.strip() or line.lstrip().startswith("#"):
                continue
            key, sep, value = line.partition("=")
            if sep:
                config[key] = value
    return config


def read_lines(input_func: InputFunc | None = None) -> Iterator[str]:
    """Yield console lines until 'exit' or end of input."""
    reader = input if input_func is None else input_func
    while True:
        try:
            line = reader(">")
        except EOFError:
            return
        if line == "exit":
            return
        yield line


def read_console(logger: logging.Logger, input_func: InputFunc | None = None) -> None:
    """Log every line typed until 'exit'."""
    print("\nIngrese un texto (escriba 'exit' para salir):")
    for line in read_lines(input_func):
        logger.info("%s", line)


def create_connection(ip: str, port: str | int) -> socket.socket:
    """Open a TCP connection to the server."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.connect((ip, int(port)))
    except OSError:
        sock.close()
        raise
    return sock


def send_message(message: str, sock: socket.socket) -> None:
    """Send a single message frame."""
    sock.sendall(encode_message(message))


def send_package(package: Package, sock: socket.socket) -> None:
    """Send a package frame."""
    sock.sendall(package.serialize())


def build_package(input_func: InputFunc | None = None) -> Package:
    """Collect console lines into a package until 'exit'."""
    package = Package()
    print("\nIngrese un texto para agregar al paquete (escriba 'exit' para terminar):")
    for line in read_lines(input_func):
        package.add(line)
    return package


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Send a message and a package to the server.")
    parser.add_argument("--config", default="cliente.config")
    parser.add_argument("--log", default="tp0.log")
    args = parser.parse_args(argv)

    logger = create_logger(args.log)
    try:
        logger.info("Hola! Soy un log")
        try:
            config = load_config(args.config)
        except OSError:
            print("Error al iniciar el config", file=sys.stderr)
            return 1

        ip = config["IP"]
        port = config["PUERTO"]
        value = config["CLAVE"]
        logger.info("IP: %s", ip)
        logger.info("PUERTO: %s", port)
        logger.info("CLAVE: %s", value)

        read_console(logger)

        with create_connection(ip, port) as sock:
            send_message(value, sock)
            send_package(build_package(), sock)
    finally:
        _reset_handlers(logger)

    print("Termino el programa")
    return 0


if __name__ == "__main__":
    sys.exit(main())