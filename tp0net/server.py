"""Server: accepts one client and logs the frames it sends."""

from __future__ import annotations

import argparse
import logging
import socket
import struct
import sys
from pathlib import Path

from tp0net.protocol import OpCode, decode_items

PORT = 4444

_INT = struct.Struct("<i")
_LOG_FORMAT = "[%(levelname)s] %(asctime)s %(name)s - %(message)s"

logger = logging.getLogger("Servidor")


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    """Read exactly size bytes; fewer only if the peer closed."""
    chunks = []
    remaining = size
    while remaining > 0:
        data = sock.recv(remaining)
        if not data:
            break
        chunks.append(data)
        remaining -= len(data)
    return b"".join(chunks)


def _text(data: bytes) -> str:
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def start_server(port: int = PORT, host: str = "") -> socket.socket:
    """Create a listening TCP socket."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        reuse = getattr(socket, "SO_REUSEPORT", socket.SO_REUSEADDR)
        sock.setsockopt(socket.SOL_SOCKET, reuse, 1)
        sock.bind((host, port))
        sock.listen(socket.SOMAXCONN)
    except OSError as exc:
        logger.error("server setup failed: %s", exc)
        sock.close()
        raise
    logger.debug("Listo para escuchar a mi cliente")
    return sock


def wait_client(server_sock: socket.socket) -> socket.socket:
    """Accept one client connection."""
    try:
        conn, _ = server_sock.accept()
    except OSError as exc:
        logger.error("Error al aceptar cliente: %s", exc)
        raise
    logger.info("Se conecto un cliente!")
    return conn


def receive_operation(sock: socket.socket) -> OpCode | int | None:
    """Read the next operation code; None (and the socket closed) on disconnect."""
    data = _recv_exact(sock, _INT.size)
    if len(data) < _INT.size:
        sock.close()
        return None
    (code,) = _INT.unpack(data)
    try:
        return OpCode(code)
    except ValueError:
        return code


def receive_buffer(sock: socket.socket) -> bytes:
    """Read a size-prefixed payload."""
    header = _recv_exact(sock, _INT.size)
    if len(header) < _INT.size:
        raise ConnectionError("connection closed while reading size")
    (size,) = _INT.unpack(header)
    if size < 0:
        raise ValueError(f"negative payload size: {size}")
    payload = _recv_exact(sock, size)
    if len(payload) < size:
        raise ConnectionError("connection closed while reading payload")
    return payload


def receive_message(sock: socket.socket) -> str:
    """Read a message payload and return its text."""
    return _text(receive_buffer(sock))


def receive_package(sock: socket.socket) -> list[str]:
    """Read a package payload and return its items as text."""
    return [_text(item) for item in decode_items(receive_buffer(sock))]


def serve_client(sock: socket.socket, logger: logging.Logger) -> None:
    """Log every frame from the client until it disconnects."""
    while True:
        op = receive_operation(sock)
        if op is None:
            logger.error("el cliente se desconecto. Terminando servidor")
            return
        if op == OpCode.MESSAGE:
            logger.info("Me llego el mensaje %s", receive_message(sock))
        elif op == OpCode.PACKAGE:
            values = receive_package(sock)
            logger.info("Me llegaron los siguientes valores:")
            for value in values:
                logger.info("%s", value)
        else:
            logger.warning("Operacion desconocida. No quieras meter la pata")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Receive frames from one client.")
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--log", type=Path, default=Path("log.log"))
    args = parser.parse_args(argv)

    logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(_LOG_FORMAT)
    handlers = [logging.FileHandler(args.log), logging.StreamHandler()]
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    try:
        with start_server(args.port) as server_sock:
            logger.info("Servidor listo para recibir al cliente")
            conn = wait_client(server_sock)
            serve_client(conn, logger)
    finally:
        for handler in handlers:
            logger.removeHandler(handler)
            handler.close()
    return 1


if __name__ == "__main__":
    sys.exit(main())