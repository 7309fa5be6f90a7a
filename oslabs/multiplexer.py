"""A single-threaded TCP echo server that multiplexes clients with select."""

from __future__ import annotations

import argparse
import selectors
import socket
import sys
from typing import TextIO

PORT = 8080
BUFFER_SIZE = 1024
QUEUE = 10


def _text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


class MultiplexServer:
    """An echo server holding at most ``max_clients`` connections at once."""

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = PORT,
        max_clients: int = QUEUE,
        out: TextIO | None = None,
    ) -> None:
        if max_clients < 0:
            raise ValueError(f"max_clients must not be negative, got {max_clients}")
        self._out = out
        self._server = socket.socket(
            socket.AF_INET, socket.SOCK_STREAM, socket.IPPROTO_TCP
        )
        try:
            self._server.bind((host, port))
            self._server.listen(max_clients)
        except OSError:
            self._server.close()
            raise
        self._slots: list[socket.socket | None] = [None] * max_clients
        self._selector = selectors.DefaultSelector()
        self._selector.register(self._server, selectors.EVENT_READ, None)
        self._closed = False

    def _say(self, message: str) -> None:
        print(message, file=sys.stdout if self._out is None else self._out, flush=True)

    def address(self) -> tuple:
        """The address the server listens on."""
        return self._server.getsockname()

    @property
    def connected(self) -> int:
        """How many clients hold a slot."""
        return sum(slot is not None for slot in self._slots)

    def poll(self, timeout: float | None = None) -> int:
        """Handle one round of ready sockets; return how many were ready."""
        events = self._selector.select(timeout)
        for key, _ in events:
            if key.data is None:
                self._accept()
            else:
                self._serve_client(key.fileobj, key.data)
        return len(events)

    def _accept(self) -> None:
        try:
            conn, _ = self._server.accept()
        except OSError:
            self._say("ACCEPT ERROR!!!")
            return
        index = next((i for i, slot in enumerate(self._slots) if slot is None), None)
        if index is None:
            self._say("TOO MANY CLIENTS!!!")
            conn.close()
            return
        self._slots[index] = conn
        self._selector.register(conn, selectors.EVENT_READ, index)

    def _serve_client(self, conn: socket.socket, index: int) -> None:
        try:
            data = conn.recv(BUFFER_SIZE)
        except OSError:
            data = b""
        if not data:
            self._selector.unregister(conn)
            conn.close()
            self._slots[index] = None
            self._say(f"CLIENT {index + 1} DISCONNECTED!!!")
            return
        self._say(f"Data recv: {_text(data)}")
        try:
            conn.sendall(data)
        except OSError:
            self._say("WRITE ERROR!!!")

    def serve_forever(self) -> None:
        """Handle clients until interrupted."""
        while True:
            self.poll(None)

    def close(self) -> None:
        """Close every client connection and the listening socket."""
        if self._closed:
            return
        self._closed = True
        self._selector.close()
        for conn in self._slots:
            if conn is not None:
                conn.close()
        self._slots = [None] * len(self._slots)
        self._server.close()

    def __enter__(self) -> "MultiplexServer":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="multiplexer-server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--max-clients", type=int, default=QUEUE)
    args = parser.parse_args(argv)
    try:
        server = MultiplexServer(args.host, args.port, args.max_clients)
    except OSError:
        print("BIND ERROR!!!!!!!!!")
        return 1
    with server:
        print(f"TCP server listening on port {server.address()[1]}...", flush=True)
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            return 0
        except OSError:
            print("SELECT ERROR!!!")
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())