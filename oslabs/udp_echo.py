"""A UDP echo server and a client that greets it periodically."""

from __future__ import annotations

import argparse
import os
import socket
import sys
import time
from typing import TextIO

PORT = 8080
BUFFER_SIZE = 1024
INTERVAL = 5.0


def _text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def serve(
    sock: socket.socket, out: TextIO | None = None, max_datagrams: int | None = None
) -> int:
    """Echo datagrams back to their senders; return how many were handled.

    Runs forever unless ``max_datagrams`` is given.
    """
    stream = sys.stdout if out is None else out
    handled = 0
    while max_datagrams is None or handled < max_datagrams:
        data, client = sock.recvfrom(BUFFER_SIZE - 1)
        print(f"Data recv: {_text(data)}", file=stream, flush=True)
        sock.sendto(data, client)
        handled += 1
    return handled


def ping(sock: socket.socket, address: tuple, message: str) -> str:
    """Send ``message`` to ``address`` and return the reply."""
    payload = message.encode("utf-8")[: BUFFER_SIZE - 1]
    sock.sendto(payload, address)
    data, _ = sock.recvfrom(BUFFER_SIZE)
    return _text(data)


def client_message(pid: int | None = None) -> str:
    """The greeting the client sends, naming process ``pid`` (this one by default)."""
    return f"Hello server from PID: {os.getpid() if pid is None else pid}"


def server_main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="udp-server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=PORT)
    args = parser.parse_args(argv)
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    except OSError:
        print("SOCKET OPEN ERROR!!!")
        return 1
    with sock:
        try:
            sock.bind((args.host, args.port))
        except OSError:
            print("BIND ERROR!!!!!!!!!")
            return 1
        try:
            serve(sock)
        except KeyboardInterrupt:
            return 0
    return 0


def client_main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="udp-client")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--count", type=int, default=None)
    parser.add_argument("--interval", type=float, default=INTERVAL)
    args = parser.parse_args(argv)
    address = (args.host, args.port)
    sent = 0
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP) as sock:
        try:
            while args.count is None or sent < args.count:
                message = client_message()
                print(f"Data send: {message}", flush=True)
                reply = ping(sock, address, message)
                print(f"Data recv: {reply}", flush=True)
                sent += 1
                if args.count is None or sent < args.count:
                    time.sleep(args.interval)
        except KeyboardInterrupt:
            return 0
        except OSError as exc:
            print(f"SOCKET ERROR: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(server_main())