"""
Shared fixtures: a fake socket layer for driving the backend through
failures, and a real line-collecting TCP server on localhost.
"""

import socket
import threading
import time

import pytest

from hadoopgraphite import graphite
from hadoopgraphite.errors import Unreachable


class FakeSocket:
    def __init__(self, network):
        self.network = network
        self.timeout = None
        self.address = None
        self.closed = False
        self.broken = False

    def settimeout(self, timeout):
        self.timeout = timeout

    def connect(self, address):
        self.network.dials += 1
        if self.network.refuse:
            raise ConnectionRefusedError('connection refused')
        self.address = address

    def sendall(self, data):
        if self.closed:
            raise OSError('sendall on closed socket')
        if self.broken:
            raise BrokenPipeError('broken pipe')
        self.network.sent.append(data.decode())

    def close(self):
        self.closed = True


class FakeNetwork:
    def __init__(self):
        self.sockets = []
        self.sent = []
        self.dials = 0
        self.refuse = False

    def socket(self, *args):
        s = FakeSocket(self)
        self.sockets.append(s)
        return s


class RecordingBackend:
    """ Stands in for GraphiteBackend in context tests """

    def __init__(self, host, port, persistent=True, timeout=None):
        self.host = host
        self.port = port
        self.persistent = persistent
        self.timeout = timeout
        self.lines = []
        self.failing = set()
        self.closed = False

    def emit(self, line):
        if line in self.failing:
            raise Unreachable(self.host, self.port,
                              ConnectionResetError('reset'))
        self.lines.append(line)

    def close(self):
        self.closed = True


class LineServer:
    def __init__(self):
        self.sock = socket.socket()
        self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.sock.bind(('127.0.0.1', 0))
        self.sock.listen(16)
        self.host, self.port = self.sock.getsockname()
        self.lines = []
        self.connections = 0
        self.lock = threading.Lock()
        self.thread = threading.Thread(target=self._accept, daemon=True)
        self.thread.start()

    def _accept(self):
        while True:
            try:
                conn, _ = self.sock.accept()
            except OSError:
                return
            with self.lock:
                self.connections += 1
            threading.Thread(target=self._read, args=(conn,),
                             daemon=True).start()

    def _read(self, conn):
        with conn, conn.makefile('r') as f:
            for line in f:
                with self.lock:
                    self.lines.append(line)

    def wait_for(self, count, timeout=5):
        deadline = time.time() + timeout
        while time.time() < deadline:
            with self.lock:
                if len(self.lines) >= count:
                    return list(self.lines)
            time.sleep(0.01)
        with self.lock:
            return list(self.lines)

    def close(self):
        self.sock.close()


@pytest.fixture
def network(monkeypatch):
    net = FakeNetwork()
    monkeypatch.setattr(graphite.socket, 'socket', net.socket)
    return net


@pytest.fixture
def server():
    s = LineServer()
    yield s
    s.close()


@pytest.fixture
def fixed_clock():
    return lambda: 1000.75
