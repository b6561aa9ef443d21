import logging
import socket
import threading

from .errors import Unreachable


class GraphiteBackend:
    """ Sends plaintext protocol lines to a graphite server.

        The connection is opened on the first emit and reused afterwards.
        Any failure drops the connection so that the next emit dials again;
        the line that failed is not resent.
    """

    def __init__(self, host, port, persistent=True, timeout=None):
        self.host = host
        self.port = port
        self.persistent = persistent
        self.timeout = timeout
        self.sock = None
        self.lock = threading.Lock()

    @property
    def connected(self):
        return self.sock is not None

    def connect(self):
        sock = socket.socket()
        if self.timeout is not None:
            sock.settimeout(self.timeout)
        try:
            sock.connect((self.host, self.port))
        except OSError:
            sock.close()
            raise

        self.sock = sock
        logging.debug('connected to graphite at %s:%s' % (self.host, self.port))

    def emit(self, line):
        # Not rate-limited
        with self.lock:
            try:
                if self.sock is None:
                    self.connect()
                self.sock.sendall(line.encode())
            except OSError as e:
                self._reset()
                logging.debug('dropped %r: %s' % (line, e))
                raise Unreachable(self.host, self.port, e) from e

            logging.debug(line.rstrip('\n'))

            if not self.persistent:
                self._reset()

    def close(self):
        with self.lock:
            self._reset()

    def _reset(self):
        # must be called with the lock held
        if self.sock is None:
            return

        sock, self.sock = self.sock, None
        try:
            sock.close()
        except OSError as e:
            logging.debug('error while closing graphite connection: %s' % e)
