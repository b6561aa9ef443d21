import logging
import time

from .encoder import Encoder, DEFAULT_PREFIX, WORD, DOTS
from .errors import ConfigurationError, TransportError
from .graphite import GraphiteBackend
from .records import MetricRecord


# Configuration attribute names
SERVER_NAME_PROPERTY = 'serverName'
PORT_PROPERTY = 'port'
PATH_PROPERTY = 'path'
PERIOD_PROPERTY = 'period'
ESCAPING_PROPERTY = 'escaping'
ESCAPE_METRIC_NAMES_PROPERTY = 'escapeMetricNames'
CONNECTION_PROPERTY = 'connection'
TIMEOUT_PROPERTY = 'timeout'

DEFAULT_PERIOD = 5

connection_modes = {
    'persistent': True,
    'per-line': False
}


class GraphiteContext:
    """ Metrics context writing records to graphite.

        The context is configured from a mapping of attributes, usually the
        section of the configuration file named after the context:

            mapred:
              serverName: graphite.foo.bar
              port: 2013
              period: 60

        The period is only stored; scheduling emissions is up to the caller.
    """

    def __init__(self, backend_factory=GraphiteBackend, clock=time.time):
        self.backend_factory = backend_factory
        self.clock = clock
        self.context_name = None
        self.backend = None
        self.encoder = None
        self.period = DEFAULT_PERIOD

    def initialize(self, context_name, attributes):
        host = attributes.get(SERVER_NAME_PROPERTY)
        if not host:
            raise ConfigurationError('\'%s\' is not specified for context '
                                     '\'%s\'' % (SERVER_NAME_PROPERTY,
                                                 context_name))
        port = self._parse_port(attributes.get(PORT_PROPERTY))
        period = self._parse_period(attributes.get(PERIOD_PROPERTY))

        escaping = attributes.get(ESCAPING_PROPERTY, WORD)
        if escaping not in (WORD, DOTS):
            raise ConfigurationError('Incorrect escaping mode: \'%s\'; '
                                     'available values are %s, %s'
                                     % (escaping, WORD, DOTS))

        mode = attributes.get(CONNECTION_PROPERTY, 'persistent')
        if mode not in connection_modes:
            raise ConfigurationError('Incorrect connection mode: \'%s\'; '
                                     'available values are %s'
                                     % (mode, ', '.join(connection_modes)))

        timeout = self._parse_timeout(attributes.get(TIMEOUT_PROPERTY))
        escape_metric_names = self._parse_bool(
            ESCAPE_METRIC_NAMES_PROPERTY,
            attributes.get(ESCAPE_METRIC_NAMES_PROPERTY, False))

        # reconfiguration drops the old connection
        self.close()

        self.context_name = context_name
        self.period = period
        self.encoder = Encoder(
            prefix=attributes.get(PATH_PROPERTY) or DEFAULT_PREFIX,
            escaping=escaping,
            escape_metric_names=escape_metric_names,
            clock=self.clock)
        self.backend = self.backend_factory(
            host, port, persistent=connection_modes[mode], timeout=timeout)

        logging.info('context \'%s\' sends to %s:%s every %ss'
                     % (context_name, host, port, period))

    def _parse_port(self, value):
        if value is None:
            raise ConfigurationError('\'%s\' is not specified for context'
                                     % PORT_PROPERTY)
        try:
            port = int(value)
        except (TypeError, ValueError):
            raise ConfigurationError('Expected integer as port, but got %r'
                                     % (value,))
        if not 0 < port < 65536:
            raise ConfigurationError('Port %d is out of range' % port)
        return port

    def _parse_period(self, value):
        if value is None:
            return DEFAULT_PERIOD
        try:
            period = int(value)
        except (TypeError, ValueError):
            raise ConfigurationError('Invalid period: %r' % (value,))
        if period <= 0:
            raise ConfigurationError('Invalid period: %r' % (value,))
        return period

    def _parse_timeout(self, value):
        if value is None:
            return None
        try:
            timeout = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError('Expected positive number as timeout, '
                                     'but got %r' % (value,))
        if isinstance(value, bool) or not timeout > 0:
            raise ConfigurationError('Expected positive number as timeout, '
                                     'but got %r' % (value,))
        return timeout

    def _parse_bool(self, name, value):
        # properties style configs hand over strings
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ('true', 'false'):
            return value.lower() == 'true'
        raise ConfigurationError('Expected true or false as %s, but got %r'
                                 % (name, value))

    def emit_record(self, context_name, record_name, tags=None, metrics=None):
        return self.emit(MetricRecord(context_name, record_name, tags, metrics))

    def emit(self, record):
        """ Send every metric of the record to graphite.

            A failure to send one metric doesn't stop the others. Returns the
            list of transport errors, empty when everything was sent.
        """
        if self.encoder is None:
            raise ConfigurationError('Context is not initialized')

        errors = []
        for line in self.encoder.encode(record):
            try:
                self.backend.emit(line)
            except TransportError as e:
                errors.append(e)

        return errors

    def close(self):
        if self.backend is not None:
            self.backend.close()
