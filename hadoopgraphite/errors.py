class GraphiteError(Exception):
    pass


class InvalidRecord(GraphiteError, ValueError):
    """ Raised for records that can't be turned into a graphite path """
    pass


class ConfigurationError(GraphiteError):
    pass


class TransportError(GraphiteError):
    pass


class Unreachable(TransportError):
    """ Connecting to or writing to the graphite server failed. The line
        which was being sent is lost.
    """

    def __init__(self, host, port, cause):
        super().__init__('graphite server %s:%s is unreachable: %s'
                         % (host, port, cause))
        self.host = host
        self.port = port
        self.cause = cause
