from .context import GraphiteContext
from .encoder import Encoder, escape, WORD, DOTS
from .errors import (GraphiteError, InvalidRecord, ConfigurationError,
                     TransportError, Unreachable)
from .graphite import GraphiteBackend
from .records import MetricRecord
