from collections import namedtuple


class MetricRecord(namedtuple('MetricRecord',
                              'context_name record_name tags metrics')):
    """ A single record handed over by the collector. Tags and metrics are
        plain mappings; their iteration order is the order in which the
        resulting path segments and lines are produced.
    """
    __slots__ = ()

    def __new__(cls, context_name, record_name, tags=None, metrics=None):
        return super().__new__(cls, context_name, record_name,
                               tags or {}, metrics or {})

    @classmethod
    def from_dict(cls, d):
        return cls(d.get('context'), d.get('record'),
                   d.get('tags'), d.get('metrics'))
