import re
import time

from .errors import InvalidRecord


DEFAULT_PREFIX = 'Platform.Hadoop'

# escaping modes
WORD = 'word'
DOTS = 'dots'

SEP = '.'

_non_word = re.compile(r'[^A-Za-z0-9_]')


def escape(value, mode=WORD):
    """ Make a value safe to be used as a single graphite path segment.

        WORD replaces everything that isn't a letter, digit or underscore,
        DOTS only replaces dots (older installations rely on this).
    """
    if mode == WORD:
        return _non_word.sub('_', value)
    if mode == DOTS:
        return value.replace('.', '_')
    raise ValueError('Unknown escaping mode \'%s\'' % mode)


def tag_path(tags, mode=WORD):
    segments = []
    for value in tags.values():
        # empty tags do occur, skip them
        if value is None:
            continue
        value = str(value)
        if not value:
            continue
        segments.append(escape(value, mode) + SEP)
    return ''.join(segments)


def timestamp(clock=time.time):
    # graphite doesn't handle fractions of a second
    return int(clock())


class Encoder:
    def __init__(self, prefix=DEFAULT_PREFIX, escaping=WORD,
                 escape_metric_names=False, clock=time.time):
        if escaping not in (WORD, DOTS):
            raise ValueError('Unknown escaping mode \'%s\'' % escaping)

        self.prefix = prefix
        self.escaping = escaping
        self.escape_metric_names = escape_metric_names
        self.clock = clock

    def base_path(self, context_name, record_name):
        # yaml hands over numbers for names like 2013
        context_name = '' if context_name is None else str(context_name)
        record_name = '' if record_name is None else str(record_name)

        if not context_name:
            raise InvalidRecord('Empty context name')
        if not record_name:
            raise InvalidRecord('Empty record name for context \'%s\''
                                % context_name)

        return SEP.join((self.prefix, context_name, record_name)) + SEP

    def encode(self, record):
        """ Render a MetricRecord into plaintext protocol lines, one per
            metric. Every line of the record carries the same timestamp.
        """
        start = self.base_path(record.context_name, record.record_name) + \
            tag_path(record.tags, self.escaping)
        ts = timestamp(self.clock)

        lines = []
        for name, value in record.metrics.items():
            if self.escape_metric_names:
                name = escape(str(name), self.escaping)
            lines.append('{}{} {} {}\n'.format(start, name, value, ts))

        return lines
