import argparse
import logging
import signal
import time

import yaml

from .context import GraphiteContext
from .controller import Controller
from .errors import ConfigurationError, InvalidRecord
from .records import MetricRecord
from .settings import GlobalConfig as config


controller = Controller()


def signal_handler(signum, frame):
    """ Ask the emission loop to stop """
    controller.stopped = True


def setup_logging():
    log_level = config.get('log_level', 'info')
    log_file = config.get('log_file')

    level = {
        'debug': logging.DEBUG,
        'info': logging.INFO,
        'warning': logging.WARNING,
        'error': logging.ERROR,
        'critical': logging.CRITICAL
    }.get(log_level.lower())

    if not level:
        raise ConfigurationError('Unknown log level \'%s\'' % log_level.lower())

    logging.basicConfig(filename=log_file, level=level)


def load_records(path):
    with open(path, 'r') as f:
        entries = yaml.load(f, Loader=yaml.FullLoader) or []
    return [MetricRecord.from_dict(e) for e in entries]


def create_context(context_name):
    context = GraphiteContext()
    context.initialize(context_name, config.attributes(context_name))
    return context


def emit_due(contexts, last_sent, records, now):
    """ Emit the records of every context whose period has elapsed since it
        was last sent. Contexts are created the first time they show up.
    """
    for record in records:
        if not record.context_name:
            raise InvalidRecord('Record \'%s\' has no context'
                                % record.record_name)
        if record.context_name not in contexts:
            contexts[record.context_name] = create_context(record.context_name)

    due = set(name for name, context in contexts.items()
              if name not in last_sent or
              now - last_sent[name] >= context.period)

    for record in records:
        if record.context_name not in due:
            continue
        for e in contexts[record.context_name].emit(record):
            logging.warning(str(e))

    for name in due:
        last_sent[name] = now


def run(records_path, once=False):
    contexts = {}
    last_sent = {}
    try:
        emit_due(contexts, last_sent, load_records(records_path), time.time())

        while not once:
            time.sleep(1)
            if controller.stopped:
                break
            emit_due(contexts, last_sent, load_records(records_path),
                     time.time())
    finally:
        logging.info('closing connections')
        for c in contexts.values():
            c.close()


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='hadoopgraphite - send metrics records to graphite')
    parser.add_argument('-c', '--config', default='config.yml',
                        help='config file')
    parser.add_argument('-r', '--records', default='records.yml',
                        help='file with the records to send')
    parser.add_argument('--once', action='store_true',
                        help='send the records once and exit')
    args = parser.parse_args(argv)

    config.initialize(args.config)
    setup_logging()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    run(args.records, once=args.once)
    logging.info('done')


if __name__ == '__main__':
    main()
