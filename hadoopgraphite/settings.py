import yaml


class GlobalConfig:
    __config = None

    def initialize(path):
        with open(path, 'r') as f:
            GlobalConfig.__config = yaml.load(f, Loader=yaml.FullLoader) or {}

    def get(key, default=None):
        return GlobalConfig.__config.get(key, default)

    def attributes(context_name):
        """ Attributes of a single metrics context. Both a nested section

                contexts:
                  mapred:
                    serverName: graphite.foo.bar

            and hadoop properties style keys (mapred.serverName) are
            understood; the nested section takes precedence.
        """
        prefix = '%s.' % context_name
        attrs = {k[len(prefix):]: v
                 for k, v in GlobalConfig.__config.items()
                 if isinstance(k, str) and k.startswith(prefix)}

        contexts = GlobalConfig.__config.get('contexts') or {}
        attrs.update(contexts.get(context_name) or {})

        return attrs
