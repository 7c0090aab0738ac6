DEFAULT_URL = 'unix://var/run/docker.sock'
DEFAULT_DOMAIN = 'docker.localhost'
DEFAULT_LABEL_PREFIX = 'traefik.'


class ProviderSettings(object):
    """Provider-wide defaults, read-only while a configuration is built."""

    def __init__(self,
                 domain=DEFAULT_DOMAIN,
                 exposed_by_default=True,
                 label_prefix=DEFAULT_LABEL_PREFIX,
                 network=None,
                 swarm_mode=False):
        self.domain = domain
        self.exposed_by_default = exposed_by_default
        self.label_prefix = label_prefix
        self.network = network
        self.swarm_mode = swarm_mode

    def label(self, name):
        return self.label_prefix + name

    def __repr__(self):
        return ('<ProviderSettings domain={0.domain!r} '
                'exposed_by_default={0.exposed_by_default!r} '
                'swarm_mode={0.swarm_mode!r}>'.format(self))
