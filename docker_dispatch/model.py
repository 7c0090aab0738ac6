from collections import namedtuple

Server = namedtuple('Server', ['url', 'weight'])
Route = namedtuple('Route', ['rule'])
CircuitBreaker = namedtuple('CircuitBreaker', ['expression'])
LoadBalancer = namedtuple('LoadBalancer', ['method', 'sticky'])
MaxConn = namedtuple('MaxConn', ['amount', 'extractor_func'])


class Record(object):
    fields = ()

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return all(getattr(self, f) == getattr(other, f) for f in self.fields)

    def __repr__(self):
        return '{}({})'.format(type(self).__name__, ', '.join(
            '{}={!r}'.format(f, getattr(self, f)) for f in self.fields))


class Frontend(Record):
    fields = ('backend', 'pass_host_header', 'entrypoints', 'basic_auth',
              'priority', 'routes')

    def __init__(self,
                 backend,
                 pass_host_header=True,
                 entrypoints=None,
                 basic_auth=None,
                 priority=0,
                 routes=None):
        self.backend = backend
        self.pass_host_header = pass_host_header
        self.entrypoints = list(entrypoints or [])
        self.basic_auth = list(basic_auth or [])
        self.priority = priority
        self.routes = dict(routes or {})

    def to_dict(self):
        return {
            'backend': self.backend,
            'passHostHeader': self.pass_host_header,
            'entryPoints': list(self.entrypoints),
            'basicAuth': list(self.basic_auth),
            'priority': self.priority,
            'routes': {name: {'rule': route.rule}
                       for name, route in self.routes.items()},
        }


class Backend(Record):
    fields = ('servers', 'circuit_breaker', 'load_balancer', 'max_conn')
    policy_fields = ('circuit_breaker', 'load_balancer', 'max_conn')

    def __init__(self,
                 servers=None,
                 circuit_breaker=None,
                 load_balancer=None,
                 max_conn=None):
        self.servers = dict(servers or {})
        self.circuit_breaker = circuit_breaker
        self.load_balancer = load_balancer
        self.max_conn = max_conn

    def to_dict(self):
        d = {
            'servers': {name: {'url': srv.url, 'weight': srv.weight}
                        for name, srv in self.servers.items()},
        }
        if self.circuit_breaker is not None:
            d['circuitBreaker'] = {
                'expression': self.circuit_breaker.expression}
        if self.load_balancer is not None:
            d['loadBalancer'] = {'method': self.load_balancer.method,
                                 'sticky': self.load_balancer.sticky}
        if self.max_conn is not None:
            d['maxConn'] = {'amount': self.max_conn.amount,
                            'extractorFunc': self.max_conn.extractor_func}
        return d


class Configuration(Record):
    fields = ('frontends', 'backends')

    def __init__(self, frontends=None, backends=None):
        self.frontends = dict(frontends or {})
        self.backends = dict(backends or {})

    def to_dict(self):
        return {
            'frontends': {name: fe.to_dict()
                          for name, fe in self.frontends.items()},
            'backends': {name: be.to_dict()
                         for name, be in self.backends.items()},
        }
