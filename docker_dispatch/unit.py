class Unit(object):
    """One discoverable upstream: a container, a Swarm service or a task.

    ``networks`` maps network names to addresses, ``ports`` lists the
    exposed ports, tcp first. ``service_name`` is what tasks of the same
    service have in common; for everything else it is the unit's name.
    """

    def __init__(self,
                 name,
                 labels=None,
                 networks=None,
                 ports=None,
                 host_network=False,
                 service_name=None,
                 dns_rr=False):
        self.name = name
        self.labels = dict(labels or {})
        self.networks = dict(networks or {})
        self.ports = list(ports or [])
        self.host_network = host_network
        self.service_name = service_name or name
        self.dns_rr = dns_rr

    def __repr__(self):
        return '<Unit {!r}>'.format(self.name)

    @classmethod
    def from_container(cls, container):
        """Normalize a ``docker inspect`` record."""
        config = container.get('Config') or {}
        host_config = container.get('HostConfig') or {}
        net_settings = container.get('NetworkSettings') or {}

        networks = {}
        for net_name, endpoint in (net_settings.get('Networks') or {}).items():
            addr = (endpoint or {}).get('IPAddress')
            if addr:
                networks[net_name] = addr.split('/', 1)[0]

        name = (container.get('Name') or container.get('Id', '')).lstrip('/')

        return cls(name,
                   labels=config.get('Labels'),
                   networks=networks,
                   ports=exposed_ports(net_settings.get('Ports')),
                   host_network=host_config.get('NetworkMode') == 'host')


def exposed_ports(port_map):
    """Exposed ports, lowest tcp port first, other protocols last."""
    tcp, other = set(), set()
    for key in (port_map or {}).keys():
        port, _, proto = key.partition('/')
        try:
            port = int(port)
        except ValueError:
            continue
        (tcp if proto in ('', 'tcp') else other).add(port)

    return sorted(tcp) + sorted(other - tcp)
