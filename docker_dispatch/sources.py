"""Where units come from: plain containers, or Swarm services and tasks.

Both sources expose ``fetch()``, which takes a full snapshot and returns a
list of units. Any failure talking to Docker is raised as
`OrchestratorQueryError`, so a caller can skip the cycle as a whole.
"""

import logging

from docker.errors import DockerException, NotFound

from .errors import OrchestratorQueryError
from .extractors import is_backend_lb_swarm
from .swarm import is_global_service, list_tasks, parse_service
from .unit import Unit

log = logging.getLogger(__name__)


class ContainerSource(object):
    def __init__(self, client, settings):
        self.client = client
        self.settings = settings

    def fetch(self):
        try:
            return self._fetch()
        except (DockerException, OSError) as e:
            raise OrchestratorQueryError(
                'Could not list containers: {}'.format(e))

    def _fetch(self):
        units = []
        for summary in self.client.containers():
            try:
                container = self.client.inspect_container(summary['Id'])
            except NotFound:
                # gone between listing and inspecting
                log.debug('Container %s disappeared', summary['Id'])
                continue
            units.append(Unit.from_container(container))
        return units


class SwarmSource(object):
    def __init__(self, client, settings):
        self.client = client
        self.settings = settings

    def fetch(self):
        try:
            return self._fetch()
        except (DockerException, OSError) as e:
            raise OrchestratorQueryError(
                'Could not list swarm services: {}'.format(e))

    def network_registry(self):
        return {net['Id']: net
                for net in self.client.networks(
                    filters={'driver': 'overlay'})}

    def _fetch(self):
        networks = self.network_registry()

        units = []
        for service in self.client.services():
            service_unit = parse_service(service, networks)

            if is_backend_lb_swarm(service_unit, self.settings):
                units.append(service_unit)
                continue

            units.extend(list_tasks(self.client, service['ID'], service_unit,
                                    networks, is_global_service(service)))
        return units


def make_source(client, settings):
    if settings.swarm_mode:
        return SwarmSource(client, settings)
    return ContainerSource(client, settings)
