"""Swarm services and their tasks as units.

``networks`` is always a registry of network records keyed by network ID,
as returned by the networks endpoint of the Docker API.
"""

import logging

from .unit import Unit

log = logging.getLogger(__name__)

TASK_STATE_RUNNING = 'running'
ENDPOINT_MODE_VIP = 'vip'
ENDPOINT_MODE_DNSRR = 'dnsrr'


def strip_cidr(addr):
    return addr.split('/', 1)[0]


def is_global_service(service):
    return 'Global' in (service['Spec'].get('Mode') or {})


def endpoint_mode(service):
    spec = service['Spec'].get('EndpointSpec') or \
        (service.get('Endpoint') or {}).get('Spec') or {}
    return spec.get('Mode') or ENDPOINT_MODE_VIP


def parse_service(service, networks):
    spec = service['Spec']
    unit = Unit(spec['Name'], labels=spec.get('Labels'))

    if endpoint_mode(service) == ENDPOINT_MODE_DNSRR:
        log.debug('%s uses dns round-robin, no virtual IP to resolve',
                  unit.name)
        unit.dns_rr = True
        return unit

    for vip in (service.get('Endpoint') or {}).get('VirtualIPs') or []:
        network = networks.get(vip.get('NetworkID'))
        if network is None:
            log.debug('%s: network %s not found', unit.name,
                      vip.get('NetworkID'))
            continue
        unit.networks[network['Name']] = strip_cidr(vip['Addr'])

    return unit


def parse_task(task, service_unit, networks, is_global):
    if is_global:
        name = '{}.{}'.format(service_unit.name, task['ID'])
    else:
        name = '{}.{}'.format(service_unit.name, task.get('Slot'))

    unit = Unit(name,
                labels=service_unit.labels,
                service_name=service_unit.name)

    for attachment in task.get('NetworksAttachments') or []:
        network_id = (attachment.get('Network') or {}).get('ID')
        network = networks.get(network_id)
        addresses = attachment.get('Addresses') or []
        if network is None or not addresses:
            continue
        unit.networks[network['Name']] = strip_cidr(addresses[0])

    return unit


def task_state(task):
    return (task.get('Status') or {}).get('State', '')


def list_tasks(client, service_id, service_unit, networks, is_global):
    """Return one unit per running task of a service.

    Errors raised by ``client`` are not caught here.
    """
    units = []

    for task in client.tasks(filters={'service': service_id}):
        if task_state(task) != TASK_STATE_RUNNING:
            continue
        units.append(parse_task(task, service_unit, networks, is_global))

    return units
