import pytest
from docker.errors import APIError

from docker_dispatch import extractors
from docker_dispatch.settings import ProviderSettings
from docker_dispatch.swarm import (endpoint_mode, is_global_service,
                                   list_tasks, parse_service, parse_task)
from docker_dispatch.synthesize import load_config

settings = ProviderSettings(domain='docker.localhost', swarm_mode=True)


def swarm_service(name='foo', labels=None, mode='vip', vips=(),
                  global_=False):
    return {
        'ID': 'service-' + name,
        'Spec': {
            'Name': name,
            'Labels': labels or {},
            'Mode': {'Global': {}} if global_ else {
                'Replicated': {'Replicas': 1}},
            'EndpointSpec': {'Mode': mode},
        },
        'Endpoint': {
            'VirtualIPs': [{'NetworkID': net_id, 'Addr': addr}
                           for net_id, addr in vips],
        },
    }


def swarm_task(task_id, slot=None, state=None, attachments=()):
    task = {'ID': task_id, 'ServiceID': 'service-container'}
    if slot is not None:
        task['Slot'] = slot
    if state is not None:
        task['Status'] = {'State': state}
    if attachments:
        task['NetworksAttachments'] = [
            {'Network': {'ID': net_id}, 'Addresses': [addr]}
            for net_id, addr in attachments]
    return task


class FakeTasksClient(object):
    def __init__(self, tasks=(), err=None):
        self._tasks = list(tasks)
        self.err = err
        self.filters = None

    def tasks(self, filters=None):
        self.filters = filters
        if self.err is not None:
            raise self.err
        return self._tasks


def test_parse_service_labels_and_name():
    unit = parse_service(swarm_service('test', {'traefik.port': '80'}), {})

    assert unit.name == 'test'
    assert unit.service_name == 'test'
    assert unit.labels == {'traefik.port': '80'}
    assert unit.ports == []


def test_parse_service_dnsrr_has_no_address():
    unit = parse_service(swarm_service(mode='dnsrr',
                                       vips=[('1', '10.0.0.2/24')]),
                         {'1': {'Name': 'foo'}})

    assert unit.dns_rr is True
    assert unit.networks == {}
    assert extractors.get_ip_address(unit, settings) is None


@pytest.mark.parametrize('service,networks,expected', [
    (swarm_service(vips=[('1', '10.11.12.13/24')]), {'1': {'Name': 'foo'}},
     '10.11.12.13'),
    (swarm_service(labels={'traefik.docker.network': 'barnet'},
                   vips=[('1', '10.11.12.13/24'), ('2', '10.11.12.99/24')]),
     {'1': {'Name': 'foonet'}, '2': {'Name': 'barnet'}}, '10.11.12.99'),
    (swarm_service(vips=[('9', '10.11.12.13/24')]), {'1': {'Name': 'foo'}},
     None),
])
def test_parse_service_virtual_ips(service, networks, expected):
    unit = parse_service(service, networks)

    assert extractors.get_ip_address(unit, settings) == expected


def test_endpoint_mode_defaults_to_vip():
    service = swarm_service()
    del service['Spec']['EndpointSpec']

    assert endpoint_mode(service) == 'vip'

    service['Endpoint']['Spec'] = {'Mode': 'dnsrr'}
    assert endpoint_mode(service) == 'dnsrr'


def test_is_global_service():
    assert is_global_service(swarm_service(global_=True))
    assert not is_global_service(swarm_service())


@pytest.mark.parametrize('tasks,is_global,expected', [
    ([swarm_task('id1', slot=1), swarm_task('id2', slot=2),
      swarm_task('id3', slot=3)], False,
     ['container.1', 'container.2', 'container.3']),
    ([swarm_task('id1'), swarm_task('id2'), swarm_task('id3')], True,
     ['container.id1', 'container.id2', 'container.id3']),
])
def test_task_names(tasks, is_global, expected):
    service_unit = parse_service(swarm_service('container'),
                                 {'1': {'Name': 'foo'}})

    names = [parse_task(task, service_unit, {}, is_global).name
             for task in tasks]

    assert names == expected


def test_task_inherits_service():
    service_unit = parse_service(
        swarm_service('web', {'traefik.port': '8000'},
                      vips=[('1', '10.0.0.2/24')]),
        {'1': {'Name': 'ingress'}})

    unit = parse_task(
        swarm_task('abc', slot=2, attachments=[('1', '10.0.0.7/24'),
                                               ('7', '10.9.0.1/24')]),
        service_unit, {'1': {'Name': 'ingress'}}, False)

    assert unit.name == 'web.2'
    assert unit.service_name == 'web'
    assert unit.labels == {'traefik.port': '8000'}
    assert unit.networks == {'ingress': '10.0.0.7'}


def test_list_tasks_keeps_running_in_order():
    service = swarm_service('container')
    service_unit = parse_service(service, {'1': {'Name': 'foo'}})
    client = FakeTasksClient([
        swarm_task('id1', slot=1, state='running'),
        swarm_task('id2', slot=2, state='pending'),
        swarm_task('id3', slot=3),
        swarm_task('id4', slot=4, state='running'),
        swarm_task('id5', slot=5, state='failed'),
    ])

    units = list_tasks(client, service['ID'], service_unit, {}, False)

    assert [u.name for u in units] == ['container.1', 'container.4']
    assert client.filters == {'service': 'service-container'}


def test_list_tasks_surfaces_client_errors():
    err = APIError('boom')
    service_unit = parse_service(swarm_service('container'), {})

    with pytest.raises(APIError) as exc:
        list_tasks(FakeTasksClient(err=err), 'service-container',
                   service_unit, {}, False)

    assert exc.value is err


def test_swarm_services_load_config():
    networks = {'1': {'Name': 'foo'}}
    auth = ('test:$apr1$H6uskkkW$IgXLP6ewTrSuBkTrqE8wj/,'
            'test2:$apr1$d9hr9HBB$4HxwgUir3HP4EsggP/QNo0')
    units = [
        parse_service(swarm_service('test1', {
            'traefik.port': '80',
            'traefik.backend': 'foobar',
            'traefik.frontend.entryPoints': 'http,https',
            'traefik.frontend.auth.basic': auth,
        }, vips=[('1', '127.0.0.1/24')]), networks),
        parse_service(swarm_service('test2', {
            'traefik.port': '80',
            'traefik.backend': 'foobar',
        }, vips=[('1', '127.0.0.1/24')]), networks),
    ]

    config = load_config(units, settings)

    fe1 = config.frontends['frontend-Host-test1-docker-localhost']
    assert fe1.basic_auth == [
        'test:$apr1$H6uskkkW$IgXLP6ewTrSuBkTrqE8wj/',
        'test2:$apr1$d9hr9HBB$4HxwgUir3HP4EsggP/QNo0',
    ]
    assert config.frontends['frontend-Host-test2-docker-localhost']\
        .basic_auth == []
    servers = config.backends['backend-foobar'].servers
    assert {name: srv.url for name, srv in servers.items()} == {
        'server-test1': 'http://127.0.0.1:80',
        'server-test2': 'http://127.0.0.1:80',
    }
