"""Per-unit routing attributes.

Every extractor is a pure function of a unit and the provider settings. An
explicit label on the unit wins over the provider setting, which wins over
the built-in default.
"""

import logging
import re

from .errors import LabelNotFound, LabelParseError
from .labels import (get_bool_label_or_default, get_int_label_or_default,
                     get_label, get_label_or_default, parse_int, split_list)
from .model import CircuitBreaker, LoadBalancer, MaxConn

log = logging.getLogger(__name__)

LOOPBACK = '127.0.0.1'
DEFAULT_PROTOCOL = 'http'
DEFAULT_LB_METHOD = 'wrr'

_separators = re.compile(r'[\W_]+')


def normalize(name):
    return '-'.join(part for part in _separators.split(name) if part)


def get_sub_domain(name):
    return name.lstrip('/').replace('_', '-')


def get_backend_name(unit, settings):
    return get_label_or_default(unit, settings.label('backend'),
                                unit.service_name)


def get_domain(unit, settings):
    return get_label_or_default(unit, settings.label('domain'),
                                settings.domain)


def has_frontend_rule(unit, settings):
    return settings.label('frontend.rule') in unit.labels


def get_frontend_rule(unit, settings):
    try:
        return get_label(unit, settings.label('frontend.rule'))
    except LabelNotFound:
        return 'Host:{}.{}'.format(get_sub_domain(unit.service_name),
                                   get_domain(unit, settings))


def get_frontend_name(unit, settings):
    return normalize(get_frontend_rule(unit, settings))


def get_protocol(unit, settings):
    return get_label_or_default(unit, settings.label('protocol'),
                                DEFAULT_PROTOCOL)


def get_pass_host_header(unit, settings):
    return get_bool_label_or_default(unit,
                                     settings.label('frontend.passHostHeader'),
                                     True)


def get_priority(unit, settings):
    return get_int_label_or_default(unit, settings.label('frontend.priority'),
                                    0)


def get_weight(unit, settings):
    return get_int_label_or_default(unit, settings.label('weight'), 0)


def get_entrypoints(unit, settings):
    return split_list(get_label_or_default(
        unit, settings.label('frontend.entryPoints'), ''))


def get_basic_auth(unit, settings):
    # user:hash pairs are passed through untouched
    return split_list(get_label_or_default(
        unit, settings.label('frontend.auth.basic'), ''))


def get_load_balancer(unit, settings):
    method_key = settings.label('backend.loadbalancer.method')
    sticky_key = settings.label('backend.loadbalancer.sticky')

    if method_key not in unit.labels and sticky_key not in unit.labels:
        return None

    return LoadBalancer(
        get_label_or_default(unit, method_key, DEFAULT_LB_METHOD),
        get_bool_label_or_default(unit, sticky_key, False))


def get_circuit_breaker(unit, settings):
    try:
        return CircuitBreaker(get_label(
            unit, settings.label('backend.circuitbreaker.expression')))
    except LabelNotFound:
        return None


def get_max_conn(unit, settings):
    amount_key = settings.label('backend.maxconn.amount')
    func_key = settings.label('backend.maxconn.extractorfunc')

    if amount_key not in unit.labels or func_key not in unit.labels:
        return None

    try:
        amount = parse_int(amount_key, unit.labels[amount_key])
    except LabelParseError as e:
        log.debug('%s: ignoring max connections, %s', unit.name, e)
        return None

    return MaxConn(amount, unit.labels[func_key])


def is_backend_lb_swarm(unit, settings):
    return get_bool_label_or_default(
        unit, settings.label('backend.loadbalancer.swarm'), False)


def get_port(unit, settings):
    """Port to forward to, as a string, or ``None`` if there is none."""
    key = settings.label('port')

    if key in unit.labels:
        try:
            return str(parse_int(key, unit.labels[key]))
        except LabelParseError as e:
            log.debug('%s: %s, falling back to exposed ports', unit.name, e)

    if unit.ports:
        return str(unit.ports[0])


def get_ip_address(unit, settings):
    if unit.host_network:
        return LOOPBACK

    preferred = (unit.labels.get(settings.label('docker.network')),
                 settings.network)
    for net_name in preferred:
        if net_name and net_name in unit.networks:
            return unit.networks[net_name]

    # lexicographically first network
    for net_name in sorted(unit.networks):
        return unit.networks[net_name]


def get_server_url(unit, settings):
    return '{}://{}:{}'.format(get_protocol(unit, settings),
                               get_ip_address(unit, settings),
                               get_port(unit, settings))
