"""Fold a snapshot of units into frontends and backends.

A new `Configuration` is built on every call; nothing is kept between
calls, so publishing the result is always a full replacement.
"""

import logging

from .extractors import (get_backend_name, get_basic_auth,
                         get_circuit_breaker, get_entrypoints,
                         get_frontend_name, get_frontend_rule,
                         get_ip_address, get_load_balancer, get_max_conn,
                         get_pass_host_header, get_priority, get_server_url,
                         get_weight)
from .filter import container_filter
from .model import Backend, Configuration, Frontend, Route, Server

log = logging.getLogger(__name__)


def build_frontend(unit, settings, backend_key):
    frontend_name = get_frontend_name(unit, settings)
    route = Route(get_frontend_rule(unit, settings))

    return Frontend(backend_key,
                    pass_host_header=get_pass_host_header(unit, settings),
                    entrypoints=get_entrypoints(unit, settings),
                    basic_auth=get_basic_auth(unit, settings),
                    priority=get_priority(unit, settings),
                    routes={'route-frontend-' + frontend_name: route})


def build_backend(unit, settings):
    return Backend(circuit_breaker=get_circuit_breaker(unit, settings),
                   load_balancer=get_load_balancer(unit, settings),
                   max_conn=get_max_conn(unit, settings))


def merge_policy(backend, declared, unit_name, backend_key):
    """Take policy a backend is still missing from a later unit.

    Settings that were already defined are kept; a unit disagreeing with
    them is logged and ignored.
    """
    for field in backend.policy_fields:
        value = getattr(declared, field)
        if value is None:
            continue

        current = getattr(backend, field)
        if current is None:
            setattr(backend, field, value)
        elif current != value:
            log.warning('%s sets %s of %s to %r, keeping %r from an '
                        'earlier unit', unit_name, field, backend_key, value,
                        current)


def load_config(units, settings):
    frontends = {}
    backends = {}

    for unit in units:
        if not container_filter(unit, settings):
            continue

        if get_ip_address(unit, settings) is None:
            log.warning('Skipping %s, no IP address could be resolved',
                        unit.name)
            continue

        backend_key = 'backend-' + get_backend_name(unit, settings)
        frontend_key = 'frontend-' + get_frontend_name(unit, settings)

        frontends[frontend_key] = build_frontend(unit, settings, backend_key)

        declared = build_backend(unit, settings)
        if backend_key not in backends:
            backends[backend_key] = declared
        else:
            merge_policy(backends[backend_key], declared, unit.name,
                         backend_key)

        backends[backend_key].servers['server-' + unit.name] = Server(
            get_server_url(unit, settings), get_weight(unit, settings))

    return Configuration(frontends, backends)
