import logging

from .extractors import get_domain, get_port, has_frontend_rule

log = logging.getLogger(__name__)


def is_exposed(unit, settings):
    key = settings.label('enable')

    if key not in unit.labels:
        return settings.exposed_by_default

    # only the literal "false" opts out
    return unit.labels[key] != 'false'


def container_filter(unit, settings):
    if get_port(unit, settings) is None:
        log.debug('Filtering %s, no port found', unit.name)
        return False

    if not is_exposed(unit, settings):
        log.debug('Filtering %s, not exposed', unit.name)
        return False

    if not has_frontend_rule(unit, settings) and not get_domain(unit,
                                                                settings):
        log.debug('Filtering %s, no frontend rule and no domain', unit.name)
        return False

    return True
