from functools import partial
import json
import logging
from queue import Queue, Empty
from threading import Thread
import sys

import click
import jinja2
from docker import APIClient
from docker.errors import DockerException

from .errors import OrchestratorQueryError
from .extractors import (get_backend_name, get_frontend_rule, get_ip_address,
                         get_port)
from .filter import container_filter
from .settings import (DEFAULT_DOMAIN, DEFAULT_LABEL_PREFIX, DEFAULT_URL,
                       ProviderSettings)
from .sources import make_source
from .synthesize import load_config
from .util import Table, exit_err, write_atomic

ENVVAR_PREFIX = 'DOCKER_DISPATCH'
EVENT_TYPES = {
    'container': ['create', 'destroy', 'die', 'kill', 'oom', 'pause',
                  'restart', 'start', 'stop', 'unpause'],
    'service': ['create', 'remove', 'update'],
    'network': ['connect', 'disconnect'],
}

info = partial(click.echo, err=True)

# helpful: https://docs.docker.com/engine/reference/api/images/event_state.png

env = jinja2.Environment(
    # undefined=jinja2.StrictUndefined,
    extensions=[
        'jinja2.ext.loopcontrols',
        'jinja2.ext.do',
    ],
    keep_trailing_newline=True, )
env.filters['quote'] = json.dumps


def events_listener(cl, q):
    # this *should* be threadsafe, as it is going to a different url endpoint
    for event in cl.events(decode=True):
        q.put(event)


def wait_for_changes(q, timeout, dirty=False):
    while True:
        try:
            event = q.get(block=True, timeout=timeout)
        except Empty:
            if not dirty:
                continue

            info('Events settled after {} seconds, updating'.format(timeout))
            return
        else:
            actions = EVENT_TYPES.get(event.get('Type'))
            if actions is None:
                continue

            info('Received {} event {}'.format(event['Type'],
                                               event.get('Action')))

            if event.get('Action') in actions:
                dirty = True


def fetch_units(obj):
    try:
        return obj['source'].fetch()
    except OrchestratorQueryError as e:
        exit_err(str(e))


def render(tpl, config):
    return tpl.render(config=config,
                      frontends=config.frontends,
                      backends=config.backends)


def output(result, output_file):
    if output_file:
        write_atomic(output_file, result)
    else:
        sys.stdout.write(result)

    info('Wrote {}'.format(output_file or 'to stdout'))


@click.group()
@click.option('-u',
              '--url',
              default=DEFAULT_URL,
              help='The url used to connect to the docker server [default: ' +
              DEFAULT_URL + ']')
@click.option('--api-timeout',
              type=int,
              default=None,
              help='Seconds before a docker API call is aborted')
@click.option('-d',
              '--domain',
              default=DEFAULT_DOMAIN,
              show_default=True,
              help='Domain used in default frontend rules')
@click.option('--exposed-by-default/--not-exposed-by-default',
              default=True,
              show_default=True,
              help='Expose units that carry no enable label')
@click.option('-p',
              '--label-prefix',
              default=DEFAULT_LABEL_PREFIX,
              show_default=True,
              help='Prefix of the labels read from units')
@click.option('-n',
              '--network',
              default=None,
              help='Network to take addresses from when a unit has several')
@click.option('--swarm/--no-swarm',
              'swarm_mode',
              default=False,
              help='Discover swarm services instead of containers')
@click.option('-v', '--verbose', is_flag=True, default=False)
@click.pass_context
def cli(ctx, url, api_timeout, domain, exposed_by_default, label_prefix,
        network, swarm_mode, verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    # initialize Client
    kwargs = {'timeout': api_timeout} if api_timeout else {}
    try:
        cl = APIClient(base_url=url, version='auto', **kwargs)

        # output version to show the connected succeeded
        v = cl.version()
    except DockerException as e:
        exit_err('Could not connect to docker at {}: {}'.format(url, e))

    info('Connected to Docker {v[Version]}, api version '
         '{v[ApiVersion]}.'.format(v=v))

    settings = ProviderSettings(domain=domain,
                                exposed_by_default=exposed_by_default,
                                label_prefix=label_prefix,
                                network=network,
                                swarm_mode=swarm_mode)

    ctx.obj = {'cl': cl,
               'settings': settings,
               'source': make_source(cl, settings)}


@cli.command('list')
@click.pass_obj
def list_units(obj):
    settings = obj['settings']
    units = fetch_units(obj)

    tbl = Table([24, 15, 5, 20, 32])
    info(tbl.format_row('Unit', 'IP', 'Port', 'Backend', 'Rule', ))
    info(tbl.format_line())

    for unit in sorted(units, key=lambda unit: unit.name):
        col = 'green' if container_filter(unit, settings) else 'red'

        info(click.style(
            tbl.format_row(unit.name,
                           get_ip_address(unit, settings),
                           get_port(unit, settings),
                           get_backend_name(unit, settings),
                           get_frontend_rule(unit, settings), ),
            fg=col))


@cli.command()
@click.option('-o',
              '--output-file',
              help='Write the configuration to this file',
              type=click.Path())
@click.pass_obj
def dump(obj, output_file):
    config = load_config(fetch_units(obj), obj['settings'])

    output(json.dumps(config.to_dict(), indent=2) + '\n', output_file)


@cli.command()
@click.option('-o',
              '--output-file',
              help='Output file for the rendered template',
              type=click.Path())
@click.option('-w',
              '--watch',
              is_flag=True,
              default=False,
              help='Wait for events and rerun after each change')
@click.option('-t',
              '--timeout',
              default=5,
              help='Seconds to wait before updating; reset after each event')
@click.option('-s',
              '--signal',
              'notifications',
              type=(str, str),
              multiple=True,
              help='Signal a container after writing. Ex: "-s HUP nginx"')
@click.argument('template', type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def generate(obj, template, output_file, watch, timeout, notifications):
    cl = obj['cl']
    settings = obj['settings']

    if watch:
        q = Queue()
        t = Thread(target=events_listener, args=(cl, q), daemon=True)
        t.start()

    while True:
        failed = False
        try:
            config = load_config(obj['source'].fetch(), settings)
        except OrchestratorQueryError as e:
            if not watch:
                exit_err(str(e))

            info('Skipping update, keeping previous output: {}'.format(e))
            failed = True
        else:
            with open(template) as tpl_src:
                tpl = env.from_string(tpl_src.read())

            result = render(tpl, config)
            info('Successfully rendered template {}'.format(template))

            output(result, output_file)

            # send notifications
            for signal, cid in notifications:
                info('Sending {} to {}'.format(signal, cid))
                try:
                    cl.kill(cid, int(signal) if signal.isnumeric() else signal)
                except DockerException as e:
                    info('Error ignored: {}'.format(e))

        if not watch:
            # exit, we're done!
            sys.exit(0)

        # swarm tasks change state without events reaching us, so poll too
        wait_for_changes(q, timeout, dirty=failed or settings.swarm_mode)


def main():
    cli(auto_envvar_prefix=ENVVAR_PREFIX)
