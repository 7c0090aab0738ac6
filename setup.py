#!/usr/bin/env python
# -*- coding: utf-8 -*-

import os

from setuptools import setup, find_packages


def read(fname):
    buf = open(os.path.join(os.path.dirname(__file__), fname), 'rb').read()
    return buf.decode('utf8')


setup(
    name='docker-dispatch',
    version='0.1.0.dev1',
    description='Build reverse proxy frontends and backends from docker '
    'containers and swarm services.',
    long_description=read('README.rst'),
    author='Marc Brinkmann',
    author_email='git@marcbrinkmann.de',
    url='https://github.com/mbr/docker-pygen',
    license='MIT',
    packages=find_packages(exclude=['tests']),
    install_requires=['jinja2', 'click', 'docker'],
    extras_require={
        'test': ['pytest'],
    },
    data_files=[('templates', ['templates/traefik.toml.tpl'])],
    entry_points={
        'console_scripts': [
            'docker-dispatch = docker_dispatch.cli:main',
        ],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
    ])
