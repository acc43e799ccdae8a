"""Shared test fixtures for confdecode."""

from __future__ import annotations

import datetime as dt

import pytest

from confdecode.decode import DecodePath
from confdecode.parser.loader import TrackedLoader
from confdecode.value import Value, from_python


@pytest.fixture
def loader() -> TrackedLoader:
    return TrackedLoader()


@pytest.fixture
def sample_config() -> Value:
    return from_python(SAMPLE_CONFIG)


@pytest.fixture
def root(sample_config: Value) -> DecodePath:
    return DecodePath.new(sample_config, "Server configuration")


SAMPLE_CONFIG = {
    "server": {
        "host": "localhost",
        "port": 8080,
        "timeout": 2.5,
        "debug": False,
        "started": dt.datetime(1979, 5, 27, 7, 32, tzinfo=dt.timezone.utc),
        "mode": "production",
    },
    "upstreams": [
        {"name": "primary", "weight": 3},
        {"name": "backup", "weight": 1},
    ],
    "tags": ["web", "edge"],
}


SAMPLE_CONFIG_YAML = """\
server:
  host: localhost
  port: 8080
  timeout: 2.5
  debug: false
  started: 1979-05-27T07:32:00Z
  mode: production

upstreams:
  - name: primary
    weight: 3
  - name: backup
    weight: 1

tags:
  - web
  - edge
"""
