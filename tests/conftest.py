"""Shared fixtures for management client tests."""

import json
from pathlib import Path

import pytest

from rmq_management.config import Settings
from rmq_management.serialization import JsonCodec

RESOURCES = Path(__file__).parent / "resources"

BASE_URL = "http://rabbit.test:15672/"


def load_resource(name: str) -> bytes:
    """Read a JSON fixture from tests/resources."""
    return (RESOURCES / name).read_bytes()


def load_json(name: str):
    return json.loads(load_resource(name))


@pytest.fixture
def codec() -> JsonCodec:
    return JsonCodec()


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a fake broker, independent of the environment."""
    return Settings(
        _env_file=None,
        rabbitmq_management_url=BASE_URL,
        rabbitmq_username="admin",
        rabbitmq_password="secret",
        request_timeout=5.0,
        disable_prometheus=True,
    )
