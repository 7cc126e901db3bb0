from __future__ import annotations

import pytest
from flask import Flask
from flask.testing import FlaskClient

from forecast_backend.app import create_app
from forecast_backend.app.config import TestingConfig


@pytest.fixture()
def app() -> Flask:
    return create_app(TestingConfig)


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    with app.test_client() as test_client:
        yield test_client
