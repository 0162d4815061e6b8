"""Unit tests for the SweepExpired AWS Lambda handler.

Test coverage includes:
    1. Successful sweeps
       - Ensures pruning goes through the forwarder built from 'sweep_expired' config.
    2. Failed sweeps
       - Ensures store and configuration errors are reported, not raised.
"""

import json
from unittest.mock import MagicMock

import pytest

from mdow.lambdas.sweep_expired import app
from mdow.store import WriteForwarder
from mdow.dao.exceptions import DataStoreError
from mdow.exceptions import AuthoritativeNodeUnavailableError, BadConfigurationError
from mdow.utils.settings import PasteSettings


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture()
def event():
    return {
        'source': 'aws.events',
        'detail-type': 'Scheduled Event',
        'detail': {},
    }


@pytest.fixture
def forwarder():
    _forwarder = MagicMock(spec=WriteForwarder)
    _forwarder.prune_expired.return_value = 7
    return _forwarder


@pytest.fixture(autouse=True)
def setup(monkeypatch, forwarder):
    load_config = MagicMock(return_value={'redis': {'host': 'primary.internal', 'port': 6379, 'db': 0}})
    monkeypatch.setattr(app, 'load_config', load_config)
    monkeypatch.setattr(app, 'load_settings', lambda: PasteSettings())
    monkeypatch.setattr(app, 'build_forwarder', MagicMock(return_value=forwarder))
    monkeypatch.setattr(app, 'app_prefix', lambda: 'mdow:test')
    return load_config


# -------------------------------
# 1. Successful sweeps
# -------------------------------


def test_lambda_handler_prunes_expired_pastes(event, forwarder, setup):
    """Ensure the Lambda prunes through the forwarder and reports the count."""
    response = json.loads(app.lambda_handler(event, None))

    assert response == {
        'status': 'success',
        'removed': 7,
        'message': 'Successfully pruned 7 expired pastes',
    }
    setup.assert_called_once_with('sweep_expired')
    app.build_forwarder.assert_called_once_with(setup.return_value, PasteSettings(), prefix='mdow:test')
    forwarder.prune_expired.assert_called_once_with()


# -------------------------------
# 2. Failed sweeps
# -------------------------------


@pytest.mark.parametrize(
    'error',
    [
        AuthoritativeNodeUnavailableError("Can't prune_expired pastes: the authoritative node is unavailable."),
        DataStoreError('MISCONF'),
    ],
)
def test_lambda_handler_reports_store_errors(event, forwarder, error):
    """Ensure store errors are reported as an error status."""
    forwarder.prune_expired.side_effect = error

    response = json.loads(app.lambda_handler(event, None))

    assert response['status'] == 'error'
    assert response['message'] == 'Failed to prune expired pastes'
    assert response['reason'] == str(error)
    assert response['error'] == error.__class__.__name__


def test_lambda_handler_reports_configuration_errors(monkeypatch, event):
    """Ensure configuration errors are reported as an error status."""
    monkeypatch.setattr(app, 'load_config', MagicMock(side_effect=BadConfigurationError('no sweep_expired section')))

    response = json.loads(app.lambda_handler(event, None))

    assert response['status'] == 'error'
    assert response['error'] == 'BadConfigurationError'
