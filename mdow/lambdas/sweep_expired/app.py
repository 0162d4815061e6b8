import json
import logging
from typing import Any

from mdow.store import build_forwarder
from mdow.dao.exceptions import DAOError
from mdow.exceptions import MdowError
from mdow.utils import load_config, load_settings, app_prefix
from mdow.lambdas.sweep_expired.constants import SUCCESS, ERROR


logger = logging.getLogger(__name__)


def response_success(*, removed: int) -> str:
    return json.dumps(
        {
            'status': SUCCESS,
            'removed': int(removed),
            'message': f'Successfully pruned {removed} expired pastes',
        }
    )


def response_error(*, error: DAOError | MdowError) -> str:
    return json.dumps(
        {
            'status': ERROR,
            'message': 'Failed to prune expired pastes',
            'reason': str(error),
            'error': error.__class__.__name__,
        }
    )


def lambda_handler(event: dict, context: Any) -> str:
    """Prune expired pastes on the authoritative node

    Triggered by an EventBridge schedule. A failed sweep is only reported:
    expired pastes stay hidden from readers and the next schedule retries.

    Diagnostic responses:
        success:
            status: success
            removed: <number of pruned pastes>
            message: Successfully pruned <removed> expired pastes
        error:
            status: error
            message: Failed to prune expired pastes
            reason: <reason>
            error: <error class name> (e.g. AuthoritativeNodeUnavailableError, DataStoreError)

    Args:
        event (dict):
            EventBridge event payload.
        context (LambdaContext):
            AWS Lambda context object containing runtime information.

    Returns:
        str:
            JSON document with the sweep status.

    Example:
        >>> json.loads(lambda_handler({}, None))
        {'status': 'success', 'removed': 3, 'message': 'Successfully pruned 3 expired pastes'}
    """
    try:
        forwarder = build_forwarder(load_config('sweep_expired'), load_settings(), prefix=app_prefix())
        removed = forwarder.prune_expired()
    except (DAOError, MdowError) as error:
        logger.exception(
            'Failed to prune expired pastes.',
            extra={'event': ERROR, 'reason': str(error), 'error': error.__class__.__name__},
        )
        return response_error(error=error)
    else:
        logger.info(
            'Successfully pruned %s expired pastes.',
            removed,
            extra={'event': SUCCESS, 'removed': removed},
        )
        return response_success(removed=removed)
