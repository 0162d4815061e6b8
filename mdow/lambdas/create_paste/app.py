import json
import logging
from typing import Any

from mdow.models import PasteModel
from mdow.store import WriteForwarder, build_forwarder
from mdow.dao.exceptions import DataStoreError, DataStoreUnavailableError
from mdow.exceptions import AuthoritativeNodeUnavailableError, IdCollisionExhaustedError, WritesHaltedError
from mdow.constants import Defaults
from mdow.utils import load_config, load_settings, get_paste_url, app_prefix, guarantee_500_response
from mdow.lambdas.create_paste.constants import (
    INVALID_JSON,
    MISSING_CONTENT,
    INVALID_CONTENT,
    PASTE_CREATED,
    AUTHORITATIVE_UNAVAILABLE,
    WRITES_HALTED,
    ID_SPACE_EXHAUSTED,
    STORAGE_ERROR,
)


logger = logging.getLogger(__name__)

# Built on the first request of each execution environment and reused by later ones,
# so a write halt outlives the request that triggered it
_forwarder: WriteForwarder | None = None


def get_forwarder() -> WriteForwarder:
    """Return this execution environment's WriteForwarder, building it on first use

    Raises:
        DataStoreUnavailableError:
            If the local Redis node can't be reached. Nothing is cached then;
            the next request tries again.
    """
    global _forwarder
    if _forwarder is None:
        _forwarder = build_forwarder(load_config('create_paste'), load_settings(), prefix=app_prefix())
    return _forwarder


def response_201(*, paste: PasteModel, url: str) -> dict:
    return {
        'statusCode': 201,
        'headers': {
            'Content-Type': 'application/json',
            'Location': url,
        },
        'body': json.dumps(
            {
                'message': f'Successfully shared paste at {url}',
                'paste_id': paste.paste_id,
                'url': url,
                'expires_at': paste.expires_at.isoformat(),
            }
        ),
    }


def response_400(message: str | None = None, error_code: str | None = None) -> dict:
    base = 'Bad Request'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 400,
        'body': json.dumps(body),
    }


def response_500(message: str | None = None, error_code: str | None = None) -> dict:
    base = 'Internal Server Error'
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 500,
        'body': json.dumps(body),
    }


def response_503(*, retry_after: int, message: str | None = None, error_code: str | None = None) -> dict:
    body = {'message': message or 'Service Unavailable'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 503,
        'headers': {
            'Content-Type': 'application/json',
            'Retry-After': str(retry_after),
        },
        'body': json.dumps(body),
    }


@guarantee_500_response
def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Handle incoming API Gateway requests to share a markdown paste

    This Lambda handler follows this procedure to share pastes:
    - Step 1: Extract markdown content from request body
    - Step 2: Store the paste on the authoritative node (via WriteForwarder)
    - Step 3: Respond to user with 201 and the shareable URL

    HTTP responses:
        201: Paste created
            paste_id: newly generated paste id
            url: shareable URL of the paste
            expires_at: ISO 8601 moment after which the paste is gone
        400: Bad client request
            message: invalid JSON, missing/empty content or content that isn't valid UTF-8
        500: Internal server error
            message: id space exhausted or storage failure
        503: Service unavailable (retryable)
            message: authoritative node unreachable or writes halted

    Args:
        event (Dict[str, Any]):
            API Gateway event payload in Lambda Proxy format.
        context (Any):
            AWS Lambda context object containing runtime information.

    Returns:
        Dict[str, Any]:
            JSON-serializable response following API Gateway Lambda Proxy
            output format.

    Example:
        >>> event = {'body': '{"content": "# Hello"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])['url']
        'http://localhost:3000/view/aB3dE5gH7j'
    """
    # 1- Extract markdown content from request body
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON)

    content = request_body.get('content') if isinstance(request_body, dict) else None
    if not isinstance(content, str) or not content.strip():
        logger.info('Missing paste content. Responding with 400.', extra={'event': MISSING_CONTENT})
        return response_400(message="missing 'content' in JSON body", error_code=MISSING_CONTENT)

    try:
        content.encode('utf-8')
    except UnicodeEncodeError:
        logger.info('Paste content is not valid UTF-8. Responding with 400.', extra={'event': INVALID_CONTENT})
        return response_400(message="'content' must be valid UTF-8", error_code=INVALID_CONTENT)

    # 2- Store the paste on the authoritative node
    try:
        forwarder = get_forwarder()
        paste = forwarder.insert(content)
    except (AuthoritativeNodeUnavailableError, DataStoreUnavailableError):
        logger.warning('Authoritative node unavailable. Responding with 503.', extra={'event': AUTHORITATIVE_UNAVAILABLE})
        return response_503(
            retry_after=Defaults.UNAVAILABLE_RETRY_AFTER,
            message='Paste storage is temporarily unavailable. Try again shortly.',
            error_code=AUTHORITATIVE_UNAVAILABLE,
        )
    except WritesHaltedError:
        logger.error('Writes are halted. Responding with 503.', extra={'event': WRITES_HALTED})
        return response_503(
            retry_after=Defaults.UNAVAILABLE_RETRY_AFTER,
            message='Paste storage is not accepting new pastes right now.',
            error_code=WRITES_HALTED,
        )
    except IdCollisionExhaustedError:
        logger.exception('Paste id space exhausted. Responding with 500.', extra={'event': ID_SPACE_EXHAUSTED})
        return response_500(error_code=ID_SPACE_EXHAUSTED)
    except DataStoreError:
        logger.exception('Failed to store paste. Responding with 500.', extra={'event': STORAGE_ERROR})
        return response_500(error_code=STORAGE_ERROR)

    # 3- Return successful response to user
    url = get_paste_url(paste.paste_id, event)
    logger.info(
        'Paste created. Responding with 201.',
        extra={'event': PASTE_CREATED, 'paste_id': paste.paste_id, 'forwarded': forwarder.forwarding},
    )
    return response_201(paste=paste, url=url)
