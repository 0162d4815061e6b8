import json
import logging
from typing import Any

from mdow.models import PasteModel
from mdow.store import build_forwarder
from mdow.dao.exceptions import DataStoreError, PasteNotFoundError
from mdow.utils import load_config, load_settings, get_paste_url, app_prefix, guarantee_500_response
from mdow.lambdas.view_paste.constants import (
    MISSING_PASTE_ID,
    PASTE_NOT_FOUND,
    PASTE_SERVED,
    STORAGE_ERROR,
)


logger = logging.getLogger(__name__)


def response_200(*, paste: PasteModel) -> dict:
    return {
        'statusCode': 200,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(
            {
                'paste_id': paste.paste_id,
                'content': paste.content,
                'created_at': paste.created_at.isoformat(),
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


def response_404(message: str | None = None, error_code: str | None = None) -> dict:
    body = {'message': message or 'Not Found'}
    if error_code:
        body['errorCode'] = error_code
    return {
        'statusCode': 404,
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


@guarantee_500_response
def lambda_handler(event: dict, context: Any) -> dict:
    """Handle incoming API Gateway requests to view a paste

    This Lambda handler follows this procedure to view pastes:
    - Step 1: Extract paste id from request path
    - Step 2: Fetch the live paste from the local store
    - Step 3: Respond with the raw markdown and its timestamps

    Rendering markdown to HTML is left to the client.

    HTTP responses:
        200: Paste found
            body: paste_id, content, created_at, expires_at
        400: Bad client request
            message: missing paste id in path parameters
        404: Not found
            message: paste doesn't exist, has expired, or hasn't replicated yet
        500: Internal server error
            message: storage failure

    Args:
        event (dict):
            API Gateway event payload containing the paste_id path parameter.
        context (LambdaContext):
            AWS Lambda runtime context object (not used directly).

    Returns:
        dict:
            API Gateway-compatible response including statusCode, headers, and body.

    Example:
        >>> event = {'pathParameters': {'paste_id': 'aB3dE5gH7j'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        200
        >>> json.loads(response['body'])['content']
        '# Hello'
    """
    # 0- Get application's config
    app_config = load_config('view_paste')
    settings = load_settings()

    # 1- Extract paste id from request's path
    paste_id = (event.get('pathParameters') or {}).get('paste_id')
    if not paste_id:
        logger.info('Missing "paste_id" in path. Responding with 400.', extra={'event': MISSING_PASTE_ID})
        return response_400(message="missing 'paste_id' in path", error_code=MISSING_PASTE_ID)
    logger.debug('Client requested paste %s.', get_paste_url(paste_id, event))

    # 2- Fetch the live paste (reads never leave this node)
    try:
        forwarder = build_forwarder(app_config, settings, prefix=app_prefix())
        paste = forwarder.fetch(paste_id)
    except PasteNotFoundError:
        logger.info(
            'Paste not found or expired. Responding with 404.',
            extra={'paste_id': paste_id, 'event': PASTE_NOT_FOUND},
        )
        return response_404(message='This paste does not exist or has expired.', error_code=PASTE_NOT_FOUND)
    except DataStoreError:
        logger.exception('Failed to read paste. Responding with 500.', extra={'paste_id': paste_id, 'event': STORAGE_ERROR})
        return response_500(error_code=STORAGE_ERROR)

    # 3- Serve the paste
    logger.info('Serving paste. Responding with 200.', extra={'paste_id': paste_id, 'event': PASTE_SERVED})
    return response_200(paste=paste)
