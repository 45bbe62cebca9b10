import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class Conflict(APIException):
    """Duplicate records, double bookings and protected deletes."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Conflict with existing data.'
    default_code = 'conflict'


def _message(data):
    if isinstance(data, dict):
        if 'detail' in data:
            return str(data['detail'])
        return {k: [str(m) for m in v] if isinstance(v, list) else str(v) for k, v in data.items()}
    if isinstance(data, list):
        return ' '.join(str(m) for m in data)
    return str(data)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception('unhandled error in %s', context.get('view'))
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    code = getattr(exc, 'default_code', None) or 'api_error'
    headers = {h: resp[h] for h in ('WWW-Authenticate', 'Retry-After') if resp.has_header(h)}
    return Response({'ok': False, 'error': {'code': code, 'message': _message(resp.data)}},
                    status=resp.status_code, headers=headers)
