"""
API error shaping.

Every error leaves the API as ``{"message": ...}``; validation errors also
carry the field-level ``errors`` map.
"""
import logging

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _first_message(detail):
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return ''
    if isinstance(detail, list):
        return _first_message(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.exception("Unhandled error in %s", view.__class__.__name__ if view else 'view')
        return Response({'message': 'Internal server error'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, exceptions.ValidationError):
        detail = exc.detail
        if isinstance(detail, dict):
            response.data = {'message': 'Validation error', 'errors': detail}
        else:
            response.data = {'message': _first_message(detail) or 'Validation error'}
    elif isinstance(exc, exceptions.NotAuthenticated):
        response.data = {'message': 'Unauthorized'}
    elif isinstance(exc, exceptions.APIException):
        response.data = {'message': _first_message(exc.detail)}

    return response
