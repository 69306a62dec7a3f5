import logging

from django.core.exceptions import ObjectDoesNotExist, ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class NotFoundError(ObjectDoesNotExist):
    """Raised by services when a referenced row does not exist."""


def _validation_messages(exc):
    if hasattr(exc, 'message_dict'):
        return [message for messages in exc.message_dict.values() for message in messages]
    return list(exc.messages)


def _view_name(context):
    view = context.get('view')
    return view.__class__.__name__ if view is not None else 'api'


def api_exception_handler(exc, context):
    if isinstance(exc, DjangoValidationError):
        detail = ' '.join(_validation_messages(exc))
        logger.warning('%s rejected: %s', _view_name(context), detail)
        return Response({'detail': detail}, status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, ObjectDoesNotExist):
        detail = str(exc) or 'Not found.'
        logger.warning('%s rejected: %s', _view_name(context), detail)
        return Response({'detail': detail}, status=status.HTTP_404_NOT_FOUND)

    response = exception_handler(exc, context)
    if response is None:
        logger.exception('%s failed', _view_name(context))
    return response
