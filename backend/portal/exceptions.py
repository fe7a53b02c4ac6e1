import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from reviews.exceptions import ReviewWorkflowError

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    if isinstance(exc, ReviewWorkflowError):
        view = context.get('view')
        logger.warning('%s in %s: %s', exc.code, view.__class__.__name__ if view else '-', exc.detail)
        data = {'detail': exc.detail, 'code': exc.code, 'status_code': exc.status_code}
        data.update(exc.extra)
        return Response(data, status=exc.status_code)

    response = exception_handler(exc, context)

    if response is not None and isinstance(response.data, dict):
        response.data['status_code'] = response.status_code
        response.data.setdefault('detail', str(exc))

    return response
