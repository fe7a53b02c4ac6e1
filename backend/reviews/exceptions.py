"""Error taxonomy for the review workflow.

Every service in ``reviews``, ``projects`` and ``rubrics`` raises one of these;
``portal.exceptions.custom_exception_handler`` turns them into
``{detail, code, status_code}`` responses.
"""


class ReviewWorkflowError(Exception):
    status_code = 400
    code = 'error'
    default_detail = 'Request could not be processed.'

    def __init__(self, detail=None, **extra):
        self.detail = detail or self.default_detail
        self.extra = extra
        super().__init__(self.detail)


class ReviewValidationError(ReviewWorkflowError):
    """Malformed input: bad marks, unknown role or component, missing deadline."""
    status_code = 400
    code = 'validation_error'
    default_detail = 'Invalid input.'


class NotFoundError(ReviewWorkflowError):
    status_code = 404
    code = 'not_found'
    default_detail = 'Not found.'


class StateConflictError(ReviewWorkflowError):
    """Operation is illegal in the current state (locked, already resolved, duplicate pending)."""
    status_code = 409
    code = 'state_conflict'
    default_detail = 'Operation not allowed in the current state.'


class AuthorizationError(ReviewWorkflowError):
    status_code = 403
    code = 'not_authorized'
    default_detail = 'You do not have permission to perform this action.'
