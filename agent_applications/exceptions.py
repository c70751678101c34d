"""
Errors raised by the agent application workflow.

Each error knows the HTTP status it maps to so that views can turn it into a
JSON response at the boundary.
"""


class ApplicationError(Exception):
    status_code = 400
    default_message = 'The request could not be processed.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self):
        return {'success': False, 'message': self.message}


class ValidationError(ApplicationError):
    status_code = 422
    default_message = 'Validation failed'

    def __init__(self, errors, message=None):
        self.errors = errors
        super().__init__(message)

    def as_dict(self):
        data = super().as_dict()
        data['errors'] = self.errors
        return data


class ConflictError(ApplicationError):
    status_code = 409
    default_message = 'The request conflicts with an existing record.'


class StateError(ApplicationError):
    status_code = 422
    default_message = 'The operation is not allowed in the current state.'


class NotFoundError(ApplicationError):
    status_code = 404
    default_message = 'Not found.'


class PersistenceError(ApplicationError):
    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None, detail=None):
        self.detail = detail
        super().__init__(message)
