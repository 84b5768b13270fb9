from rest_framework.response import Response


class SuccessResponse(Response):
    def __init__(self, data=None, message='Success', status=200, **kwargs):
        response_data = {
            'success': True,
            'message': message,
            'data': data if data is not None else {}
        }
        kwargs.setdefault('content_type', 'application/json')
        super().__init__(response_data, status=status, **kwargs)


class ErrorResponse(Response):
    """
    Declined request envelope. Domain errors pass ``code`` so clients can
    tell "insufficient_funds" from "already_declared" without parsing text.
    """
    def __init__(self, message='Error', status=400, errors=None, code=None, **kwargs):
        errors = dict(errors or {})
        if code is not None:
            errors['code'] = code
        response_data = {
            'success': False,
            'message': message,
            'errors': errors
        }
        kwargs.setdefault('content_type', 'application/json')
        super().__init__(response_data, status=status, **kwargs)
