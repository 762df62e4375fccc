from contractrest.api.middleware.errors import problem_response, unhandled_exception_handler
from contractrest.api.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware", "problem_response", "unhandled_exception_handler"]
