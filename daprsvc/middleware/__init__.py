from .invocation import InvocationInterceptor, is_invocation_request
from .request_logging import add_request_logging

__all__ = ["InvocationInterceptor", "is_invocation_request", "add_request_logging"]
