from .retry_transport import CANCEL_TOKEN_EXTENSION, RetryTransport

__all__ = ["CANCEL_TOKEN_EXTENSION", "RetryTransport"]
