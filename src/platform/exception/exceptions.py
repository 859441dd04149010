class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    retryable: bool = False

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class UpstreamError(CustomBaseError):
    """A collaborator outside the process (gateway, identity provider) failed."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 502)


class StoreError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 503)
