"""
Domain exceptions raised by the service layer.
Routers translate them into HTTP responses.
"""


class TimelineAPIError(Exception):
    """Base exception"""

    pass


class TimelineNotFoundError(TimelineAPIError):
    """Timeline does not exist or is not owned by the caller"""

    pass


class ResourceNotFoundError(TimelineAPIError):
    """Category, event or vendor does not exist or is not owned by the caller"""

    pass


class InvalidReferenceError(TimelineAPIError):
    """Request references a category or vendor the caller cannot use here"""

    pass


class UserAlreadyExistsError(TimelineAPIError):
    """Email or username already registered"""

    pass


class ShareAccessDeniedError(TimelineAPIError):
    """
    Public share token cannot be used.

    Raised for unknown, revoked and expired tokens and for shares whose timeline
    is gone. The cases are not distinguished.
    """

    def __init__(self) -> None:
        super().__init__("Timeline share not found")
