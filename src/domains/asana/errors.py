from utils.error.base_custom_error import BaseCustomError


class AsanaError(BaseCustomError):
    """
    Base exception class for all Asana related errors.
    """


class AsanaApiRequestError(AsanaError):
    """
    Raised when an Asana API call fails or returns an unexpected payload.
    """

    def __init__(self, message: str = "Asana API request failed", **metadata):
        super().__init__(message, **metadata)


class AsanaAuthenticationError(AsanaError):
    """
    Raised when no personal access token is available.
    """

    def __init__(self, message: str = "Asana access token is missing", **metadata):
        super().__init__(message, **metadata)


class AsanaSnapshotError(AsanaError):
    """
    Raised when a stored Asana snapshot is missing required sections.
    """

    def __init__(self, message: str = "Invalid Asana snapshot", **metadata):
        super().__init__(message, **metadata)
