from utils.error.base_custom_error import BaseCustomError


class FlowMetricsError(BaseCustomError):
    """
    Base exception class for all flow metrics errors.
    """


class MalformedEvent(FlowMetricsError):
    """
    Raised when an item's event has an unparseable timestamp or stage name.
    The item is dropped from the run.
    """

    def __init__(self, message: str = "Malformed move event", **metadata):
        super().__init__(message, **metadata)


class InvalidHorizon(FlowMetricsError):
    """
    Raised when a project's horizon cannot be parsed or lies after the current time.
    Fatal for that project only.
    """

    def __init__(self, message: str = "Invalid horizon", **metadata):
        super().__init__(message, **metadata)


class InvalidProjectConfig(FlowMetricsError):
    """
    Raised when a project cannot be processed with its configuration
    (for example, no tracked stages). Fatal for that project only.
    """

    def __init__(self, message: str = "Invalid project configuration", **metadata):
        super().__init__(message, **metadata)


class UnknownStage(FlowMetricsError):
    """
    A configured tracked or done stage that no event ever moved into.
    Reported as a warning; its series stays zero/absent.
    """

    def __init__(self, message: str = "Configured stage never observed", **metadata):
        super().__init__(message, **metadata)


class EmptyProjectData(FlowMetricsError):
    """
    A project without any usable items. Reported as a warning; the series is still
    emitted with every week present and all counts zero.
    """

    def __init__(self, message: str = "Project has no items", **metadata):
        super().__init__(message, **metadata)
