"""
Custom exceptions for the algorithms package.
"""

class CritraceError(Exception):
    """Base exception for critrace errors.

    Parameters
    ----------
    message : str
        The error message.
    """

    def __init__(self, message: str):
        super().__init__(message)


class ConvergenceError(CritraceError):
    """Raised when an algorithm fails to converge.

    Parameters
    ----------
    message : str
        The error message.
    """

    def __init__(self, message: str):
        super().__init__(message)


class BackendError(CritraceError):
    """Raised when an exception occurs in a backend.

    Parameters
    ----------
    message : str
        The error message.
    """

    def __init__(self, message: str):
        super().__init__(message)


class EngineError(CritraceError):
    """Raised when an exception occurs in the engine.

    Parameters
    ----------
    message : str
        The error message.
    """

    def __init__(self, message: str):
        super().__init__(message)


class InvalidInputError(CritraceError, ValueError):
    """Raised for structurally unsupported inputs.

    Examples are compositions with more than one species at exactly zero
    concentration, a secondary perturbation that cannot be taken without
    producing negative concentrations, or a singular tangent system.
    Retrying with the same input cannot succeed.

    Parameters
    ----------
    message : str
        The error message.
    """

    def __init__(self, message: str):
        super().__init__(message)


class NonFiniteResultError(CritraceError):
    """Raised when a solve produces a non-finite coordinate.

    Parameters
    ----------
    message : str
        The error message.
    """

    def __init__(self, message: str):
        super().__init__(message)


class IntegrationError(CritraceError):
    """Raised when the step controller cannot produce an acceptable step.

    Parameters
    ----------
    message : str
        The error message.
    """

    def __init__(self, message: str):
        super().__init__(message)
