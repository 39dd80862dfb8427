"""Core exception hierarchy for postex.

This module provides a centralized exception hierarchy so that
capability-adaptive callers can tell "this session will never support
that" apart from "the connection just broke". All postex exceptions
inherit from PostExError for easy exception handling.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from postex.kernel.ports.primitives import Primitive

# ============================================================================
# Base Exception
# ============================================================================


class PostExError(Exception):
    """Base exception for all postex errors.

    This is the root exception that all postex-specific exceptions inherit from.
    Catch this to handle all postex errors.
    """

    pass


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(PostExError):
    """Raised when configuration is invalid or missing.

    Examples
    --------
    Example usage::

        raise ConfigurationError("shell", "delimiter cannot be empty")
    """

    def __init__(self, component: str, reason: str) -> None:
        """Initialize configuration error.

        Args
        ----
            component: Name of the component with invalid configuration
            reason: Explanation of what's wrong
        """
        super().__init__(f"Configuration error in '{component}': {reason}")
        self.component = component
        self.reason = reason


# ============================================================================
# Capability Errors
# ============================================================================


class UnsupportedCapabilityError(PostExError, NotImplementedError):
    """Raised when an operation needs primitives the session does not implement.

    The error is raised before any remote command is attempted.

    Examples
    --------
    Example usage::

        raise UnsupportedCapabilityError("chown", [Primitive.FS_CHOWN], session="10.0.0.5:4444")
    """

    def __init__(
        self,
        operation: str,
        missing: Sequence[Primitive],
        session: str | None = None,
        *,
        any_of: bool = False,
    ) -> None:
        """Initialize unsupported capability error.

        Args
        ----
            operation: Name of the high-level operation that was refused
            missing: The primitive(s) the session lacks
            session: Display name of the session (optional)
            any_of: True when any single one of ``missing`` would have sufficed
        """
        names = ", ".join(str(primitive) for primitive in missing)
        if any_of and len(missing) > 1:
            names = f"one of {names}"
        target = f"Session '{session}'" if session else "Session"
        super().__init__(f"{target} cannot perform '{operation}': missing primitive(s) {names}")
        self.operation = operation
        self.missing = tuple(missing)
        self.session = session


# ============================================================================
# Resource Errors
# ============================================================================


class NotFoundError(PostExError):
    """Raised when the remote host reports that a path does not exist.

    Examples
    --------
    Example usage::

        raise NotFoundError("/etc/shadow.bak")
    """

    def __init__(self, path: str, reason: str = "no such file or directory") -> None:
        """Initialize not found error.

        Args
        ----
            path: The remote path that could not be found
            reason: Explanation (defaults to ENOENT wording)
        """
        super().__init__(f"{reason}: {path!r}")
        self.path = path
        self.reason = reason


class ClosedResourceError(PostExError, ValueError):
    """Raised when a closed file, directory or process handle is used."""

    def __init__(self, resource: str) -> None:
        """Initialize closed resource error.

        Args
        ----
            resource: Description of the closed resource (e.g. ``"directory /tmp"``)
        """
        super().__init__(f"I/O operation on closed {resource}")
        self.resource = resource


class InvalidArgumentError(PostExError, ValueError):
    """Raised for out-of-range positions and unrecognized arguments.

    Examples
    --------
    Example usage::

        raise InvalidArgumentError("position", "must be within [0, 3)", value=3)
    """

    def __init__(self, argument: str, constraint: str, value: object = None) -> None:
        """Initialize invalid argument error.

        Args
        ----
            argument: Name of the offending argument
            constraint: Description of the violated constraint
            value: The invalid value (optional)
        """
        if value is not None:
            msg = f"Invalid argument '{argument}': {constraint} (got {value!r})"
        else:
            msg = f"Invalid argument '{argument}': {constraint}"
        super().__init__(msg)
        self.argument = argument
        self.constraint = constraint
        self.value = value


class DescriptorError(PostExError):
    """Raised when a descriptor-only operation is used without an open descriptor."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"'{operation}' requires an open file descriptor")
        self.operation = operation


# ============================================================================
# Transport Errors
# ============================================================================


class SessionConnectionError(PostExError, ConnectionError):
    """Raised when the transport breaks in the middle of an exchange.

    Covers end-of-stream before both framing delimiters were seen and
    payloads that cannot be decoded.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"Session connection error: {reason}")
        self.reason = reason


__all__ = [
    # Base
    "PostExError",
    # Configuration
    "ConfigurationError",
    # Capability
    "UnsupportedCapabilityError",
    # Resource
    "ClosedResourceError",
    "DescriptorError",
    "InvalidArgumentError",
    "NotFoundError",
    # Transport
    "SessionConnectionError",
]
