"""Resource base class.

A resource binds one session (shared, never owned) and answers capability
queries for the operations its subclass declares in ``OPERATIONS``.
Queries read the session's capability set on every call.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from postex.kernel.capabilities import OperationRequirement
from postex.kernel.exceptions import UnsupportedCapabilityError
from postex.kernel.logging import get_logger
from postex.kernel.ports.detection import session_capabilities, session_name
from postex.kernel.ports.primitives import Primitive
from postex.kernel.ports.session import Session

logger = get_logger(__name__)


class Resource:
    """High-level object built on whichever primitives a session implements."""

    OPERATIONS: ClassVar[Mapping[str, OperationRequirement]] = {}

    def __init__(self, session: Session) -> None:
        # Primitive methods are looked up on demand once a requirement check passes
        self.session: Any = session

    def supports(self, *operations: str) -> bool:
        """Return True if every named operation can run against the session.

        Unknown operation names are never supported.
        """
        capabilities = session_capabilities(self.session)
        for operation in operations:
            requirement = self.OPERATIONS.get(operation)
            if requirement is None or not requirement.is_satisfied_by(capabilities):
                return False
        return True

    def supported_operations(self) -> list[str]:
        """Return the names of all currently satisfiable operations."""
        capabilities = session_capabilities(self.session)
        return [
            operation
            for operation, requirement in self.OPERATIONS.items()
            if requirement.is_satisfied_by(capabilities)
        ]

    def missing_primitives(self, operation: str) -> tuple[Primitive, ...]:
        """Return the primitives *operation* lacks on this session."""
        requirement = self.OPERATIONS[operation]
        return requirement.missing_from(session_capabilities(self.session))

    def has_primitive(self, primitive: Primitive) -> bool:
        """Return True if the session implements *primitive*."""
        return primitive in session_capabilities(self.session)

    def _require(self, operation: str) -> None:
        """Raise before doing any I/O if *operation* cannot run here.

        Raises
        ------
        UnsupportedCapabilityError
            Naming the missing primitive(s)
        """
        requirement = self.OPERATIONS[operation]
        capabilities = session_capabilities(self.session)
        missing = requirement.missing_from(capabilities)
        if missing:
            any_of = not any(p in missing for p in requirement.required)
            logger.debug(
                "Refusing {operation}: missing {missing}",
                operation=operation,
                missing=[str(p) for p in missing],
            )
            raise UnsupportedCapabilityError(
                operation, missing, session=session_name(self.session), any_of=any_of
            )

    def _require_primitive(self, operation: str, primitive: Primitive) -> None:
        """Raise if one specific (conditionally needed) primitive is absent."""
        if not self.has_primitive(primitive):
            raise UnsupportedCapabilityError(
                operation, [primitive], session=session_name(self.session)
            )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} session={session_name(self.session)!r}>"


__all__ = ["Resource"]
