"""Capability registry: which primitives each high-level operation needs.

Every :class:`~postex.kernel.resource.Resource` subclass declares a static
``OPERATIONS`` table mapping an operation name to an
:class:`OperationRequirement`. The table is plain data; evaluating it
against a session's live capability set answers "can this operation
succeed here" without attempting it.

Example
-------
.. code-block:: python

    OPERATIONS = {
        "chmod": requires(Primitive.FS_CHMOD),
        "read": requires(alternatives=(Primitive.FILE_READ, Primitive.FS_READFILE)),
        "join": requires(),
    }
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from postex.kernel.ports.primitives import Primitive


@dataclass(frozen=True, slots=True)
class OperationRequirement:
    """Primitive dependencies of one operation.

    Attributes
    ----------
    required : tuple[Primitive, ...]
        Every one of these must be implemented
    alternatives : tuple[Primitive, ...]
        When non-empty, at least one of these must be implemented
    optional : tuple[Primitive, ...]
        Used when present, never needed
    """

    required: tuple[Primitive, ...] = ()
    alternatives: tuple[Primitive, ...] = ()
    optional: tuple[Primitive, ...] = ()

    def is_satisfied_by(self, capabilities: frozenset[Primitive]) -> bool:
        """Return True if *capabilities* can run the operation."""
        return not self.missing_from(capabilities)

    def missing_from(self, capabilities: frozenset[Primitive]) -> tuple[Primitive, ...]:
        """Return the unmet primitives (all alternatives when none is present)."""
        missing = tuple(p for p in self.required if p not in capabilities)
        if self.alternatives and not any(p in capabilities for p in self.alternatives):
            missing += self.alternatives
        return missing

    @property
    def primitives(self) -> tuple[Primitive, ...]:
        """All primitives the operation may touch, in declaration order."""
        return self.required + self.alternatives + self.optional


def requires(
    *required: Primitive,
    alternatives: Iterable[Primitive] = (),
    optional: Iterable[Primitive] = (),
) -> OperationRequirement:
    """Build an :class:`OperationRequirement` (an empty call means pure bookkeeping)."""
    return OperationRequirement(
        required=tuple(required),
        alternatives=tuple(alternatives),
        optional=tuple(optional),
    )


def missing_primitives(
    requirement: OperationRequirement, capabilities: Iterable[Primitive]
) -> tuple[Primitive, ...]:
    """Return what *requirement* lacks from an arbitrary capability collection."""
    return requirement.missing_from(frozenset(capabilities))


def shell_commands(*names: str) -> dict[str, OperationRequirement]:
    """Requirement table for operations that are a single ``shell_exec`` each."""
    requirement = requires(Primitive.SHELL_EXEC)
    return dict.fromkeys(names, requirement)


__all__ = ["OperationRequirement", "missing_primitives", "requires", "shell_commands"]
