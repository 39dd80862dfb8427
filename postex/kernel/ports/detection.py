"""Capability detection for session objects.

Sessions built on :class:`~postex.drivers.sessions.base.BaseSession` carry
an explicit ``capabilities`` set. Foreign objects (test doubles, ad-hoc
transports) get one derived from the primitive methods their class
defines; the result is computed once per class and cached.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from postex.kernel.ports.primitives import Primitive


@lru_cache(maxsize=128)
def detect_capabilities(session_class: type) -> frozenset[Primitive]:
    """Return the primitives whose method names *session_class* defines.

    Parameters
    ----------
    session_class : type
        The session class to inspect

    Returns
    -------
    frozenset[Primitive]
        Primitives implemented as callables on the class

    Examples
    --------
    >>> class OnlyChmod:
    ...     def fs_chmod(self, mode, path): ...
    >>> sorted(detect_capabilities(OnlyChmod))
    [<Primitive.FS_CHMOD: 'fs_chmod'>]
    """
    return frozenset(
        primitive
        for primitive in Primitive
        if callable(getattr(session_class, primitive.value, None))
    )


def session_capabilities(session: Any) -> frozenset[Primitive]:
    """Return the live capability set of *session*.

    Reads ``session.capabilities`` when the session declares one, so
    renegotiated capability sets are seen immediately.
    """
    declared = getattr(session, "capabilities", None)
    if declared is not None:
        return frozenset(declared)
    return detect_capabilities(type(session))


def session_name(session: Any) -> str:
    """Best-effort display name for error messages."""
    name = getattr(session, "name", None)
    if isinstance(name, str) and name:
        return name
    return type(session).__name__


__all__ = ["detect_capabilities", "session_capabilities", "session_name"]
