"""Behaviour shared by every concrete session."""

from __future__ import annotations

from collections.abc import Iterable

from postex.kernel.ports.detection import detect_capabilities
from postex.kernel.ports.primitives import Primitive
from postex.kernel.system import System


class BaseSession:
    """Session with an explicit capability set and a lazily built :class:`System`.

    Args
    ----
        name: Display name; defaults to the class name
        capabilities: Primitives this session answers to; defaults to the
            primitive methods its class defines
    """

    def __init__(
        self,
        name: str | None = None,
        capabilities: Iterable[Primitive | str] | None = None,
    ) -> None:
        self._name = name
        if capabilities is None:
            self._capabilities = detect_capabilities(type(self))
        else:
            self._capabilities = frozenset(Primitive(p) for p in capabilities)
        self._system: System | None = None

    @property
    def name(self) -> str:
        return self._name or type(self).__name__

    @property
    def capabilities(self) -> frozenset[Primitive]:
        return self._capabilities

    def supports(self, primitive: Primitive | str) -> bool:
        """Return True if this session implements *primitive*."""
        try:
            return Primitive(primitive) in self._capabilities
        except ValueError:
            return False

    @property
    def system(self) -> System:
        """The :class:`~postex.kernel.system.System` bound to this session."""
        if self._system is None:
            self._system = System(self, encoding=self.encoding)
        return self._system

    @property
    def encoding(self) -> str:
        return "utf-8"

    def close(self) -> None:
        """Release the transport (no-op by default)."""

    def __enter__(self) -> BaseSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r} primitives={len(self._capabilities)}>"


__all__ = ["BaseSession"]
