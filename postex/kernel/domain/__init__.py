"""Domain models."""

from postex.kernel.domain.stat import Stat

__all__ = ["Stat"]
