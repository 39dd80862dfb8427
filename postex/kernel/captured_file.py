"""In-memory copy of a remote file."""

from __future__ import annotations

import io


class CapturedFile(io.BytesIO):
    """Contents of a remote file fetched in one round trip.

    Behaves like any seekable binary stream; nothing is ever written back.
    """

    def __init__(self, path: str, contents: bytes = b"") -> None:
        super().__init__(contents)
        self.path = path

    def __repr__(self) -> str:
        return f"<{type(self).__name__}:{self.path}>"


__all__ = ["CapturedFile"]
