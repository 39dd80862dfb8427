"""Remote directory listing handle."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from postex.kernel.exceptions import ClosedResourceError, InvalidArgumentError


class RemoteDir:
    """Fixed, ordered snapshot of a remote directory's entries.

    Entries are fetched once by the caller (``fs_readdir``) and never
    refreshed. Every method fails with :class:`ClosedResourceError` after
    :meth:`close`.
    """

    def __init__(self, path: str, entries: Sequence[str] = ()) -> None:
        self.path = path
        self._entries: tuple[str, ...] = tuple(entries)
        self._pos = 0
        self._closed = False

    @property
    def entries(self) -> tuple[str, ...]:
        return self._entries

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pos(self) -> int:
        return self._pos

    def _check_open(self) -> None:
        if self._closed:
            raise ClosedResourceError(f"directory {self.path}")

    def tell(self) -> int:
        """Return the index of the next entry :meth:`read` will return."""
        self._check_open()
        return self._pos

    def rewind(self) -> RemoteDir:
        self._check_open()
        self._pos = 0
        return self

    def seek(self, new_pos: int) -> RemoteDir:
        """Move to entry *new_pos*, which must satisfy ``0 <= new_pos < len(entries)``."""
        self._check_open()
        if not 0 <= new_pos < len(self._entries):
            raise InvalidArgumentError(
                "position", f"must be within [0, {len(self._entries)})", value=new_pos
            )
        self._pos = new_pos
        return self

    def read(self) -> str | None:
        """Return the next entry, or ``None`` once the listing is exhausted."""
        self._check_open()
        if self._pos < len(self._entries):
            entry = self._entries[self._pos]
            self._pos += 1
            return entry
        return None

    def __iter__(self) -> Iterator[str]:
        # Checked eagerly so iter() on a closed directory fails immediately
        self._check_open()
        self._pos = 0
        return self._each()

    def _each(self) -> Iterator[str]:
        for entry in self._entries:
            yield entry
            self._pos += 1

    def __len__(self) -> int:
        return len(self._entries)

    def close(self) -> None:
        self._closed = True

    def __enter__(self) -> RemoteDir:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__}:{self.path}>"


__all__ = ["RemoteDir"]
