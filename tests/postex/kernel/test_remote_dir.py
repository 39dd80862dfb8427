"""Tests for RemoteDir."""

from __future__ import annotations

import pytest

from postex.kernel.exceptions import ClosedResourceError, InvalidArgumentError
from postex.kernel.remote_dir import RemoteDir


@pytest.fixture
def directory() -> RemoteDir:
    return RemoteDir("/tmp", ["a", "b", "c"])


class TestRemoteDir:
    """Tests for RemoteDir positioning and iteration."""

    def test_read_advances_until_exhausted(self, directory: RemoteDir) -> None:
        assert [directory.read() for _ in range(4)] == ["a", "b", "c", None]
        assert directory.tell() == 3

    @pytest.mark.parametrize("position", [3, -1])
    def test_seek_out_of_range(self, directory: RemoteDir, position: int) -> None:
        with pytest.raises(InvalidArgumentError):
            directory.seek(position)

    def test_seek_within_range(self, directory: RemoteDir) -> None:
        directory.seek(2)
        assert directory.read() == "c"

    def test_rewind(self, directory: RemoteDir) -> None:
        directory.read()
        directory.rewind()
        assert directory.tell() == 0

    def test_full_pass_visits_entries_in_order(self, directory: RemoteDir) -> None:
        assert list(directory) == ["a", "b", "c"]
        assert directory.pos == 3

    def test_each_pass_restarts_from_zero(self, directory: RemoteDir) -> None:
        directory.seek(2)
        assert list(directory) == ["a", "b", "c"]
        assert list(directory) == ["a", "b", "c"]

    def test_operations_after_close(self, directory: RemoteDir) -> None:
        directory.close()
        assert directory.closed
        with pytest.raises(ClosedResourceError):
            directory.read()
        with pytest.raises(ClosedResourceError):
            directory.seek(0)
        with pytest.raises(ClosedResourceError):
            directory.rewind()
        with pytest.raises(ClosedResourceError):
            directory.tell()
        with pytest.raises(ClosedResourceError):
            iter(directory)

    def test_context_manager_closes(self) -> None:
        with RemoteDir("/tmp", ["x"]) as directory:
            assert len(directory) == 1
        assert directory.closed

    def test_entries_are_a_snapshot(self) -> None:
        source = ["a"]
        directory = RemoteDir("/tmp", source)
        source.append("b")
        assert directory.entries == ("a",)
