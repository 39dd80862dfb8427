"""Tests for the capability registry and the Resource base class."""

from __future__ import annotations

from typing import ClassVar

import pytest

from postex.kernel.capabilities import (
    OperationRequirement,
    missing_primitives,
    requires,
    shell_commands,
)
from postex.kernel.exceptions import UnsupportedCapabilityError
from postex.kernel.ports.primitives import Primitive
from postex.kernel.resource import Resource
from postex.kernel.system import FS


class ChmodOnlySession:
    """Implements fs_chmod and nothing else; records every call."""

    name = "chmod-only"

    def __init__(self) -> None:
        self.calls: list[tuple[int, str]] = []

    def fs_chmod(self, mode: int, path: str) -> None:
        self.calls.append((mode, path))


class Negotiable:
    """Session whose capability set can change after resources are built."""

    def __init__(self) -> None:
        self.capabilities: frozenset[Primitive] = frozenset()


class Sample(Resource):
    OPERATIONS: ClassVar[dict[str, OperationRequirement]] = {
        "chown": requires(Primitive.FS_CHOWN),
        "chmod": requires(Primitive.FS_CHMOD),
        "read": requires(alternatives=(Primitive.FILE_READ, Primitive.FS_READFILE)),
        "join": requires(),
    }

    def chown(self, user: str, path: str) -> None:
        self._require("chown")
        self.session.fs_chown(user, path)

    def read(self) -> None:
        self._require("read")


class TestOperationRequirement:
    """Tests for OperationRequirement."""

    def test_empty_requirement_is_always_satisfied(self) -> None:
        assert requires().is_satisfied_by(frozenset())

    def test_required_primitives(self) -> None:
        requirement = requires(Primitive.FS_CHOWN, Primitive.FS_CHGRP)
        assert not requirement.is_satisfied_by(frozenset({Primitive.FS_CHOWN}))
        assert requirement.missing_from(frozenset({Primitive.FS_CHOWN})) == (Primitive.FS_CHGRP,)

    def test_alternatives_need_one(self) -> None:
        requirement = requires(alternatives=(Primitive.FILE_READ, Primitive.FS_READFILE))
        assert requirement.is_satisfied_by(frozenset({Primitive.FS_READFILE}))
        assert requirement.missing_from(frozenset()) == (
            Primitive.FILE_READ,
            Primitive.FS_READFILE,
        )

    def test_optional_never_missing(self) -> None:
        requirement = requires(optional=(Primitive.FILE_OPEN,))
        assert requirement.missing_from(frozenset()) == ()
        assert requirement.primitives == (Primitive.FILE_OPEN,)

    def test_missing_primitives_accepts_any_iterable(self) -> None:
        requirement = requires(Primitive.SHELL_EXEC)
        assert missing_primitives(requirement, []) == (Primitive.SHELL_EXEC,)
        assert missing_primitives(requirement, ["shell_exec"]) == ()

    def test_shell_commands_table(self) -> None:
        table = shell_commands("ls", "cat")
        assert set(table) == {"ls", "cat"}
        assert table["ls"].required == (Primitive.SHELL_EXEC,)


class TestResource:
    """Tests for capability queries on Resource."""

    def test_supports_and_supported_operations(self) -> None:
        resource = Sample(ChmodOnlySession())
        assert resource.supports("chmod")
        assert resource.supports("join")
        assert not resource.supports("chown")
        assert not resource.supports("chmod", "chown")
        assert resource.supported_operations() == ["chmod", "join"]

    def test_unknown_operation_is_unsupported(self) -> None:
        assert not Sample(ChmodOnlySession()).supports("format_disk")

    def test_chown_refused_on_chmod_only_session(self) -> None:
        """Test that a missing primitive is reported before any call is attempted."""
        session = ChmodOnlySession()
        resource = Sample(session)

        with pytest.raises(UnsupportedCapabilityError, match="fs_chown") as excinfo:
            resource.chown("root", "/etc/passwd")

        assert excinfo.value.missing == (Primitive.FS_CHOWN,)
        assert excinfo.value.operation == "chown"
        assert excinfo.value.session == "chmod-only"
        assert session.calls == []

    def test_fs_facade_refuses_chown_without_commands(self) -> None:
        session = ChmodOnlySession()
        fs = FS(session)

        with pytest.raises(UnsupportedCapabilityError, match="fs_chown"):
            fs.chown("root", "/etc/passwd")
        assert session.calls == []

        fs.chmod(0o644, "/etc/passwd")
        assert session.calls == [(0o644, "/etc/passwd")]

    def test_alternatives_error_says_one_of(self) -> None:
        with pytest.raises(UnsupportedCapabilityError, match="one of file_read, fs_readfile"):
            Sample(ChmodOnlySession()).read()

    def test_missing_primitives(self) -> None:
        resource = Sample(ChmodOnlySession())
        assert resource.missing_primitives("chown") == (Primitive.FS_CHOWN,)
        assert resource.missing_primitives("chmod") == ()

    def test_queries_see_renegotiated_capabilities(self) -> None:
        """Test that a resource built early sees capabilities added later."""
        session = Negotiable()
        resource = Sample(session)
        assert not resource.supports("chown")

        session.capabilities = frozenset({Primitive.FS_CHOWN})
        assert resource.supports("chown")

    def test_repr_names_session(self) -> None:
        assert "chmod-only" in repr(Sample(ChmodOnlySession()))
