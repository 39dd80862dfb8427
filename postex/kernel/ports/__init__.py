"""Port interfaces: the primitive catalog and the session protocol."""

from postex.kernel.ports.detection import (
    detect_capabilities,
    session_capabilities,
    session_name,
)
from postex.kernel.ports.primitives import Primitive, Whence
from postex.kernel.ports.session import (
    Session,
    SupportsFileDescriptors,
    SupportsProcessStreams,
    SupportsReadFile,
    SupportsShellExec,
)

__all__ = [
    "Primitive",
    "Session",
    "SupportsFileDescriptors",
    "SupportsProcessStreams",
    "SupportsReadFile",
    "SupportsShellExec",
    "Whence",
    "detect_capabilities",
    "session_capabilities",
    "session_name",
]
