"""postex: capability-negotiated post-exploitation sessions and resources.

A uniform, resource-oriented API (files, directories, processes, shell
commands) over whatever primitives a remote transport implements.
"""

# Version is defined in pyproject.toml and read dynamically
try:
    from importlib.metadata import version

    __version__ = version("postex")
except Exception:
    __version__ = "0.0.0.dev0"  # Fallback for development installs

from postex.drivers.sessions import (
    BaseSession,
    BindShell,
    RemoteShellSession,
    ReverseShell,
    RPCSession,
    ShellSession,
)
from postex.kernel import (
    FS,
    Primitive,
    Process,
    RemoteDir,
    RemoteFile,
    RemoteProcess,
    Resource,
    Shell,
    Stat,
    System,
)
from postex.kernel.exceptions import (
    ClosedResourceError,
    InvalidArgumentError,
    NotFoundError,
    PostExError,
    SessionConnectionError,
    UnsupportedCapabilityError,
)

__all__ = [
    "__version__",
    # Sessions
    "BaseSession",
    "BindShell",
    "RPCSession",
    "RemoteShellSession",
    "ReverseShell",
    "ShellSession",
    # Kernel
    "FS",
    "Primitive",
    "Process",
    "RemoteDir",
    "RemoteFile",
    "RemoteProcess",
    "Resource",
    "Shell",
    "Stat",
    "System",
    # Errors
    "ClosedResourceError",
    "InvalidArgumentError",
    "NotFoundError",
    "PostExError",
    "SessionConnectionError",
    "UnsupportedCapabilityError",
]
