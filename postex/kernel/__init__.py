"""postex kernel: the public API.

Callers and presentation layers (``postex.cli``, user scripts) should
import from ``postex.kernel``; transports in ``postex.drivers`` may import
from kernel submodules directly.

The exports are grouped by category:
- Port protocols (primitive catalog, session)
- Capability registry
- Resources (file, directory, process handles)
- Facades
- Domain types
- Exceptions
- Configuration
- Logging
"""

# ============================================================================
# 2. Capability registry
# ============================================================================
from postex.kernel.capabilities import (
    OperationRequirement,
    missing_primitives,
    requires,
    shell_commands,
)
from postex.kernel.captured_file import CapturedFile

# ============================================================================
# 7. Configuration
# ============================================================================
from postex.kernel.config import (
    LoggingConfig,
    PostExConfig,
    ShellConfig,
    load_config,
)

# ============================================================================
# 5. Domain types
# ============================================================================
from postex.kernel.domain import Stat

# ============================================================================
# 6. Exceptions
# ============================================================================
from postex.kernel.exceptions import (
    ClosedResourceError,
    ConfigurationError,
    DescriptorError,
    InvalidArgumentError,
    NotFoundError,
    PostExError,
    SessionConnectionError,
    UnsupportedCapabilityError,
)

# ============================================================================
# 8. Logging
# ============================================================================
from postex.kernel.logging import configure_logging, get_logger

# ============================================================================
# 1. Port protocols
# ============================================================================
from postex.kernel.ports import (
    Primitive,
    Session,
    SupportsFileDescriptors,
    SupportsProcessStreams,
    SupportsReadFile,
    SupportsShellExec,
    Whence,
    detect_capabilities,
    session_capabilities,
)

# ============================================================================
# 3. Resources
# ============================================================================
from postex.kernel.remote_dir import RemoteDir
from postex.kernel.remote_file import FileStrategy, RemoteFile
from postex.kernel.remote_process import RemoteProcess
from postex.kernel.resource import Resource

# ============================================================================
# 4. Facades
# ============================================================================
from postex.kernel.system import FS, Process, Shell, System

__all__ = [
    # Port protocols
    "Primitive",
    "Session",
    "SupportsFileDescriptors",
    "SupportsProcessStreams",
    "SupportsReadFile",
    "SupportsShellExec",
    "Whence",
    "detect_capabilities",
    "session_capabilities",
    # Capability registry
    "OperationRequirement",
    "missing_primitives",
    "requires",
    "shell_commands",
    # Resources
    "CapturedFile",
    "FileStrategy",
    "RemoteDir",
    "RemoteFile",
    "RemoteProcess",
    "Resource",
    # Facades
    "FS",
    "Process",
    "Shell",
    "System",
    # Domain types
    "Stat",
    # Exceptions
    "ClosedResourceError",
    "ConfigurationError",
    "DescriptorError",
    "InvalidArgumentError",
    "NotFoundError",
    "PostExError",
    "SessionConnectionError",
    "UnsupportedCapabilityError",
    # Configuration
    "LoggingConfig",
    "PostExConfig",
    "ShellConfig",
    "load_config",
    # Logging
    "configure_logging",
    "get_logger",
]
