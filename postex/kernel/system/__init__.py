"""High-level facades bound to a session."""

from postex.kernel.system.fs import FS
from postex.kernel.system.process import Process
from postex.kernel.system.shell import Shell
from postex.kernel.system.system import System

__all__ = ["FS", "Process", "Shell", "System"]
