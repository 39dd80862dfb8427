"""Pass-through RPC session.

Each primitive ``group_name`` is forwarded as ``client.call("group.name",
*args)``. The client can be anything with a ``call`` method (an XML-RPC
proxy wrapper, a msgpack-RPC client, a test double).
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Protocol

from postex.drivers.sessions.base import BaseSession
from postex.kernel.exceptions import UnsupportedCapabilityError
from postex.kernel.logging import get_logger
from postex.kernel.ports.primitives import Primitive

logger = get_logger(__name__)


class RPCClient(Protocol):
    def call(self, method: str, *arguments: Any) -> Any: ...


class RPCSession(BaseSession):
    """Session whose primitives are remote procedure calls.

    Args
    ----
        client: Object with ``call(method, *args)``
        primitives: Primitives the remote agent offers; all of them by default
        name: Display name
    """

    def __init__(
        self,
        client: RPCClient,
        primitives: Iterable[Primitive | str] | None = None,
        name: str | None = None,
    ) -> None:
        super().__init__(
            name=name,
            capabilities=Primitive if primitives is None else primitives,
        )
        self.client = client

    def call(self, method: str, *arguments: Any) -> Any:
        return self.client.call(method, *arguments)

    def negotiate(self, primitives: Iterable[Primitive | str]) -> frozenset[Primitive]:
        """Replace the capability set, e.g. after asking the agent what it supports."""
        self._capabilities = frozenset(Primitive(p) for p in primitives)
        logger.info(
            "Session {name} negotiated {count} primitives",
            name=self.name,
            count=len(self._capabilities),
        )
        return self._capabilities

    def _forward(self, primitive: Primitive, *arguments: Any) -> Any:
        if primitive not in self._capabilities:
            raise UnsupportedCapabilityError(primitive.value, [primitive], session=self.name)
        return self.call(primitive.rpc_name, *arguments)

    def close(self) -> None:
        close = getattr(self.client, "close", None)
        if callable(close):
            close()


def _forwarder(primitive: Primitive) -> Callable[..., Any]:
    def forward(self: RPCSession, *arguments: Any) -> Any:
        return self._forward(primitive, *arguments)

    forward.__name__ = forward.__qualname__ = primitive.value
    forward.__doc__ = f"Call ``{primitive.rpc_name}`` on the remote agent."
    return forward


for _primitive in Primitive:
    setattr(RPCSession, _primitive.value, _forwarder(_primitive))
del _primitive


__all__ = ["RPCClient", "RPCSession"]
