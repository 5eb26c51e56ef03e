from abc import ABC, abstractmethod

from hookrelay.core.context import RequestContext
from hookrelay.schemas.message import CanonicalMessage


class Sink(ABC):
    @property
    @abstractmethod
    def sink_id(self) -> str:
        """Identifier used in logs and the response trace"""
        pass

    @abstractmethod
    async def publish(self, ctx: RequestContext, message: CanonicalMessage) -> None:
        """
        Deliver one message downstream.

        Raises on failure. Implementations should bound their I/O with
        ``ctx.remaining()`` where the client supports a timeout.
        """
        pass
