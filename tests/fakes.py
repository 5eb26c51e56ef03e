import asyncio
from typing import List, Optional

from hookrelay.services.publishers import Sink


class RecordingSink(Sink):
    """Sink that records every message it is given"""

    def __init__(self, name: str, calls: List[tuple], error: Optional[Exception] = None):
        self.name = name
        self.calls = calls
        self.error = error

    @property
    def sink_id(self) -> str:
        return self.name

    async def publish(self, ctx, message):
        self.calls.append((self.name, message))
        if self.error is not None:
            raise self.error


class HangingSink(Sink):
    """Sink whose publish never completes on its own"""

    def __init__(self, name: str = "hanging"):
        self.name = name
        self.started = asyncio.Event()
        self.was_cancelled = False

    @property
    def sink_id(self) -> str:
        return self.name

    async def publish(self, ctx, message):
        self.started.set()
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            self.was_cancelled = True
            raise
