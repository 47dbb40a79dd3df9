from __future__ import annotations

from abc import ABC, abstractmethod

from resumable.protocol.messages import ProtocolMessage


class MessageStream(ABC):
    """
    Bidirectional message stream between one invocation and the runtime.

    receive() returns None once the runtime has ended the inbound half.
    """

    @abstractmethod
    async def receive(self) -> ProtocolMessage | None:
        ...

    @abstractmethod
    async def send(
        self,
        message: ProtocolMessage,
        requires_ack: bool = False,
    ) -> None:
        ...

    @abstractmethod
    async def close(self) -> None:
        ...
