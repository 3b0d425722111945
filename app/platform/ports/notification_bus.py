from typing import AsyncIterator, Protocol, runtime_checkable

@runtime_checkable
class NotificationBusPort(Protocol):
    """Publish/subscribe channel keyed by user identity."""

    async def publish(self, user_id: str, payload: dict) -> int:
        """Returns the number of live subscribers that received the payload."""
        ...

    def subscribe(self, user_id: str) -> AsyncIterator[dict]: ...

    async def close(self) -> None: ...
