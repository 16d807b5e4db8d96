"""Abstract card store interface used by the tree guard, live queries and backup."""

from typing import Callable, Iterable, Optional, Protocol

from models import Card, CardType

# Called after every successful mutation with its kind
# ("add", "put", "delete", "clear", "bulk_add", "replace").
ChangeListener = Callable[[str], None]


class StoreProtocol(Protocol):
    async def add(self, card: Card) -> None: ...

    async def put(self, card: Card) -> None: ...

    async def get(self, card_id: str) -> Optional[Card]: ...

    async def delete(self, card_id: str) -> bool: ...

    async def count(self) -> int: ...

    async def list_by_parent_and_type(
        self, parent_id: Optional[str], card_type: CardType
    ) -> list[Card]: ...

    async def list_by_parent(self, parent_id: Optional[str]) -> list[Card]: ...

    async def list_all(self) -> list[Card]: ...

    async def clear(self) -> None: ...

    async def bulk_add(self, cards: Iterable[Card]) -> None: ...

    async def replace_all(self, cards: Iterable[Card]) -> None: ...

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]: ...
