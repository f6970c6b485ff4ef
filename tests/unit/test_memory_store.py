# tests/unit/test_memory_store.py
"""InMemoryEntityStore unit-of-work semantics."""
import pytest

from src.ix_ledger.domain.models import User
from src.ix_market.domain.models import BlockInfo
from src.ix_store.infrastructure.memory import InMemoryEntityStore


class TestInMemoryEntityStore:
    @pytest.mark.asyncio
    async def test_load_missing_returns_none(self, store: InMemoryEntityStore) -> None:
        assert await store.load(User, "0xnobody") is None

    @pytest.mark.asyncio
    async def test_pending_writes_are_visible(self, store: InMemoryEntityStore) -> None:
        await store.save(User(id="0xa"))
        assert await store.load(User, "0xa") is not None

    @pytest.mark.asyncio
    async def test_kinds_are_separate_namespaces(self, store: InMemoryEntityStore) -> None:
        await store.save(User(id="1"))
        assert await store.load(BlockInfo, "1") is None

    @pytest.mark.asyncio
    async def test_unsaved_mutation_has_no_effect(self, store: InMemoryEntityStore) -> None:
        await store.save(User(id="0xa"))
        user = await store.load(User, "0xa")
        assert user is not None
        user.protocol_token_spent = 99
        user.auction_orders.append("o")
        reloaded = await store.load(User, "0xa")
        assert reloaded is not None
        assert reloaded.protocol_token_spent == 0
        assert reloaded.auction_orders == []

    @pytest.mark.asyncio
    async def test_rollback_discards_pending(self, store: InMemoryEntityStore) -> None:
        await store.save(User(id="0xa", protocol_token_spent=1))
        await store.commit()
        await store.save(User(id="0xa", protocol_token_spent=2))
        await store.save(User(id="0xb"))
        await store.delete(User, "0xa")
        await store.rollback()

        user = await store.load(User, "0xa")
        assert user is not None
        assert user.protocol_token_spent == 1
        assert await store.load(User, "0xb") is None

    @pytest.mark.asyncio
    async def test_delete_then_commit(self, store: InMemoryEntityStore) -> None:
        await store.save(User(id="0xa"))
        await store.commit()
        await store.delete(User, "0xa")
        assert await store.load(User, "0xa") is None
        await store.commit()
        assert await store.load(User, "0xa") is None
        assert store.entities(User) == []

    @pytest.mark.asyncio
    async def test_entities_sorted_by_id(self, store: InMemoryEntityStore) -> None:
        for uid in ("0xc", "0xa", "0xb"):
            await store.save(User(id=uid))
        assert [u.id for u in store.entities(User)] == ["0xa", "0xb", "0xc"]
