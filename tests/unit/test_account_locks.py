"""
Unit tests for AccountLockRegistry.

These tests verify:
1. Mutations for one customer are serialized
2. Different customers do not block each other
3. Locks are released and forgotten when unused
"""

import asyncio

import pytest

from loyalty_ledger.application.services import AccountLockRegistry


class TestAccountLockRegistry:
    """Tests for per-customer locking."""

    @pytest.mark.asyncio
    async def test_same_customer_is_serialized(self):
        registry = AccountLockRegistry()
        timeline = []

        async def mutate(name: str):
            async with registry.acquire("customer-1"):
                timeline.append(f"{name}:start")
                await asyncio.sleep(0.01)
                timeline.append(f"{name}:end")

        await asyncio.gather(mutate("a"), mutate("b"), mutate("c"))

        assert timeline == ["a:start", "a:end", "b:start", "b:end", "c:start", "c:end"]

    @pytest.mark.asyncio
    async def test_different_customers_run_concurrently(self):
        registry = AccountLockRegistry()
        both_inside = asyncio.Event()
        inside = set()

        async def mutate(customer_id: str):
            async with registry.acquire(customer_id):
                inside.add(customer_id)
                if len(inside) == 2:
                    both_inside.set()
                await asyncio.wait_for(both_inside.wait(), timeout=1.0)

        await asyncio.gather(mutate("customer-1"), mutate("customer-2"))

        assert inside == {"customer-1", "customer-2"}

    @pytest.mark.asyncio
    async def test_locks_are_dropped_when_idle(self):
        registry = AccountLockRegistry()

        async with registry.acquire("customer-1"):
            assert registry.is_locked("customer-1")
            assert len(registry) == 1

        assert not registry.is_locked("customer-1")
        assert len(registry) == 0

    @pytest.mark.asyncio
    async def test_lock_released_on_error(self):
        registry = AccountLockRegistry()

        with pytest.raises(RuntimeError):
            async with registry.acquire("customer-1"):
                raise RuntimeError("boom")

        assert len(registry) == 0

        async with registry.acquire("customer-1"):
            assert registry.is_locked("customer-1")
