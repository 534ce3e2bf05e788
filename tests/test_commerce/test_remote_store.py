"""
Tests for the InMemoryStore.

These tests verify fixture loading, query composition and the constraints
the hosted schema enforces (unique pairs, foreign keys, cascades).
"""

import pytest
from commerce.remote_store import InMemoryStore, Query, RemoteStoreError


class TestSeeding:
    """Tests for loading fixtures."""

    def test_loads_products(self, store: InMemoryStore):
        """Test that the product fixture is loaded."""
        assert len(store.rows("products")) == 8

    def test_missing_fixture_means_empty_table(self, store: InMemoryStore):
        """Test that a collection without a fixture file starts empty."""
        assert store.rows("cart") == []

    def test_empty_store(self):
        """Test that a store without a data directory has no rows."""
        assert InMemoryStore().rows("products") == []


class TestSelect:
    """Tests for query composition."""

    @pytest.mark.asyncio
    async def test_equality_filter_and_order(self, store: InMemoryStore):
        """Test filtering by column value and sorting by another column."""
        rows = await store.select(Query("products", filters={"category": "Dairy"}, order_by="name"))
        assert [r["name"] for r in rows] == ["Greek Yogurt 500g", "Whole Milk 1L"]

    @pytest.mark.asyncio
    async def test_descending_and_limit(self, store: InMemoryStore):
        """Test descending order combined with a row limit."""
        rows = await store.select(Query("products", order_by="price", descending=True, limit=2))
        assert [r["id"] for r in rows] == ["prod-007", "prod-001"]

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive_contains(self, store: InMemoryStore):
        """Test that search matches a substring regardless of case."""
        rows = await store.select(Query("products", search=(("name", "description"), "ROAST")))
        assert [r["id"] for r in rows] == ["prod-001"]

    @pytest.mark.asyncio
    async def test_in_filter(self, store: InMemoryStore):
        """Test membership filtering."""
        rows = await store.select(Query("products", in_filters={"id": ["prod-002", "prod-004"]}))
        assert {r["id"] for r in rows} == {"prod-002", "prod-004"}

    @pytest.mark.asyncio
    async def test_projection(self, store: InMemoryStore):
        """Test that only the requested columns come back."""
        rows = await store.select(Query("products", columns=("category",), limit=1))
        assert list(rows[0]) == ["category"]

    @pytest.mark.asyncio
    async def test_embed_parent_record(self, store: InMemoryStore):
        """Test embedding the referenced product into a cart row."""
        await store.insert("cart", {"user_id": "u1", "product_id": "prod-003", "quantity": 1})

        rows = await store.select(
            Query("cart", embed={"products": ("product_id", "products")})
        )

        assert rows[0]["products"]["name"] == "Whole Milk 1L"

    @pytest.mark.asyncio
    async def test_results_are_copies(self, store: InMemoryStore):
        """Test that mutating a result does not change the stored row."""
        rows = await store.select(Query("products", filters={"id": "prod-001"}))
        rows[0]["price"] = 0

        again = await store.select(Query("products", filters={"id": "prod-001"}))
        assert again[0]["price"] == 24.9

    @pytest.mark.asyncio
    async def test_unknown_table(self, store: InMemoryStore):
        """Test that reading an unknown collection fails."""
        with pytest.raises(RemoteStoreError, match="does not exist"):
            await store.select(Query("posts"))


class TestWrites:
    """Tests for insert/upsert/update/delete."""

    @pytest.mark.asyncio
    async def test_insert_generates_id_and_timestamps(self, store: InMemoryStore):
        """Test that inserts get an id and the collection's timestamps."""
        row = await store.insert("shopping_lists", {"user_id": "u1", "name": "Market", "status": "previous"})
        assert row["id"]
        assert row["created_at"]
        assert row["updated_at"]

    @pytest.mark.asyncio
    async def test_unique_pair_enforced_on_insert(self, store: InMemoryStore):
        """Test that a second cart row for the same user and product is rejected."""
        await store.insert("cart", {"user_id": "u1", "product_id": "prod-001", "quantity": 1})
        with pytest.raises(RemoteStoreError, match="unique constraint"):
            await store.insert("cart", {"user_id": "u1", "product_id": "prod-001", "quantity": 5})

    @pytest.mark.asyncio
    async def test_upsert_updates_existing_row(self, store: InMemoryStore):
        """Test that upsert on an existing pair overwrites instead of adding a row."""
        first = await store.upsert(
            "cart", {"user_id": "u1", "product_id": "prod-001", "quantity": 1}, ("user_id", "product_id")
        )
        second = await store.upsert(
            "cart", {"user_id": "u1", "product_id": "prod-001", "quantity": 4}, ("user_id", "product_id")
        )

        assert second["id"] == first["id"]
        assert second["quantity"] == 4
        assert len(store.rows("cart")) == 1

    @pytest.mark.asyncio
    async def test_insert_many_is_all_or_nothing(self, store: InMemoryStore):
        """Test that one bad record in a batch keeps the whole batch out."""
        shopping_list = await store.insert("shopping_lists", {"user_id": "u1", "name": "A", "status": "previous"})
        duplicate = {"list_id": shopping_list["id"], "product_id": "prod-001", "quantity": 1}

        with pytest.raises(RemoteStoreError, match="unique constraint"):
            await store.insert_many("shopping_list_items", [duplicate, dict(duplicate)])

        assert store.rows("shopping_list_items") == []

    @pytest.mark.asyncio
    async def test_update_and_delete(self, store: InMemoryStore):
        """Test updating and deleting by filter, returning what was touched."""
        await store.insert("cart", {"user_id": "u1", "product_id": "prod-001", "quantity": 1})

        updated = await store.update("cart", {"quantity": 3}, {"user_id": "u1"})
        assert updated[0]["quantity"] == 3

        assert await store.delete("cart", {"user_id": "u1"}) == 1
        assert await store.delete("cart", {"user_id": "u1"}) == 0

    @pytest.mark.asyncio
    async def test_delete_cascades_to_children(self, store: InMemoryStore):
        """Test that deleting a list removes its items."""
        shopping_list = await store.insert("shopping_lists", {"user_id": "u1", "name": "A", "status": "previous"})
        await store.insert("shopping_list_items", {"list_id": shopping_list["id"], "product_id": "prod-001", "quantity": 1})

        await store.delete("shopping_lists", {"id": shopping_list["id"]})

        assert store.rows("shopping_list_items") == []


class TestForeignKeys:
    """Tests for references to rows in other collections."""

    @pytest.mark.asyncio
    async def test_insert_unknown_product_rejected(self, store: InMemoryStore):
        """Test that a cart row must point at an existing product."""
        with pytest.raises(RemoteStoreError, match="foreign key constraint"):
            await store.insert("cart", {"user_id": "u1", "product_id": "prod-999", "quantity": 1})

        assert store.rows("cart") == []

    @pytest.mark.asyncio
    async def test_upsert_unknown_product_rejected(self, store: InMemoryStore):
        """Test that upsert checks the reference before writing."""
        with pytest.raises(RemoteStoreError, match='"cart_product_id_fkey"'):
            await store.upsert(
                "cart", {"user_id": "u1", "product_id": "prod-999", "quantity": 1}, ("user_id", "product_id")
            )

        assert store.rows("cart") == []

    @pytest.mark.asyncio
    async def test_item_on_unknown_list_rejected(self, store: InMemoryStore):
        """Test that list items need an existing list."""
        with pytest.raises(RemoteStoreError, match='table "shopping_lists"'):
            await store.upsert(
                "shopping_list_items",
                {"list_id": "no-such-list", "product_id": "prod-003", "quantity": 2},
                ("list_id", "product_id"),
            )

        assert store.rows("shopping_list_items") == []

    @pytest.mark.asyncio
    async def test_insert_many_checks_every_record(self, store: InMemoryStore):
        """Test that an order item with an unknown order keeps the whole batch out."""
        order = await store.insert("orders", {"user_id": "u1", "total_amount": 1})
        good = {"order_id": order["id"], "product_id": "prod-001", "quantity": 1}
        bad = {"order_id": "no-such-order", "product_id": "prod-001", "quantity": 1}

        with pytest.raises(RemoteStoreError, match="foreign key constraint"):
            await store.insert_many("order_items", [good, bad])

        assert store.rows("order_items") == []

    @pytest.mark.asyncio
    async def test_update_to_unknown_product_rejected(self, store: InMemoryStore):
        """Test that an update cannot repoint a row at a missing product."""
        await store.insert("cart", {"user_id": "u1", "product_id": "prod-001", "quantity": 1})

        with pytest.raises(RemoteStoreError, match="foreign key constraint"):
            await store.update("cart", {"product_id": "prod-999"}, {"user_id": "u1"})

        assert store.rows("cart")[0]["product_id"] == "prod-001"


class TestFailureInjection:
    """Tests for the simulated store failures."""

    @pytest.mark.asyncio
    async def test_next_call_fails_once(self, store: InMemoryStore):
        """Test that an injected failure hits the next call only."""
        store.inject_failure("connection reset")

        with pytest.raises(RemoteStoreError, match="connection reset"):
            await store.select(Query("products"))
        assert len(await store.select(Query("products"))) == 8

    @pytest.mark.asyncio
    async def test_failure_scoped_to_table(self, store: InMemoryStore):
        """Test that a scoped failure waits for a call on its collection."""
        store.inject_failure("cart is down", table="cart")

        await store.select(Query("products"))
        with pytest.raises(RemoteStoreError):
            await store.select(Query("cart"))
