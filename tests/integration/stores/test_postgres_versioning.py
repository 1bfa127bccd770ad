"""Integration tests for the PostgreSQL record gateway and activity store.

Runs the audit repository end to end against a real PostgreSQL database.
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio

from chronicle.activity.service import ActivityLogService
from chronicle.activity.stores.postgres import PostgresActivityLogStore
from chronicle.db.errors import ConflictError, NotFoundError
from chronicle.versioning.models import ChangeKind
from chronicle.versioning.repository import AuditRepository
from chronicle.versioning.stores.postgres import PostgresRecordGateway
from tests.factories import Dimensions, Product, Widget, make_product

pytestmark = pytest.mark.integration


@pytest_asyncio.fixture
async def widget_gateway(clean_postgres):
    return PostgresRecordGateway(clean_postgres, Widget)


@pytest_asyncio.fixture
async def activity_service(clean_postgres):
    return ActivityLogService(PostgresActivityLogStore(clean_postgres))


@pytest.fixture
def repository(widget_gateway, activity_service, clock) -> AuditRepository:
    return AuditRepository(widget_gateway, Widget, activity_log=activity_service, clock=clock)


class TestPostgresRecordGateway:
    """Tests for PostgresRecordGateway."""

    @pytest.mark.asyncio
    async def test_add_and_find(self, widget_gateway) -> None:
        """Should round-trip the record and its history."""
        widget = Widget(id=1, name="stored", value=3)
        widget.append_entry("alice", ChangeKind.CREATED, changed_at=datetime.now(UTC))

        await widget_gateway.add(widget)
        found = await widget_gateway.find_by_key(1)

        assert found is not None
        assert found.name == "stored"
        assert [e.version_number for e in found.history] == [1]
        assert found.history[0].id == widget.history[0].id

    @pytest.mark.asyncio
    async def test_add_duplicate_raises(self, widget_gateway) -> None:
        widget = Widget(id=1)
        widget.append_entry("alice", ChangeKind.CREATED)
        await widget_gateway.add(widget)

        with pytest.raises(ConflictError):
            await widget_gateway.add(widget)

    @pytest.mark.asyncio
    async def test_replace_missing_raises(self, widget_gateway) -> None:
        with pytest.raises(NotFoundError):
            await widget_gateway.replace_by_key(404, Widget(id=404))

    @pytest.mark.asyncio
    async def test_find_missing_returns_none(self, widget_gateway) -> None:
        assert await widget_gateway.find_by_key(404) is None

    @pytest.mark.asyncio
    async def test_record_types_are_separate(self, clean_postgres, widget_gateway) -> None:
        """Should scope rows by record type."""
        product_gateway = PostgresRecordGateway(clean_postgres, Product)
        product = make_product()
        product.append_entry("alice", ChangeKind.CREATED)
        widget = Widget(id=1)
        widget.append_entry("alice", ChangeKind.CREATED)

        await product_gateway.add(product)
        await widget_gateway.add(widget)

        assert [p.id for p in await product_gateway.query()] == [product.id]
        assert [w.id for w in await widget_gateway.query()] == [1]


class TestAuditRepositoryOnPostgres:
    """End-to-end versioning against PostgreSQL."""

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, repository, clock) -> None:
        """Should persist every version and reconstruct past states."""
        widget = Widget(id=1, name="Initial", value=10)
        await repository.create(widget, "User1")
        created_at = clock.now

        clock.advance(hours=1)
        widget.name = "Updated"
        widget.value = 20
        await repository.update(widget, "User2")

        clock.advance(hours=1)
        await repository.delete(widget, "User3")

        history = await repository.get_history(1)
        assert [(e.change_kind, e.changed_by) for e in history] == [
            (ChangeKind.DELETED, "User3"),
            (ChangeKind.UPDATED, "User2"),
            (ChangeKind.CREATED, "User1"),
        ]
        assert [(c.field_name, c.old_value, c.new_value) for c in history[1].field_changes] == [
            ("name", '"Initial"', '"Updated"'),
            ("value", "10", "20"),
        ]

        assert await repository.query() == []
        assert len(await repository.query(include_deleted=True)) == 1

        past = await repository.get_version_at(1, created_at + timedelta(minutes=1))
        assert (past.name, past.value, past.is_deleted) == ("Initial", 10, False)

    @pytest.mark.asyncio
    async def test_structured_fields_survive_storage(self, clean_postgres, clock) -> None:
        repository = AuditRepository(
            PostgresRecordGateway(clean_postgres, Product), Product, clock=clock
        )
        product = make_product()
        await repository.create(product, "alice")
        created_at = clock.now

        clock.advance(days=1)
        product.price = Decimal("149.50")
        product.dimensions = Dimensions(width=100.0, height=70.0)
        await repository.update(product, "bob")

        stored = await repository.get(product.id)
        assert stored.price == Decimal("149.50")
        past = await repository.get_version_at(product.id, created_at)
        assert past.price == Decimal("199.00")
        assert past.dimensions == Dimensions(width=120.0, height=75.0)

    @pytest.mark.asyncio
    async def test_activity_is_persisted(self, repository, activity_service, tenant_id) -> None:
        widget = Widget(id=1, name="Initial")
        await repository.create(widget, "User1", tenant_id=tenant_id)
        widget.name = "Updated"
        await repository.update(widget, "User2", tenant_id=tenant_id)

        logs = await activity_service.get_activity_logs(tenant_id, user_id="User2")

        assert len(logs) == 1
        assert logs[0].activity == "Updated Widget"
        assert logs[0].new_values == '{"name":"Updated"}'
