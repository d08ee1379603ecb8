"""Tests for InMemoryAuditStore."""

from datetime import timedelta
from uuid import uuid4

import pytest

from backoffice.audit.models import (
    AuditAction,
    AuditCriteria,
    AuditSort,
    SortField,
    TargetModel,
    utc_now,
)
from backoffice.audit.stores import InMemoryAuditStore
from backoffice.db.errors import ConflictError
from tests.factories import AuditRecordFactory

NEWEST_FIRST = AuditSort()


@pytest.fixture
def store() -> InMemoryAuditStore:
    """Create a fresh store for each test."""
    return InMemoryAuditStore()


class TestRecordOperations:
    """Tests for insert and lookup."""

    async def test_save_and_get_record(self, store: InMemoryAuditStore) -> None:
        """Should return a saved record by id."""
        record = AuditRecordFactory.create()

        record_id = await store.save_record(record)
        retrieved = await store.get_record(record_id)

        assert retrieved == record

    async def test_get_missing_record_returns_none(self, store: InMemoryAuditStore) -> None:
        """Should return None for an unknown id."""
        assert await store.get_record(uuid4()) is None

    async def test_duplicate_id_is_rejected(self, store: InMemoryAuditStore) -> None:
        """Should refuse to overwrite an existing record."""
        record = AuditRecordFactory.create()
        await store.save_record(record)

        with pytest.raises(ConflictError):
            await store.save_record(record)


class TestSearchRecords:
    """Tests for filtered, sorted, paginated search."""

    async def test_total_is_independent_of_page(self, store: InMemoryAuditStore) -> None:
        """Should count every match regardless of the page requested."""
        for _ in range(7):
            await store.save_record(AuditRecordFactory.create())

        page, total = await store.search_records(
            AuditCriteria(), sort=NEWEST_FIRST, offset=5, limit=5
        )

        assert total == 7
        assert len(page) == 2

    async def test_date_range_is_inclusive(self, store: InMemoryAuditStore) -> None:
        """Should include records on both date bounds."""
        now = utc_now()
        inside = AuditRecordFactory.create(created_at=now)
        outside = AuditRecordFactory.create(created_at=now - timedelta(days=2))
        await store.save_record(inside)
        await store.save_record(outside)

        page, total = await store.search_records(
            AuditCriteria(created_from=now, created_to=now), sort=NEWEST_FIRST
        )

        assert total == 1
        assert page[0].id == inside.id

    async def test_target_identifier_matches_any_user_key(
        self, store: InMemoryAuditStore
    ) -> None:
        """Should match a user identifier against each identifier key."""
        by_identifier = AuditRecordFactory.create(target_info={"name": "Bob", "identifier": "U123"})
        by_admin_id = AuditRecordFactory.create(target_info={"name": "Root", "adminId": "U123"})
        other = AuditRecordFactory.create(target_info={"name": "Eve", "identifier": "U999"})
        for record in (by_identifier, by_admin_id, other):
            await store.save_record(record)

        page, total = await store.search_records(
            AuditCriteria(target_model=TargetModel.USER, target_identifier="U123"),
            sort=NEWEST_FIRST,
        )

        assert total == 2
        assert {r.id for r in page} == {by_identifier.id, by_admin_id.id}

    async def test_form_number_is_case_insensitive_substring(
        self, store: InMemoryAuditStore
    ) -> None:
        """Should match form numbers by case-insensitive substring."""
        form = AuditRecordFactory.create(
            target_model=TargetModel.FORM, target_info={"formNumber": "F-2024-001"}
        )
        await store.save_record(form)

        _, total = await store.search_records(
            AuditCriteria(form_number_contains="f-2024"), sort=NEWEST_FIRST
        )

        assert total == 1

    async def test_quick_search_scans_operator_and_target(
        self, store: InMemoryAuditStore
    ) -> None:
        """Should search operator and target display fields."""
        by_operator = AuditRecordFactory.create(operator_name="Alice Chen")
        by_target = AuditRecordFactory.create(
            operator_name="Zed",
            operator_identifier="Z1",
            target_info={"name": "Chen Family"},
        )
        neither = AuditRecordFactory.create(
            operator_name="Zed", operator_identifier="Z1", target_info={"name": "Bob"}
        )
        for record in (by_operator, by_target, neither):
            await store.save_record(record)

        _, total = await store.search_records(
            AuditCriteria(quick_search="chen"), sort=NEWEST_FIRST
        )

        assert total == 2

    async def test_quick_search_is_literal(self, store: InMemoryAuditStore) -> None:
        """Should treat regex metacharacters literally."""
        await store.save_record(AuditRecordFactory.create(target_info={"name": "a.b"}))
        await store.save_record(AuditRecordFactory.create(target_info={"name": "axb"}))

        _, total = await store.search_records(
            AuditCriteria(quick_search="a.b"), sort=NEWEST_FIRST
        )

        assert total == 1

    async def test_ascending_sort_by_action(self, store: InMemoryAuditStore) -> None:
        """Should sort by action ascending."""
        for action in (AuditAction.UPDATE, AuditAction.CREATE, AuditAction.DELETE):
            await store.save_record(
                AuditRecordFactory.create(action=action, before={"a": 1}, after={"a": 2})
            )

        page, _ = await store.search_records(
            AuditCriteria(), sort=AuditSort(field=SortField.ACTION, descending=False)
        )

        assert [r.action for r in page] == [
            AuditAction.CREATE,
            AuditAction.DELETE,
            AuditAction.UPDATE,
        ]

    async def test_missing_sort_values_first_ascending_last_descending(
        self, store: InMemoryAuditStore
    ) -> None:
        """Should put missing sort values first ascending and last descending."""
        named = AuditRecordFactory.create(target_info={"name": "Ads"})
        unnamed = AuditRecordFactory.create(target_info={})
        await store.save_record(named)
        await store.save_record(unnamed)

        ascending, _ = await store.search_records(
            AuditCriteria(), sort=AuditSort(field=SortField.TARGET_NAME, descending=False)
        )
        descending, _ = await store.search_records(
            AuditCriteria(), sort=AuditSort(field=SortField.TARGET_NAME, descending=True)
        )

        assert [r.id for r in ascending] == [unnamed.id, named.id]
        assert [r.id for r in descending] == [named.id, unnamed.id]

    async def test_ties_break_on_id(self, store: InMemoryAuditStore) -> None:
        """Should order equal sort keys by record id."""
        created_at = utc_now()
        records = [AuditRecordFactory.create(created_at=created_at) for _ in range(5)]
        for record in records:
            await store.save_record(record)

        page, _ = await store.search_records(AuditCriteria(), sort=NEWEST_FIRST)

        assert [r.id for r in page] == sorted((r.id for r in records), key=str, reverse=True)
