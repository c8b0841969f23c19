"""
Tests shared by both storage backends.

Every test runs twice through the ``any_repo`` fixture: once on the
SQLite database, once on the JSON file.
"""

from datetime import date
from decimal import Decimal

import pytest

from app.models import (
    Member,
    MemberStatus,
    MembershipSubscription,
    SessionSlot,
    SubscriptionStatus,
)
from app.repositories import JsonFileRepository

from tests.factories import make_member, make_plan, make_slot


class TestCrud:

    def test_add_assigns_id_and_defaults(self, any_repo):
        slot = make_slot(any_repo)
        assert slot.id
        assert slot.created_at is not None

        stored = any_repo.get(SessionSlot, slot.id)
        assert stored.display_name == slot.display_name
        assert stored.capacity == 10

    def test_get_missing_returns_none(self, any_repo):
        assert any_repo.get(SessionSlot, "missing") is None
        assert any_repo.get(SessionSlot, None) is None

    def test_save_persists_changes(self, any_repo):
        slot = make_slot(any_repo)
        stored = any_repo.get(SessionSlot, slot.id)
        stored.capacity = 12
        any_repo.save(stored)

        assert any_repo.get(SessionSlot, slot.id).capacity == 12

    def test_delete(self, any_repo):
        slot = make_slot(any_repo)
        any_repo.delete(any_repo.get(SessionSlot, slot.id))
        assert any_repo.get(SessionSlot, slot.id) is None

    def test_delete_all(self, any_repo):
        make_slot(any_repo)
        make_slot(any_repo, start="19:30", end="20:30")
        any_repo.delete_all(SessionSlot)
        assert any_repo.count(SessionSlot) == 0


class TestQueries:

    def test_equality_filter_and_enum_values(self, any_repo):
        make_member(any_repo, "Asha")
        make_member(any_repo, "Bina", status=MemberStatus.EXPIRED)

        active = any_repo.list(Member, status=MemberStatus.ACTIVE)
        assert [m.first_name for m in active] == ["Asha"]
        assert active[0].status == MemberStatus.ACTIVE

    def test_list_filter_means_one_of(self, any_repo):
        make_member(any_repo, "Asha")
        make_member(any_repo, "Bina", status=MemberStatus.EXPIRED)
        make_member(any_repo, "Chitra", status=MemberStatus.INACTIVE)

        found = any_repo.list(Member, status=[MemberStatus.ACTIVE, MemberStatus.EXPIRED])
        assert {m.first_name for m in found} == {"Asha", "Bina"}

    def test_order_by(self, any_repo):
        make_slot(any_repo, start="19:30", end="20:30")
        make_slot(any_repo, start="07:30", end="08:30")

        ascending = any_repo.list(SessionSlot, order_by="start_time")
        descending = any_repo.list(SessionSlot, order_by="start_time", descending=True)
        assert [s.start_time for s in ascending] == ["07:30", "19:30"]
        assert [s.start_time for s in descending] == ["19:30", "07:30"]

    def test_first_and_count(self, any_repo):
        assert any_repo.first(SessionSlot) is None
        make_slot(any_repo)
        assert any_repo.count(SessionSlot, is_active=True) == 1
        assert any_repo.count(SessionSlot, is_active=False) == 0

    def test_decimal_and_date_round_trip(self, any_repo):
        member = make_member(any_repo)
        plan = make_plan(any_repo, price="2100.50")
        slot = make_slot(any_repo)
        any_repo.add(MembershipSubscription(
            member_id=member.id,
            plan_id=plan.id,
            slot_id=slot.id,
            start_date=date(2025, 1, 10),
            end_date=date(2025, 2, 10),
            original_amount=Decimal("2100.50"),
            payable_amount=Decimal("2000"),
        ))

        stored = any_repo.first(MembershipSubscription, member_id=member.id)
        assert stored.start_date == date(2025, 1, 10)
        assert stored.original_amount == Decimal("2100.50")
        assert stored.status == SubscriptionStatus.ACTIVE
        assert stored.extra_days == 0


class TestTransactions:

    def test_commit_on_success(self, any_repo):
        with any_repo.transaction():
            make_slot(any_repo)
            make_slot(any_repo, start="19:30", end="20:30")
        assert any_repo.count(SessionSlot) == 2

    def test_rollback_discards_every_write(self, any_repo):
        make_slot(any_repo, start="06:00", end="07:00")

        with pytest.raises(RuntimeError):
            with any_repo.transaction():
                make_slot(any_repo)
                assert any_repo.count(SessionSlot) == 2
                raise RuntimeError("boom")

        assert any_repo.count(SessionSlot) == 1

    def test_nested_blocks_commit_with_outermost(self, any_repo):
        with pytest.raises(RuntimeError):
            with any_repo.transaction():
                with any_repo.transaction():
                    make_slot(any_repo)
                raise RuntimeError("outer failure")

        assert any_repo.count(SessionSlot) == 0


class TestJsonFile:

    def test_data_survives_reopen(self, tmp_path):
        path = tmp_path / "studio.json"
        slot = make_slot(JsonFileRepository(path))

        reopened = JsonFileRepository(path)
        assert reopened.get(SessionSlot, slot.id).display_name == slot.display_name

    def test_returned_entities_are_detached_copies(self, local_repo):
        slot = make_slot(local_repo)
        copy = local_repo.get(SessionSlot, slot.id)
        copy.capacity = 99

        assert local_repo.get(SessionSlot, slot.id).capacity == 10

    def test_rollback_leaves_file_untouched(self, tmp_path):
        path = tmp_path / "studio.json"
        repo = JsonFileRepository(path)
        make_slot(repo)
        before = path.read_text(encoding="utf-8")

        with pytest.raises(ValueError):
            with repo.transaction():
                make_slot(repo, start="19:30", end="20:30")
                raise ValueError("abort")

        assert path.read_text(encoding="utf-8") == before
