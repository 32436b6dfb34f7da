"""
Tests for OptionService - the generic option lifecycle.

Tests cover:
- Create one/many with field rules and uniqueness
- Soft-aware reads and hard reads
- Update and hard update
- Soft delete and hard delete, single and batch
- Token and sequence id strategies
"""

import re
from datetime import datetime, timedelta, timezone

import pytest

from shared.utils.exceptions import (
    AlreadyDeletedError,
    AlreadyExistsError,
    InvalidArgumentError,
    NotFoundError,
)
from options_api.services.option_service import OptionService

TOKEN_ID = re.compile(r"^GENDER_OPT_\d{17}_\d+$")


class TestCreate:
    """Tests for create_one() and create_many()"""

    def test_create_one_assigns_token_id_and_timestamps(self, gender_service):
        option = gender_service.create_one({"name": "Female", "description": "F"})

        assert TOKEN_ID.match(option.id)
        assert option.name == "Female"
        assert option.description == "F"
        assert option.created_at is not None
        assert option.updated_at == option.created_at
        assert option.deleted_at is None

    def test_create_one_ignores_caller_supplied_id(self, gender_service):
        option = gender_service.create_one({"id": "MY_ID", "name": "Male"})

        assert option.id != "MY_ID"
        assert TOKEN_ID.match(option.id)

    def test_create_one_strips_name(self, gender_service):
        option = gender_service.create_one({"name": "  Other  "})
        assert option.name == "Other"

    def test_create_one_sequence_id(self, account_type_service):
        first = account_type_service.create_one({"name": "Savings"})
        second = account_type_service.create_one({"name": "Current"})

        assert isinstance(first.id, int)
        assert second.id > first.id

    def test_create_one_null_raises_invalid_argument(self, gender_service):
        with pytest.raises(InvalidArgumentError):
            gender_service.create_one(None)

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_create_one_missing_name_raises_invalid_argument(self, gender_service, name):
        with pytest.raises(InvalidArgumentError) as exc_info:
            gender_service.create_one({"name": name})
        assert exc_info.value.status_code == 400

    def test_create_one_name_too_long(self, gender_service):
        with pytest.raises(InvalidArgumentError):
            gender_service.create_one({"name": "x" * 256})

    def test_create_one_description_too_long(self, gender_service):
        with pytest.raises(InvalidArgumentError):
            gender_service.create_one({"name": "Female", "description": "d" * 256})

    def test_create_duplicate_name_raises_already_exists(self, gender_service):
        gender_service.create_one({"name": "Female"})

        with pytest.raises(AlreadyExistsError) as exc_info:
            gender_service.create_one({"name": "Female"})
        assert exc_info.value.field == "name"
        assert exc_info.value.status_code == 409

    def test_create_duplicate_of_soft_deleted_raises_already_exists(self, gender_service):
        option = gender_service.create_one({"name": "Female"})
        gender_service.soft_delete_one(option.id)

        with pytest.raises(AlreadyExistsError):
            gender_service.create_one({"name": "Female"})

    def test_create_many(self, gender_service):
        options = gender_service.create_many([{"name": "Female"}, {"name": "Male"}])

        assert [o.name for o in options] == ["Female", "Male"]
        assert len({o.id for o in options}) == 2
        assert options[0].created_at == options[1].created_at

    def test_create_many_duplicate_in_batch_stores_nothing(self, gender_service):
        with pytest.raises(AlreadyExistsError):
            gender_service.create_many([{"name": "Female"}, {"name": "Female"}])

        assert gender_service.hard_read_all() == []

    def test_create_many_invalid_item_stores_nothing(self, gender_service):
        with pytest.raises(InvalidArgumentError):
            gender_service.create_many([{"name": "Female"}, {"name": ""}])

        assert gender_service.hard_read_all() == []

    @pytest.mark.parametrize("items", [None, []])
    def test_create_many_null_or_empty_list(self, gender_service, items):
        with pytest.raises(InvalidArgumentError):
            gender_service.create_many(items)

    def test_create_many_null_item(self, gender_service):
        with pytest.raises(InvalidArgumentError):
            gender_service.create_many([{"name": "Female"}, None])


class TestRead:
    """Tests for the soft-aware and hard reads"""

    def test_read_one(self, gender_service):
        created = gender_service.create_one({"name": "Female", "description": "F"})

        option = gender_service.read_one(created.id)

        assert option.id == created.id
        assert option.name == "Female"
        assert option.description == "F"

    def test_read_one_missing(self, gender_service):
        with pytest.raises(NotFoundError) as exc_info:
            gender_service.read_one("GENDER_OPT_missing")
        assert exc_info.value.status_code == 404

    def test_read_one_soft_deleted(self, gender_service):
        created = gender_service.create_one({"name": "Female"})
        gender_service.soft_delete_one(created.id)

        with pytest.raises(NotFoundError):
            gender_service.read_one(created.id)

    def test_read_one_null_id(self, gender_service):
        with pytest.raises(InvalidArgumentError):
            gender_service.read_one(None)

    def test_read_one_sequence_rejects_non_integer(self, account_type_service):
        with pytest.raises(InvalidArgumentError):
            account_type_service.read_one("abc")

    @pytest.mark.parametrize("option_id", ["\u00b2", "\u0663", "1.5", "0x10"])
    def test_read_one_sequence_rejects_non_ascii_digits(self, account_type_service, option_id):
        with pytest.raises(InvalidArgumentError):
            account_type_service.read_one(option_id)

    @pytest.mark.parametrize("option_id", ["99999999999999999999999", 2**31, -(2**31) - 1])
    def test_read_one_sequence_out_of_range(self, account_type_service, option_id):
        with pytest.raises(InvalidArgumentError):
            account_type_service.read_one(option_id)

    def test_read_one_sequence_accepts_numeric_string(self, account_type_service):
        created = account_type_service.create_one({"name": "Savings"})
        assert account_type_service.read_one(str(created.id)).id == created.id

    def test_read_many_skips_missing_and_deleted(self, gender_service):
        a, b, c = gender_service.create_many(
            [{"name": "A"}, {"name": "B"}, {"name": "C"}]
        )
        gender_service.soft_delete_one(b.id)

        options = gender_service.read_many([c.id, "GENDER_OPT_missing", b.id, a.id, c.id])

        assert [o.id for o in options] == [c.id, a.id]

    @pytest.mark.parametrize("ids", [None, []])
    def test_read_many_null_or_empty(self, gender_service, ids):
        with pytest.raises(InvalidArgumentError):
            gender_service.read_many(ids)

    def test_read_many_null_id(self, gender_service):
        with pytest.raises(InvalidArgumentError):
            gender_service.read_many(["GENDER_OPT_1", None])

    def test_read_all_empty_returns_empty_list(self, gender_service):
        assert gender_service.read_all() == []

    def test_read_all_excludes_soft_deleted(self, gender_service):
        kept = gender_service.create_one({"name": "Female"})
        dropped = gender_service.create_one({"name": "Male"})
        gender_service.soft_delete_one(dropped.id)

        assert [o.id for o in gender_service.read_all()] == [kept.id]

    def test_hard_read_all_includes_soft_deleted(self, gender_service):
        gender_service.create_one({"name": "Female"})
        dropped = gender_service.create_one({"name": "Male"})
        gender_service.soft_delete_one(dropped.id)

        options = gender_service.hard_read_all()

        assert len(options) == 2
        deleted = [o for o in options if o.id == dropped.id][0]
        assert deleted.deleted_at is not None


class TestUpdate:
    """Tests for update and hard update"""

    def test_update_one_overwrites_sent_fields(self, gender_service):
        created = gender_service.create_one({"name": "Female", "description": "old"})

        updated = gender_service.update_one(created.id, {"description": "new"})

        assert updated.name == "Female"
        assert updated.description == "new"
        assert updated.updated_at >= created.updated_at
        assert updated.created_at == created.created_at

    def test_update_one_clears_description(self, gender_service):
        created = gender_service.create_one({"name": "Female", "description": "old"})

        updated = gender_service.update_one(created.id, {"description": None})

        assert updated.description is None

    def test_update_one_cannot_blank_name(self, gender_service):
        created = gender_service.create_one({"name": "Female"})

        with pytest.raises(InvalidArgumentError):
            gender_service.update_one(created.id, {"name": "  "})

    def test_update_one_empty_payload(self, gender_service):
        created = gender_service.create_one({"name": "Female"})

        with pytest.raises(InvalidArgumentError):
            gender_service.update_one(created.id, {})

    def test_update_one_keeping_own_name_is_allowed(self, gender_service):
        created = gender_service.create_one({"name": "Female"})

        updated = gender_service.update_one(created.id, {"name": "Female", "description": "d"})

        assert updated.name == "Female"

    def test_update_one_name_taken_by_other(self, gender_service):
        gender_service.create_one({"name": "Female"})
        male = gender_service.create_one({"name": "Male"})

        with pytest.raises(AlreadyExistsError):
            gender_service.update_one(male.id, {"name": "Female"})

    def test_update_one_soft_deleted_raises_not_found(self, gender_service):
        created = gender_service.create_one({"name": "Female"})
        gender_service.soft_delete_one(created.id)

        with pytest.raises(NotFoundError):
            gender_service.update_one(created.id, {"description": "x"})

    def test_update_one_missing(self, gender_service):
        with pytest.raises(NotFoundError):
            gender_service.update_one("GENDER_OPT_missing", {"name": "x"})

    def test_update_many_reports_every_missing_id(self, gender_service):
        created = gender_service.create_one({"name": "Female"})
        deleted = gender_service.create_one({"name": "Male"})
        gender_service.soft_delete_one(deleted.id)

        with pytest.raises(NotFoundError) as exc_info:
            gender_service.update_many([
                {"id": created.id, "description": "x"},
                {"id": deleted.id, "description": "y"},
                {"id": "GENDER_OPT_missing", "description": "z"},
            ])

        assert exc_info.value.ids == [deleted.id, "GENDER_OPT_missing"]
        assert gender_service.read_one(created.id).description is None

    def test_update_many_swapping_names(self, gender_service):
        a = gender_service.create_one({"name": "A"})
        b = gender_service.create_one({"name": "B"})

        gender_service.update_many([{"id": a.id, "name": "B"}, {"id": b.id, "name": "A"}])

        assert gender_service.read_one(a.id).name == "B"
        assert gender_service.read_one(b.id).name == "A"

    def test_update_many_same_name_twice_in_batch(self, gender_service):
        a = gender_service.create_one({"name": "A"})
        b = gender_service.create_one({"name": "B"})

        with pytest.raises(AlreadyExistsError):
            gender_service.update_many([{"id": a.id, "name": "C"}, {"id": b.id, "name": "C"}])

    def test_update_many_item_without_id(self, gender_service):
        with pytest.raises(InvalidArgumentError):
            gender_service.update_many([{"name": "A"}])

    def test_update_many_repeated_id(self, gender_service):
        a = gender_service.create_one({"name": "A"})

        with pytest.raises(InvalidArgumentError):
            gender_service.update_many([{"id": a.id, "name": "B"}, {"id": a.id, "name": "C"}])

    def test_hard_update_one_on_soft_deleted_keeps_deleted_at(self, gender_service):
        created = gender_service.create_one({"name": "Female"})
        deleted = gender_service.soft_delete_one(created.id)

        updated = gender_service.hard_update_one(created.id, {"description": "history"})

        assert updated.description == "history"
        assert updated.deleted_at == deleted.deleted_at
        with pytest.raises(NotFoundError):
            gender_service.read_one(created.id)

    def test_hard_update_one_still_checks_uniqueness(self, gender_service):
        gender_service.create_one({"name": "Female"})
        male = gender_service.create_one({"name": "Male"})
        gender_service.soft_delete_one(male.id)

        with pytest.raises(AlreadyExistsError):
            gender_service.hard_update_one(male.id, {"name": "Female"})

    def test_hard_update_one_missing(self, gender_service):
        with pytest.raises(NotFoundError):
            gender_service.hard_update_one("GENDER_OPT_missing", {"name": "x"})

    def test_hard_update_many(self, gender_service):
        a = gender_service.create_one({"name": "A"})
        b = gender_service.create_one({"name": "B"})
        gender_service.soft_delete_one(b.id)

        updated = gender_service.hard_update_many([
            {"id": a.id, "description": "a"},
            {"id": b.id, "description": "b"},
        ])

        assert [o.description for o in updated] == ["a", "b"]
        assert updated[0].deleted_at is None
        assert updated[1].deleted_at is not None


class TestSoftDelete:
    """Tests for soft_delete_one() and soft_delete_many()"""

    def test_soft_delete_one(self, gender_service):
        created = gender_service.create_one({"name": "Female"})

        deleted = gender_service.soft_delete_one(created.id)

        assert deleted.deleted_at is not None
        assert gender_service.count() == 0
        assert gender_service.count(include_deleted=True) == 1

    def test_soft_delete_twice_raises_already_deleted(self, db_session, gender_service):
        created = gender_service.create_one({"name": "Female"})
        first = gender_service.soft_delete_one(created.id)
        db_session.expunge_all()

        with pytest.raises(AlreadyDeletedError) as exc_info:
            gender_service.soft_delete_one(created.id)
        assert exc_info.value.status_code == 409

        stored = gender_service.hard_read_all()
        assert [o.deleted_at for o in stored] == [first.deleted_at]

    def test_soft_delete_missing(self, gender_service):
        with pytest.raises(NotFoundError):
            gender_service.soft_delete_one("GENDER_OPT_missing")

    def test_soft_delete_many_shares_timestamp(self, gender_service):
        a, b = gender_service.create_many([{"name": "A"}, {"name": "B"}])

        deleted = gender_service.soft_delete_many([a.id, b.id])

        assert deleted[0].deleted_at == deleted[1].deleted_at
        assert gender_service.read_all() == []

    def test_soft_delete_many_missing_ids_reported_together(self, gender_service):
        a = gender_service.create_one({"name": "A"})

        with pytest.raises(NotFoundError) as exc_info:
            gender_service.soft_delete_many([a.id, "GENDER_OPT_x", "GENDER_OPT_y"])

        assert exc_info.value.ids == ["GENDER_OPT_x", "GENDER_OPT_y"]
        assert gender_service.read_one(a.id).deleted_at is None

    def test_soft_delete_many_already_deleted_reported_together(self, gender_service):
        a, b, c = gender_service.create_many([{"name": "A"}, {"name": "B"}, {"name": "C"}])
        gender_service.soft_delete_many([a.id, b.id])

        with pytest.raises(AlreadyDeletedError) as exc_info:
            gender_service.soft_delete_many([a.id, b.id, c.id])

        assert exc_info.value.ids == [a.id, b.id]
        assert gender_service.read_one(c.id).deleted_at is None

    def test_soft_delete_many_missing_checked_before_deleted(self, gender_service):
        a = gender_service.create_one({"name": "A"})
        gender_service.soft_delete_one(a.id)

        with pytest.raises(NotFoundError):
            gender_service.soft_delete_many([a.id, "GENDER_OPT_missing"])


class TestHardDelete:
    """Tests for hard_delete_one(), hard_delete_many() and hard_delete_all()"""

    def test_hard_delete_one(self, gender_service):
        created = gender_service.create_one({"name": "Female"})

        removed = gender_service.hard_delete_one(created.id)

        assert removed.id == created.id
        assert gender_service.hard_read_all() == []

    def test_hard_delete_one_soft_deleted(self, gender_service):
        created = gender_service.create_one({"name": "Female"})
        gender_service.soft_delete_one(created.id)

        gender_service.hard_delete_one(created.id)

        assert gender_service.hard_read_all() == []

    def test_hard_delete_one_missing(self, gender_service):
        with pytest.raises(NotFoundError):
            gender_service.hard_delete_one("GENDER_OPT_missing")

    def test_hard_delete_many_missing_removes_nothing(self, gender_service):
        a, b = gender_service.create_many([{"name": "A"}, {"name": "B"}])

        with pytest.raises(NotFoundError) as exc_info:
            gender_service.hard_delete_many([a.id, "GENDER_OPT_missing", b.id])

        assert exc_info.value.ids == ["GENDER_OPT_missing"]
        assert len(gender_service.hard_read_all()) == 2

    def test_hard_delete_many(self, gender_service):
        a, b, c = gender_service.create_many([{"name": "A"}, {"name": "B"}, {"name": "C"}])

        gender_service.hard_delete_many([a.id, c.id])

        assert [o.id for o in gender_service.hard_read_all()] == [b.id]

    def test_hard_delete_all_returns_count(self, gender_service):
        gender_service.create_many([{"name": "A"}, {"name": "B"}])
        deleted = gender_service.create_one({"name": "C"})
        gender_service.soft_delete_one(deleted.id)

        assert gender_service.hard_delete_all() == 3
        assert gender_service.hard_read_all() == []

    def test_hard_delete_all_empty(self, gender_service):
        assert gender_service.hard_delete_all() == 0

    def test_name_reusable_after_hard_delete(self, gender_service):
        created = gender_service.create_one({"name": "Female"})
        gender_service.hard_delete_one(created.id)

        again = gender_service.create_one({"name": "Female"})

        assert again.id != created.id


class TestTimestamps:
    """Timestamps read back from the database stay aware UTC"""

    def test_read_one_after_session_drops_record(self, db_session, gender_service):
        created = gender_service.create_one({"name": "Female"})
        db_session.expunge_all()

        option = gender_service.read_one(created.id)

        assert option.created_at.tzinfo is not None
        assert option.created_at.utcoffset() == timedelta(0)
        assert option.created_at == created.created_at

    def test_update_of_reloaded_record_keeps_created_at(self, db_session, gender_service):
        created = gender_service.create_one({"name": "Female"})
        db_session.expunge_all()

        updated = gender_service.update_one(created.id, {"description": "d"})

        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at

    def test_hard_update_of_reloaded_record_keeps_deleted_at(self, db_session, gender_service):
        created = gender_service.create_one({"name": "Female"})
        deleted = gender_service.soft_delete_one(created.id)
        db_session.expunge_all()

        updated = gender_service.hard_update_one(created.id, {"description": "d"})

        assert updated.deleted_at == deleted.deleted_at
        assert updated.deleted_at.utcoffset() == timedelta(0)

    def test_naive_value_is_stored_as_utc(self, db_session, gender_entity):
        from options_api.models import option_model

        model = option_model(gender_entity)
        naive = datetime(2025, 7, 24, 12, 8, 30)
        db_session.add(model(id="GENDER_OPT_naive", name="Naive", created_at=naive, updated_at=naive))
        db_session.commit()
        db_session.expunge_all()

        stored = db_session.get(model, "GENDER_OPT_naive")

        assert stored.created_at == naive.replace(tzinfo=timezone.utc)


class TestLifecycleScenario:
    """End-to-end lifecycle of one procurement method"""

    def test_open_tender_lifecycle(self, db_session):
        from options_api.registry import get_entity

        service = OptionService(db_session, get_entity("procurement_method_option"))

        created = service.create_one({"name": "Open Tender", "description": "Public call"})
        assert created.id.startswith("PROCURE_METHOD_")
        assert created.deleted_at is None

        with pytest.raises(AlreadyExistsError):
            service.create_one({"name": "Open Tender"})

        service.soft_delete_one(created.id)
        assert service.read_all() == []
        hard = service.hard_read_all()
        assert [o.id for o in hard] == [created.id]
        assert hard[0].deleted_at is not None

        service.hard_delete_one(created.id)
        assert service.hard_read_all() == []

    def test_kinds_are_isolated(self, db_session, gender_service):
        from options_api.registry import get_entity

        language_service = OptionService(db_session, get_entity("language_option"))

        gender_service.create_one({"name": "Shared"})
        language_service.create_one({"name": "Shared"})

        assert len(gender_service.read_all()) == 1
        assert len(language_service.read_all()) == 1
