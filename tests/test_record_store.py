"""Tests for person record CRUD, id generation, filtering and distinct values."""

from app.models.enums import RecordType, Role
from app.services import record_store
from app.services.record_store import RecordFilters
from tests.support import DatabaseTestCase

IND = RecordType.INDIVIDUAL
INF = RecordType.INFLUENCER


class TestCreateAndIds(DatabaseTestCase):
    def test_sequential_ids_per_type(self) -> None:
        a = record_store.create_record(self.db, IND, {"full_name": "A"})
        b = record_store.create_record(self.db, IND, {"full_name": "B"})
        c = record_store.create_record(self.db, INF, {"full_name": "C"})
        self.assertEqual([a.record_id, b.record_id, c.record_id], ["IND-001", "IND-002", "INF-001"])

    def test_next_id_keeps_digit_width(self) -> None:
        record_store.create_record(self.db, INF, {"full_name": "Wide"}, record_id="INF-0009")
        self.assertEqual(record_store.generate_sequential_id(self.db, INF), "INF-0010")

    def test_unknown_fields_ignored_and_dates_parsed(self) -> None:
        row = record_store.create_record(
            self.db,
            IND,
            {"full_name": "Olga", "birth_date": "1991-04-02", "password_hash": "x", "role": "superadmin"},
        )
        self.assertIsNone(row.password_hash)
        self.assertEqual(row.birth_date.isoformat(), "1991-04-02")
        self.assertEqual(row.role, "user")

    def test_role_only_through_explicit_argument(self) -> None:
        row = record_store.create_record(self.db, IND, {"full_name": "Olga"}, role=Role.EDITOR)
        self.assertEqual(row.role, "editor")
        row = record_store.update_record(self.db, IND, row.record_id, {"role": "admin"})
        self.assertEqual(row.role, "editor")
        row = record_store.update_record(self.db, IND, row.record_id, {}, role=Role.USER)
        self.assertEqual(row.role, "user")

    def test_email_is_normalized(self) -> None:
        row = record_store.create_record(self.db, IND, {"full_name": "Pat", "email": "  Pat@Example.COM "})
        self.assertEqual(row.email, "pat@example.com")

    def test_uncommitted_insert_rolls_back(self) -> None:
        record_store.create_record(self.db, IND, {"full_name": "Temp"}, commit=False)
        self.assertIsNotNone(record_store.get_record(self.db, IND, "IND-001"))
        self.db.rollback()
        self.assertIsNone(record_store.get_record(self.db, IND, "IND-001"))

    def test_blank_name_gets_placeholder(self) -> None:
        self.assertEqual(record_store.create_record(self.db, IND, {}).full_name, "Unnamed")


class TestReadUpdateDelete(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.row = record_store.create_record(self.db, INF, {"full_name": "Pim", "city": "Bangkok"})

    def test_get_record_checks_type(self) -> None:
        self.assertIsNotNone(record_store.get_record(self.db, INF, "INF-001"))
        self.assertIsNone(record_store.get_record(self.db, IND, "INF-001"))

    def test_update_only_supplied_fields(self) -> None:
        row = record_store.update_record(self.db, INF, "INF-001", {"city": "Chiang Mai"})
        self.assertEqual(row.city, "Chiang Mai")
        self.assertEqual(row.full_name, "Pim")

    def test_empty_update_returns_row(self) -> None:
        self.assertEqual(record_store.update_record(self.db, INF, "INF-001", {}).record_id, "INF-001")

    def test_update_missing(self) -> None:
        self.assertIsNone(record_store.update_record(self.db, INF, "INF-404", {"city": "X"}))

    def test_delete(self) -> None:
        self.assertTrue(record_store.delete_record(self.db, INF, "INF-001"))
        self.assertFalse(record_store.delete_record(self.db, INF, "INF-001"))


class TestListing(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        record_store.create_record(
            self.db, INF, {"full_name": "Q", "city": " Bangkok ", "influencer_category": "Food",
                           "engagement_rate_tier": "high", "collaboration_status": "Active"}
        )
        record_store.create_record(
            self.db, INF, {"full_name": "R", "city": "Phuket", "influencer_category": "Travel",
                           "engagement_rate_tier": "low", "collaboration_status": "Paused"}
        )
        record_store.create_record(self.db, IND, {"full_name": "S", "city": "bangkok", "followers_count": 50})
        record_store.create_record(
            self.db, IND, {"full_name": "T", "city": "Phuket", "followers_count": 10, "total_followers_count": 500}
        )

    def test_lists_one_type_in_id_order(self) -> None:
        rows = record_store.list_records(self.db, INF)
        self.assertEqual([r.record_id for r in rows], ["INF-001", "INF-002"])

    def test_text_filters_are_case_insensitive(self) -> None:
        rows = record_store.list_records(self.db, INF, RecordFilters(category="food", status="ACTIVE"))
        self.assertEqual([r.full_name for r in rows], ["Q"])
        rows = record_store.list_records(self.db, IND, RecordFilters(city="BANGKOK"))
        self.assertEqual([r.full_name for r in rows], ["S"])

    def test_follower_range_matches_either_count(self) -> None:
        rows = record_store.list_records(self.db, IND, RecordFilters(followers_min=100))
        self.assertEqual([r.full_name for r in rows], ["T"])
        rows = record_store.list_records(self.db, IND, RecordFilters(followers_min=20, followers_max=60))
        self.assertEqual([r.full_name for r in rows], ["S"])

    def test_distinct_values(self) -> None:
        self.assertEqual(
            record_store.list_distinct_values(self.db, "city"),
            ["Bangkok", "Phuket", "bangkok"],
        )
        self.assertEqual(record_store.list_distinct_values(self.db, "city", IND), ["Phuket", "bangkok"])
        self.assertEqual(record_store.list_distinct_values(self.db, "engagement_rate_tier"), ["high", "low"])

    def test_unsupported_distinct_field(self) -> None:
        with self.assertRaises(ValueError):
            record_store.list_distinct_values(self.db, "email")
