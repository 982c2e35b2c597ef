"""
Tests for occasions key computation
"""

from datetime import datetime

from auditlog.core.occasions import OCCASIONS_SEED_KEY, compute_occasions_id


def fields(**overrides) -> dict:
    data = {
        "logger": "PostLogger",
        "level": "info",
        "date": datetime(2024, 1, 1, 8, 0, 0),
        "message": 'Updated page "Home"',
    }
    data.update(overrides)
    return data


class TestComputeOccasionsId:
    """Tests for compute_occasions_id"""

    def test_key_is_md5_hex(self) -> None:
        key = compute_occasions_id("PostLogger", fields(), {"post_id": 12})

        assert len(key) == 32
        int(key, 16)

    def test_same_input_gives_same_key(self) -> None:
        first = compute_occasions_id("PostLogger", fields(), {"post_id": 12, "post_title": "Home"})
        second = compute_occasions_id("PostLogger", fields(), {"post_title": "Home", "post_id": 12})

        assert first == second

    def test_date_is_ignored(self) -> None:
        first = compute_occasions_id("PostLogger", fields(), {"post_id": 12})
        second = compute_occasions_id(
            "PostLogger", fields(date=datetime(2030, 6, 6, 6, 6, 6)), {"post_id": 12}
        )

        assert first == second

    def test_changing_a_context_value_changes_key(self) -> None:
        first = compute_occasions_id("PostLogger", fields(), {"post_id": 12})
        second = compute_occasions_id("PostLogger", fields(), {"post_id": 13})

        assert first != second

    def test_changing_level_changes_key(self) -> None:
        first = compute_occasions_id("PostLogger", fields(), {})
        second = compute_occasions_id("PostLogger", fields(level="notice"), {})

        assert first != second

    def test_event_fields_win_over_context_keys(self) -> None:
        """A context entry named like an event field cannot fake the key"""
        first = compute_occasions_id("PostLogger", fields(), {"level": "debug"})
        second = compute_occasions_id("PostLogger", fields(), {"level": "emergency"})

        assert first == second

    def test_seed_is_removed_from_context(self) -> None:
        context = {OCCASIONS_SEED_KEY: "failed_login", "login": "admin"}

        compute_occasions_id("UserLogger", fields(), context)

        assert context == {"login": "admin"}

    def test_seed_ignores_other_content(self) -> None:
        first = compute_occasions_id(
            "UserLogger", fields(message="a"), {OCCASIONS_SEED_KEY: "failed_login", "login": "x"}
        )
        second = compute_occasions_id(
            "UserLogger", fields(message="b"), {OCCASIONS_SEED_KEY: "failed_login", "login": "y"}
        )

        assert first == second

    def test_same_seed_differs_between_producers(self) -> None:
        first = compute_occasions_id("UserLogger", fields(), {OCCASIONS_SEED_KEY: "seed"})
        second = compute_occasions_id("PostLogger", fields(), {OCCASIONS_SEED_KEY: "seed"})

        assert first != second
