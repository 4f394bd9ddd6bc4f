"""
Unit tests for the Rating Registry.
"""

import pytest
import json
import os
import tempfile
from leedslink.models.rating import Rating, RatingCategory
from leedslink.registry.rating_registry import RatingRegistry


def test_registry_initialization():
    """Test creating new registry."""
    with tempfile.TemporaryDirectory() as tmpdir:
        registry_path = os.path.join(tmpdir, "test_registry.json")
        registry = RatingRegistry(registry_path)

        assert registry.get_all_ratings() == []
        assert registry.version == "1.0.0"


def test_submit_replaces_same_pair():
    """A second rating from the same rater to the same target wins."""
    with tempfile.TemporaryDirectory() as tmpdir:
        registry = RatingRegistry(os.path.join(tmpdir, "test_registry.json"))

        registry.submit_rating(Rating(from_user_id="a", to_user_id="b", rating=2))
        registry.submit_rating(Rating(from_user_id="a", to_user_id="b", rating=5))

        ratings = registry.get_all_ratings()
        assert len(ratings) == 1
        assert ratings[0].rating == 5


def test_submit_keeps_other_pairs():
    with tempfile.TemporaryDirectory() as tmpdir:
        registry = RatingRegistry(os.path.join(tmpdir, "test_registry.json"))

        registry.submit_rating(Rating(from_user_id="a", to_user_id="b", rating=4))
        registry.submit_rating(Rating(from_user_id="b", to_user_id="a", rating=3))
        registry.submit_rating(Rating(from_user_id="c", to_user_id="b", rating=5))

        assert len(registry.get_all_ratings()) == 3
        assert [r.from_user_id for r in registry.get_ratings_for_user("b")] == ["a", "c"]


def test_get_and_remove_rating():
    with tempfile.TemporaryDirectory() as tmpdir:
        registry = RatingRegistry(os.path.join(tmpdir, "test_registry.json"))
        rating = registry.submit_rating(Rating(from_user_id="a", to_user_id="b", rating=4))

        assert registry.get_rating(rating.id) is rating

        registry.remove_rating(rating.id)
        assert registry.get_rating(rating.id) is None

        with pytest.raises(ValueError, match="not found"):
            registry.remove_rating(rating.id)


def test_save_and_load():
    """Test registry persistence."""
    with tempfile.TemporaryDirectory() as tmpdir:
        registry_path = os.path.join(tmpdir, "test_registry.json")

        registry1 = RatingRegistry(registry_path)
        rating = registry1.submit_rating(Rating(
            from_user_id="a",
            to_user_id="b",
            rating=4,
            category=RatingCategory.RELIABILITY,
            review="On time"
        ))
        registry1.save()

        registry2 = RatingRegistry(registry_path)
        loaded = registry2.get_rating(rating.id)

        assert loaded is not None
        assert loaded.category == RatingCategory.RELIABILITY
        assert loaded.review == "On time"
        assert loaded.created_at == rating.created_at
        assert not os.path.exists(f"{registry_path}.tmp")


def test_restore_from_backup():
    """A corrupted registry falls back to the previous save."""
    with tempfile.TemporaryDirectory() as tmpdir:
        registry_path = os.path.join(tmpdir, "test_registry.json")

        registry = RatingRegistry(registry_path)
        registry.submit_rating(Rating(from_user_id="a", to_user_id="b", rating=4))
        registry.save()
        registry.submit_rating(Rating(from_user_id="c", to_user_id="b", rating=5))
        registry.save()  # Backs up the one-rating file

        with open(registry_path, 'w') as f:
            f.write("{not valid json")

        restored = RatingRegistry(registry_path)

        assert len(restored.get_all_ratings()) == 1
        assert restored.get_all_ratings()[0].from_user_id == "a"


def test_corrupted_without_backup_starts_empty():
    with tempfile.TemporaryDirectory() as tmpdir:
        registry_path = os.path.join(tmpdir, "test_registry.json")
        with open(registry_path, 'w') as f:
            f.write("garbage")

        registry = RatingRegistry(registry_path)

        assert registry.get_all_ratings() == []


def test_legacy_list_format():
    with tempfile.TemporaryDirectory() as tmpdir:
        registry_path = os.path.join(tmpdir, "test_registry.json")
        legacy = [Rating(from_user_id="a", to_user_id="b", rating=9).to_dict()]
        with open(registry_path, 'w') as f:
            json.dump(legacy, f)

        registry = RatingRegistry(registry_path)

        assert len(registry.get_all_ratings()) == 1
        assert registry.get_all_ratings()[0].rating == 5


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
