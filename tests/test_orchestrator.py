"""
Integration tests for MarketplaceOrchestrator.

Use a temporary data directory; no network or external services.
"""

import os
import tempfile
from unittest.mock import patch

import pytest
from leedslink.models.listing import Listing, ListingCategory, ListingType
from leedslink.models.rating import Rating, RatingCategory
from leedslink.models.user import User, UserRole
from leedslink.orchestrator import MarketplaceOrchestrator
from leedslink.utils.mock_data import MockDataGenerator
import config.settings as settings


@pytest.fixture
def workspace():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def orchestrator(workspace):
    return MarketplaceOrchestrator(
        data_root=os.path.join(workspace, "data"),
        registry_path=os.path.join(workspace, "data", "rating_registry.json")
    )


def _offer(owner_id, tags=(), listing_id=None):
    kwargs = {"id": listing_id} if listing_id else {}
    return Listing(
        owner_id=owner_id,
        title="Catering available",
        category=ListingCategory.FOOD,
        type=ListingType.OFFER,
        tags=list(tags),
        **kwargs
    )


def test_create_listing_recomputes_matches(orchestrator):
    orchestrator.create_user(User(id="me", name="Priya Patel", role=UserRole.CUSTOMER))

    orchestrator.create_listing(Listing(
        owner_id="me",
        title="Need catering",
        category=ListingCategory.FOOD,
        type=ListingType.REQUEST,
        tags=["catering"]
    ))
    assert orchestrator.matches_found_count == 0

    update = orchestrator.create_listing(_offer("them", tags=["catering"], listing_id="offer-1"))

    assert update.previous_count == 0
    assert update.current_count == 1
    assert [m.id for m in update.new_matches] == ["offer-1"]
    assert update.should_notify is True


def test_delete_listing_recomputes_matches(orchestrator):
    orchestrator.create_user(User(id="me", name="Priya Patel", role=UserRole.CUSTOMER))
    orchestrator.create_listing(Listing(
        owner_id="me", title="Need catering",
        category=ListingCategory.FOOD, type=ListingType.REQUEST
    ))
    orchestrator.create_listing(_offer("them", listing_id="offer-1"))
    assert orchestrator.matches_found_count == 1

    update = orchestrator.delete_listing("offer-1")

    assert update.current_count == 0
    assert update.should_notify is False

    with pytest.raises(ValueError, match="not found"):
        orchestrator.delete_listing("offer-1")


def test_local_partner_badge(orchestrator):
    orchestrator.create_user(User(id="me", name="Priya Patel", role=UserRole.CUSTOMER))
    orchestrator.create_listing(Listing(
        owner_id="me", title="Need catering",
        category=ListingCategory.FOOD, type=ListingType.REQUEST
    ))

    for i in range(3):
        orchestrator.create_listing(_offer(f"seller-{i}"))

    assert orchestrator.matches_found_count == 3
    assert orchestrator.has_local_partner_badge is True


def test_match_count_survives_restart(orchestrator, workspace):
    orchestrator.create_user(User(id="me", name="Priya Patel", role=UserRole.CUSTOMER))
    orchestrator.create_listing(Listing(
        owner_id="me", title="Need catering",
        category=ListingCategory.FOOD, type=ListingType.REQUEST
    ))
    orchestrator.create_listing(_offer("them"))

    reopened = MarketplaceOrchestrator(
        data_root=os.path.join(workspace, "data"),
        registry_path=os.path.join(workspace, "data", "rating_registry.json")
    )

    assert reopened.current_user_id == "me"
    assert reopened.matches_found_count == 1


def test_top_matches_for_unknown_listing(orchestrator):
    with pytest.raises(ValueError, match="Listing not found"):
        orchestrator.top_matches("missing")


def test_submit_rating_replaces_and_summarizes(orchestrator):
    orchestrator.submit_rating(Rating(from_user_id="a", to_user_id="b", rating=2))
    summary = orchestrator.submit_rating(Rating(
        from_user_id="a", to_user_id="b", rating=5, category=RatingCategory.SERVICE
    ))

    assert summary.total_ratings == 1
    assert summary.average_rating == 5.0
    assert summary.category_ratings == {RatingCategory.SERVICE: 5.0}
    assert orchestrator.can_rate("a", "b") is False
    assert orchestrator.can_rate("b", "a") is True
    assert os.path.exists(orchestrator.registry_path)


def test_self_rating_rejected(orchestrator):
    with pytest.raises(ValueError, match="cannot rate themselves"):
        orchestrator.submit_rating(Rating(from_user_id="a", to_user_id="a", rating=5))


def test_registry_save_failure_is_fatal(orchestrator):
    with patch.object(orchestrator.registry, "save", side_effect=OSError("disk full")):
        with pytest.raises(OSError):
            orchestrator.submit_rating(Rating(from_user_id="a", to_user_id="b", rating=4))

    assert orchestrator.registry.get_all_ratings() == []


def test_tolerated_save_failure_drops_unsaved_rating(orchestrator):
    orchestrator.submit_rating(Rating(from_user_id="a", to_user_id="b", rating=2))

    with patch.object(settings, "CRASH_ON_REGISTRY_ERROR", False), \
            patch.object(orchestrator.registry, "save", side_effect=OSError("disk full")):
        summary = orchestrator.submit_rating(Rating(from_user_id="c", to_user_id="b", rating=5))

    # Only the saved rating counts
    assert summary.total_ratings == 1
    assert summary.average_rating == 2.0
    assert orchestrator.can_rate("c", "b") is True
    assert [r.from_user_id for r in orchestrator.registry.get_all_ratings()] == ["a"]


def test_browse_listings(orchestrator):
    orchestrator.seed_mock_data(MockDataGenerator())

    urgent_requests = orchestrator.browse_listings(role=UserRole.SUPPLIER, urgent_only=True)
    assert [l.title for l in urgent_requests] == ["Urgent: Need Catering for Corporate Event"]

    food_offers = orchestrator.browse_listings(role="Customer", category="Food & Beverage")
    assert food_offers
    assert all(l.type == ListingType.OFFER for l in food_offers)
    assert all(l.category == ListingCategory.FOOD for l in food_offers)
    created = [l.created_at for l in food_offers]
    assert created == sorted(created, reverse=True)


def test_browse_defaults_to_signed_in_role(orchestrator):
    orchestrator.create_listing(_offer("them", listing_id="offer-1"))
    orchestrator.create_listing(Listing(
        id="request-1", owner_id="them", title="Need catering",
        category=ListingCategory.FOOD, type=ListingType.REQUEST
    ))

    assert len(orchestrator.browse_listings()) == 2

    orchestrator.create_user(User(id="me", name="Priya Patel", role=UserRole.CUSTOMER))
    assert [l.id for l in orchestrator.browse_listings()] == ["offer-1"]


def test_seed_mock_data(orchestrator):
    generator = MockDataGenerator()

    assert orchestrator.seed_mock_data(generator) is True
    assert orchestrator.seed_mock_data(generator) is False

    users = orchestrator.storage.get_all_users()
    assert len(users) == len(generator.generate_users())
    assert len(orchestrator.storage.get_all_listings()) == len(generator.generate_listings(users))
    assert len(orchestrator.registry.get_all_ratings()) == len(generator.generate_ratings(users))

    # The events organiser's catering request finds the catering offers
    organiser = next(u for u in users if u.name == "Priya Patel")
    titles = [m.title for m in orchestrator.matches_for_user(organiser.id)]
    assert "Corporate Event Catering" in titles


def test_generate_match_report(orchestrator, workspace):
    orchestrator.create_user(User(id="me", name="Priya Patel", role=UserRole.CUSTOMER))
    orchestrator.create_listing(Listing(
        owner_id="me", title="Need catering",
        category=ListingCategory.FOOD, type=ListingType.REQUEST
    ))
    orchestrator.create_listing(_offer("them"))

    output_path = orchestrator.generate_match_report(output_dir=os.path.join(workspace, "output"))

    assert os.path.exists(output_path)
    assert output_path.endswith("matches_me.csv")


def test_generate_match_report_requires_user(orchestrator):
    with pytest.raises(ValueError):
        orchestrator.generate_match_report()


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
