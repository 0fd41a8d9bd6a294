"""Unit tests for home feed aggregation."""
import pytest

from cineverse_catalog_service.catalog.home import HomeFeed, aggregate
from cineverse_catalog_service.catalog.schemas import ContentItem


def make_item(item_id, content_type, rating=None):
    return ContentItem(id=item_id, title=f"Title {item_id}", type=content_type, rating=rating, year=2020)


class TestAggregate:
    """Tests for aggregate function."""

    def test_trending_sorted_by_rating(self):
        # Arrange
        items = [
            make_item('a', 'movie', rating=9),
            make_item('b', 'movie', rating=7),
            make_item('c', 'anime', rating=8),
        ]

        # Act
        feed = aggregate(items)

        # Assert
        assert [item.id for item in feed.trending] == ['a', 'c', 'b']
        assert feed.hero is feed.trending[0]

    def test_sections_keep_input_order(self, sample_content_items):
        # Act
        feed = aggregate(sample_content_items)

        # Assert
        assert [item.id for item in feed.movies] == ['m1', 'm2', 'm3']
        assert [item.id for item in feed.anime] == ['a1', 'a2']
        assert feed.by_type('movie') is feed.movies
        assert feed.by_type('anime') is feed.anime

    def test_unrated_items_trend_last(self, sample_content_items):
        feed = aggregate(sample_content_items)

        assert feed.trending[-1].id == 'a2'
        assert feed.hero.id == 'm1'

    def test_sections_truncated_to_limit(self):
        # Arrange
        items = [make_item(f"m{i}", 'movie', rating=i % 10) for i in range(15)]
        items += [make_item(f"a{i}", 'anime', rating=5) for i in range(12)]

        # Act
        feed = aggregate(items)
        small = aggregate(items, limit=3)

        # Assert
        assert len(feed.trending) == 10
        assert len(feed.movies) == 10
        assert len(feed.anime) == 10
        assert len(small.trending) == 3
        assert [item.id for item in small.movies] == ['m0', 'm1', 'm2']

    def test_empty_catalog(self):
        feed = aggregate([])

        assert feed.hero is None
        assert feed.trending == []
        assert feed.movies == []
        assert feed.anime == []

    def test_does_not_mutate_input(self, sample_content_items):
        before = list(sample_content_items)

        aggregate(sample_content_items)

        assert all(a is b for a, b in zip(sample_content_items, before))

    def test_deterministic(self, sample_content_items):
        assert aggregate(sample_content_items) == aggregate(sample_content_items)


class TestHomeFeed:
    """Tests for HomeFeed."""

    def test_by_type_unknown(self):
        with pytest.raises(ValueError, match="Unknown content type"):
            HomeFeed().by_type('series')
