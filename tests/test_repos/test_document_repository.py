"""Unit tests for DocumentRepository."""
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from cineverse_catalog_service.exceptions import (
    DocumentNotFoundError,
    DocumentWriteError,
    InvalidFilterError,
    LoadError,
)
from cineverse_catalog_service.repos.document_repository import DocumentRepository


@pytest.fixture
def repo(test_db_session, change_feed):
    return DocumentRepository(test_db_session, change_feed)


def db_error():
    return OperationalError("SELECT", {}, Exception("database is unavailable"))


class TestReads:
    """Tests for list_documents and get_document."""

    def test_list_returns_insertion_order(self, repo):
        # Arrange
        repo.set_document('content', 'z', {'title': 'Z'})
        repo.set_document('content', 'a', {'title': 'A'})
        repo.set_document('content', 'm', {'title': 'M'})

        # Act
        documents = repo.list_documents('content')

        # Assert
        assert [doc['id'] for doc in documents] == ['z', 'a', 'm']

    def test_list_is_scoped_to_collection(self, repo):
        repo.set_document('content', 'c1', {'title': 'C'})
        repo.set_document('users/u1/watchlist', 'c1', {'title': 'C'})

        assert len(repo.list_documents('content')) == 1
        assert len(repo.list_documents('users/u1/watchlist')) == 1
        assert repo.list_documents('users/u2/watchlist') == []

    def test_list_with_equality_filter(self, repo):
        # Arrange
        repo.set_document('content', 'm1', {'type': 'movie'})
        repo.set_document('content', 'a1', {'type': 'anime'})
        repo.set_document('content', 'm2', {'type': 'movie'})

        # Act
        documents = repo.list_documents('content', ('type', '==', 'movie'))

        # Assert
        assert [doc['id'] for doc in documents] == ['m1', 'm2']

    def test_filter_on_missing_field_matches_nothing(self, repo):
        repo.set_document('content', 'm1', {'type': 'movie'})

        assert repo.list_documents('content', ('genre', '==', None)) == []

    @pytest.mark.parametrize('where', [
        ('type', '!=', 'movie'),
        ('year', '>', 2000),
        ('type', 'movie'),
        'type == movie',
    ])
    def test_unsupported_filters_rejected(self, repo, where):
        with pytest.raises(InvalidFilterError):
            repo.list_documents('content', where)

    def test_get_document(self, repo):
        repo.set_document('content', 'm1', {'title': 'Inception'})

        assert repo.get_document('content', 'm1') == {'title': 'Inception', 'id': 'm1'}
        assert repo.get_document('content', 'missing') is None

    def test_count_documents(self, repo):
        repo.add_document('content', {'title': 'A'})
        repo.add_document('content', {'title': 'B'})

        assert repo.count_documents('content') == 2

    def test_load_failure_raises_load_error(self, change_feed):
        # Arrange
        db = Mock()
        db.query.side_effect = db_error()
        repo = DocumentRepository(db, change_feed)

        # Act / Assert
        with pytest.raises(LoadError) as exc_info:
            repo.list_documents('content')
        assert exc_info.value.collection == 'content'

        with pytest.raises(LoadError):
            repo.get_document('content', 'm1')


class TestWrites:
    """Tests for add, set, update and delete."""

    def test_add_generates_id(self, repo):
        # Act
        doc_id = repo.add_document('content', {'title': 'New', 'id': 'ignored'})

        # Assert
        assert len(doc_id) == 32
        assert repo.get_document('content', doc_id) == {'title': 'New', 'id': doc_id}

    def test_set_overwrites(self, repo):
        repo.set_document('users', 'u1', {'displayName': 'Ana', 'role': 'admin'})

        repo.set_document('users', 'u1', {'displayName': 'Ana B'})

        assert repo.get_document('users', 'u1') == {'displayName': 'Ana B', 'id': 'u1'}

    def test_set_merge_keeps_other_fields(self, repo):
        repo.set_document('users', 'u1', {'displayName': 'Ana', 'role': 'admin'})

        repo.set_document('users', 'u1', {'displayName': 'Ana B'}, merge=True)

        assert repo.get_document('users', 'u1') == {'displayName': 'Ana B', 'role': 'admin', 'id': 'u1'}

    def test_update_merges(self, repo):
        repo.set_document('content', 'm1', {'title': 'Old', 'year': 2000})

        repo.update_document('content', 'm1', {'title': 'New'})

        assert repo.get_document('content', 'm1') == {'title': 'New', 'year': 2000, 'id': 'm1'}

    def test_update_missing_document(self, repo):
        with pytest.raises(DocumentNotFoundError) as exc_info:
            repo.update_document('content', 'missing', {'title': 'New'})

        assert exc_info.value.doc_id == 'missing'
        assert repo.get_document('content', 'missing') is None

    def test_delete(self, repo):
        repo.set_document('content', 'm1', {'title': 'A'})

        assert repo.delete_document('content', 'm1') is True
        assert repo.delete_document('content', 'm1') is False
        assert repo.get_document('content', 'm1') is None

    def test_delete_collection(self, repo):
        repo.set_document('content', 'm1', {'title': 'A'})
        repo.set_document('content', 'm2', {'title': 'B'})
        repo.set_document('users', 'u1', {'role': 'user'})

        assert repo.delete_collection('content') == 2
        assert repo.count_documents('content') == 0
        assert repo.count_documents('users') == 1

    def test_write_failure_rolls_back(self, change_feed):
        # Arrange
        db = Mock()
        db.commit.side_effect = db_error()
        repo = DocumentRepository(db, change_feed)
        calls = []
        change_feed.subscribe('content', calls.append)

        # Act
        with pytest.raises(DocumentWriteError):
            repo.add_document('content', {'title': 'A'})

        # Assert
        db.rollback.assert_called_once()
        assert calls == []

    def test_write_publishes_collection(self, repo, change_feed):
        calls = []
        change_feed.subscribe('users/u1/watchlist', calls.append)

        repo.set_document('users/u1/watchlist', 'm1', {'title': 'A'})

        assert calls == ['users/u1/watchlist']


class TestSubscribe:
    """Tests for live subscriptions."""

    def test_initial_snapshot_delivered(self, repo):
        # Arrange
        repo.set_document('content', 'm1', {'type': 'movie'})
        snapshots = []

        # Act
        repo.subscribe('content', snapshots.append)

        # Assert
        assert snapshots == [[{'type': 'movie', 'id': 'm1'}]]

    def test_updates_delivered_after_writes(self, repo):
        # Arrange
        snapshots = []
        repo.subscribe('content', snapshots.append, where=('type', '==', 'anime'))

        # Act
        repo.set_document('content', 'a1', {'type': 'anime'})
        repo.set_document('content', 'm1', {'type': 'movie'})

        # Assert
        assert [[doc['id'] for doc in snap] for snap in snapshots] == [[], ['a1'], ['a1']]

    def test_writes_from_other_repository_delivered(self, repo, test_db_session, change_feed):
        snapshots = []
        repo.subscribe('content', snapshots.append)

        DocumentRepository(test_db_session, change_feed).add_document('content', {'title': 'A'})

        assert len(snapshots) == 2
        assert snapshots[-1][0]['title'] == 'A'

    def test_no_deliveries_after_unsubscribe(self, repo, change_feed):
        # Arrange
        snapshots = []
        subscription = repo.subscribe('content', snapshots.append)

        # Act
        subscription.unsubscribe()
        repo.set_document('content', 'm1', {'type': 'movie'})

        # Assert
        assert snapshots == [[]]
        assert change_feed.subscriber_count('content') == 0

    def test_load_error_goes_to_on_error(self, change_feed):
        # Arrange
        db = Mock()
        db.query.side_effect = db_error()
        repo = DocumentRepository(db, change_feed)
        snapshots, errors = [], []

        # Act
        repo.subscribe('content', snapshots.append, on_error=errors.append)

        # Assert
        assert snapshots == []
        assert len(errors) == 1
        assert isinstance(errors[0], LoadError)

    def test_invalid_filter_rejected_up_front(self, repo, change_feed):
        with pytest.raises(InvalidFilterError):
            repo.subscribe('content', lambda docs: None, where=('year', '>=', 2000))

        assert change_feed.subscriber_count('content') == 0

