"""Shared test fixtures and configuration for pytest."""
import pytest
import json
from unittest.mock import Mock, patch
from typing import Dict, List
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cineverse_catalog_service.catalog.schemas import ContentItem
from cineverse_catalog_service.models.base import Base
from cineverse_catalog_service.repos.change_feed import ChangeFeed
from cineverse_catalog_service.repos.content_repository import ContentRepository


# ===== Database Fixtures =====

@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine):
    """Create a database session for testing."""
    SessionLocal = sessionmaker(bind=test_db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def change_feed() -> ChangeFeed:
    """Isolated change feed so subscriptions never leak between tests."""
    return ChangeFeed()


# ===== Sample Data Fixtures =====

@pytest.fixture
def sample_content_documents() -> List[Dict]:
    """Catalog documents as stored (camelCase, with ids)."""
    return [
        {
            'id': 'm1',
            'title': 'Inception',
            'description': 'A thief who steals corporate secrets through dream-sharing.',
            'type': 'movie',
            'genre': ['Action', 'Sci-Fi'],
            'tags': ['dreams', 'heist'],
            'year': 2010,
            'rating': 8.8,
            'duration': '2h 28m',
            'posterUrl': 'https://img.example.com/inception/poster.jpg',
            'thumbnailUrl': 'https://img.example.com/inception/thumb.jpg',
            'heroUrl': 'https://img.example.com/inception/hero.jpg',
            'videoUrl': 'https://video.example.com/inception.mp4',
        },
        {
            'id': 'a1',
            'title': 'Demon Slayer',
            'description': 'A boy becomes a demon slayer after his family is slaughtered.',
            'type': 'anime',
            'genre': ['Action', 'Fantasy'],
            'tags': ['demons', 'sword fight'],
            'year': 2019,
            'rating': 8.7,
            'posterUrl': 'https://img.example.com/demon-slayer/poster.jpg',
            'thumbnailUrl': 'https://img.example.com/demon-slayer/thumb.jpg',
            'videoUrl': 'https://video.example.com/demon-slayer/trailer.mp4',
            'episodes': [
                {
                    'seasonNumber': 1,
                    'episodeNumber': 1,
                    'episodeCode': 'S1E1',
                    'title': 'Cruelty',
                    'videoUrl': 'https://video.example.com/demon-slayer/s1e1.mp4',
                    'thumbnailUrl': 'https://img.example.com/demon-slayer/s1e1.jpg',
                },
                {
                    'seasonNumber': 1,
                    'episodeNumber': 2,
                    'episodeCode': 'S1E2',
                    'title': 'Trainer Sakonji Urokodaki',
                    'videoUrl': 'https://video.example.com/demon-slayer/s1e2.mp4',
                    'thumbnailUrl': 'https://img.example.com/demon-slayer/s1e2.jpg',
                },
            ],
        },
        {
            'id': 'm2',
            'title': 'The Matrix',
            'description': 'A hacker learns the true nature of his reality.',
            'type': 'movie',
            'genre': ['Action', 'Sci-Fi'],
            'tags': ['simulation'],
            'year': 1999,
            'rating': 8.7,
            'posterUrl': 'https://img.example.com/matrix/poster.jpg',
            'thumbnailUrl': 'https://img.example.com/matrix/thumb.jpg',
            'videoUrl': 'https://video.example.com/matrix.mp4',
        },
        {
            'id': 'a2',
            'title': 'Chainsaw Man',
            'description': 'A young devil hunter merges with his chainsaw devil dog.',
            'type': 'anime',
            'genre': ['Action', 'Horror'],
            'tags': ['devils'],
            'year': 2022,
            'posterUrl': 'https://img.example.com/chainsaw-man/poster.jpg',
            'thumbnailUrl': 'https://img.example.com/chainsaw-man/thumb.jpg',
            'videoUrl': 'https://video.example.com/chainsaw-man.mp4',
        },
        {
            'id': 'm3',
            'title': 'Paddington 2',
            'description': 'Paddington picks up odd jobs to buy a pop-up book.',
            'type': 'movie',
            'genre': ['Comedy', 'Family'],
            'tags': ['bear'],
            'year': 2017,
            'rating': 7.8,
            'posterUrl': 'https://img.example.com/paddington/poster.jpg',
            'thumbnailUrl': 'https://img.example.com/paddington/thumb.jpg',
            'videoUrl': 'https://video.example.com/paddington.mp4',
        },
    ]


@pytest.fixture
def sample_content_items(sample_content_documents) -> List[ContentItem]:
    """Parsed catalog items in store order."""
    return [ContentItem.model_validate(doc) for doc in sample_content_documents]


@pytest.fixture
def seeded_content(test_db_session, change_feed, sample_content_documents) -> ContentRepository:
    """Store the sample catalog in the test database."""
    repo = ContentRepository(test_db_session, change_feed)
    for doc in sample_content_documents:
        repo.import_content(doc['id'], doc)
    return repo


@pytest.fixture
def valid_form_payload() -> Dict:
    """Admin upload form values for a new anime."""
    return {
        'title': 'Frieren',
        'description': 'An elf mage reflects on life after the hero party disbands.',
        'type': 'anime',
        'year': 2023,
        'rating': '9.1',
        'duration': '24m',
        'genre': 'Adventure, Fantasy',
        'tags': 'elves, magic',
        'posterUrl': 'https://img.example.com/frieren/poster.jpg',
        'thumbnailUrl': 'https://img.example.com/frieren/thumb.jpg',
        'heroUrl': '',
        'videoUrl': 'https://video.example.com/frieren/trailer.mp4',
        'episodes': [
            {
                'seasonNumber': 1,
                'episodeNumber': 1,
                'episodeCode': 'S1E1',
                'title': "The Journey's End",
                'videoUrl': 'https://video.example.com/frieren/s1e1.mp4',
                'thumbnailUrl': 'https://img.example.com/frieren/s1e1.jpg',
            }
        ],
    }


# ===== Timer Fixtures =====

class FakeTimer:
    """Manually fired stand-in for ``threading.Timer``."""

    def __init__(self, interval, function, args=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if self.started and not self.cancelled:
            self.function(*self.args)


class FakeTimerFactory:
    """Records every timer a debouncer creates."""

    def __init__(self):
        self.timers: List[FakeTimer] = []

    def __call__(self, interval, function, args=None):
        timer = FakeTimer(interval, function, args=args)
        self.timers.append(timer)
        return timer

    @property
    def latest(self) -> FakeTimer:
        return self.timers[-1]


@pytest.fixture
def fake_timers() -> FakeTimerFactory:
    return FakeTimerFactory()


# ===== Configuration Fixtures =====

@pytest.fixture
def mock_config(monkeypatch):
    """Mock configuration values."""
    monkeypatch.setenv('DATABASE_URL', 'sqlite:///:memory:')
    monkeypatch.setenv('GEMINI_API_KEY', 'test-api-key')
    monkeypatch.setenv('AI_MODEL', 'gemini-test')
    monkeypatch.setenv('AI_BASE_URL', 'https://ai.example.com/v1beta')
    monkeypatch.setenv('SEARCH_DEBOUNCE_MS', '300')
    monkeypatch.setenv('CATALOG_SECTION_LIMIT', '5')


@pytest.fixture
def mock_local_settings(tmp_path):
    """Mock local.settings.json file."""
    settings = {
        "Values": {
            "DATABASE_URL": "sqlite:///:memory:",
            "GEMINI_API_KEY": "settings-api-key",
            "CATALOG_SECTION_LIMIT": "7"
        }
    }

    settings_file = tmp_path / "local.settings.json"
    with open(settings_file, 'w') as f:
        json.dump(settings, f)

    # Point the project root at tmp_path
    with patch('cineverse_catalog_service.config.Path') as mock_path:
        mock_path.return_value.resolve.return_value.parent.parent = tmp_path
        yield settings_file


# ===== Azure Functions Fixtures =====

@pytest.fixture
def mock_http_request():
    """Mock Azure Functions HttpRequest."""
    mock_req = Mock()
    mock_req.route_params = {}
    mock_req.params = {}
    mock_req.headers = {}
    mock_req.get_json.return_value = {}
    return mock_req
