"""Unit tests for ContentAIClient."""
import json

import pytest
import requests

from cineverse_catalog_service.services.ai_client import ContentAIClient, ContentMetadata

BASE_URL = 'https://ai.example.com/v1beta'
ENDPOINT = f'{BASE_URL}/models/gemini-test:generateContent'


def model_reply(payload):
    """Wrap a JSON payload the way generateContent returns it."""
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return {'candidates': [{'content': {'role': 'model', 'parts': [{'text': text}]}}]}


@pytest.fixture
def client():
    return ContentAIClient(api_key='test-key', model='gemini-test', base_url=BASE_URL + '/', timeout=5)


class TestContentAIClientInit:
    """Tests for client configuration."""

    def test_endpoint(self, client):
        assert client.endpoint == ENDPOINT
        assert client.enabled is True

    def test_defaults_from_config(self, mock_config):
        # Act
        client = ContentAIClient()

        # Assert
        assert client.api_key == 'test-api-key'
        assert client.endpoint == 'https://ai.example.com/v1beta/models/gemini-test:generateContent'

    def test_disabled_without_key(self, requests_mock, monkeypatch):
        # Arrange
        monkeypatch.setattr('cineverse_catalog_service.services.ai_client.get_ai_api_key', lambda: None)
        client = ContentAIClient(base_url=BASE_URL)

        # Act
        result = client.fetch_content_metadata('https://video.example.com/x.mp4', 'X')

        # Assert
        assert client.enabled is False
        assert result is None
        assert requests_mock.call_count == 0


class TestFetchContentMetadata:
    """Tests for fetch_content_metadata."""

    def test_success(self, client, requests_mock):
        # Arrange
        requests_mock.post(ENDPOINT, json=model_reply({
            'duration': '1h 30m',
            'tags': ['space', 'drama'],
            'description': 'Astronauts search for a new home.'
        }))

        # Act
        metadata = client.fetch_content_metadata('https://video.example.com/space.mp4', 'Space')

        # Assert
        assert metadata == ContentMetadata(
            duration='1h 30m',
            tags=['space', 'drama'],
            description='Astronauts search for a new home.'
        )

    def test_request_shape(self, client, requests_mock):
        # Arrange
        requests_mock.post(ENDPOINT, json=model_reply({'duration': '2h', 'tags': [], 'description': 'x'}))

        # Act
        client.fetch_content_metadata('https://video.example.com/space.mp4', 'Space')

        # Assert
        request = requests_mock.last_request
        assert request.headers['x-goog-api-key'] == 'test-key'
        body = request.json()
        assert body['generationConfig'] == {'responseMimeType': 'application/json'}
        prompt = body['contents'][0]['parts'][0]['text']
        assert 'https://video.example.com/space.mp4' in prompt
        assert 'Space' in prompt

    def test_http_error_is_unavailable(self, client, requests_mock):
        requests_mock.post(ENDPOINT, status_code=500)

        assert client.fetch_content_metadata('https://video.example.com/x.mp4', 'X') is None

    def test_connection_error_is_unavailable(self, client, requests_mock):
        requests_mock.post(ENDPOINT, exc=requests.exceptions.ConnectTimeout)

        assert client.fetch_content_metadata('https://video.example.com/x.mp4', 'X') is None

    @pytest.mark.parametrize('reply', [
        {'candidates': []},
        {'unexpected': True},
        model_reply('not json'),
        model_reply({'tags': ['missing duration']}),
    ])
    def test_malformed_reply_is_unavailable(self, client, requests_mock, reply):
        requests_mock.post(ENDPOINT, json=reply)

        assert client.fetch_content_metadata('https://video.example.com/x.mp4', 'X') is None


class TestRecommendContent:
    """Tests for recommend_content."""

    def test_success(self, client, requests_mock):
        # Arrange
        requests_mock.post(ENDPOINT, json=model_reply({'recommendations': ['a2', 'm1']}))

        # Act
        result = client.recommend_content(['a1'], {'a1': ['demons'], 'a2': ['devils'], 'm1': ['dreams']})

        # Assert
        assert result == ['a2', 'm1']
        prompt = requests_mock.last_request.json()['contents'][0]['parts'][0]['text']
        assert '["a1"]' in prompt
        assert '"a2": ["devils"]' in prompt

    def test_failure_is_unavailable(self, client, requests_mock):
        requests_mock.post(ENDPOINT, status_code=429)

        assert client.recommend_content(['a1'], {'a1': []}) is None
