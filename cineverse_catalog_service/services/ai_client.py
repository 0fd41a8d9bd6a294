"""Client for the prompt-based metadata and recommendation flows."""
import json
import logging
from typing import Dict, List, Optional, Type, TypeVar

import requests
from pydantic import BaseModel, Field

from cineverse_catalog_service.config import (
    get_ai_api_key,
    get_ai_base_url,
    get_ai_model,
    get_ai_request_timeout,
)

logger = logging.getLogger(__name__)

OutputT = TypeVar("OutputT", bound=BaseModel)

METADATA_PROMPT = """You are an AI assistant that extracts metadata from video content.

Given the video URL: {video_url} and title: {title}, extract the following information:

- duration: The length of the video in hours and minutes (e.g., "1h 30m").
- tags: Keywords or tags that describe the content of the video.
- description: A short summary of the video's content.

Return the extracted information in JSON format with the keys "duration", "tags" and "description". Be concise and accurate.
"""

RECOMMENDATION_PROMPT = """You are an expert content recommendation system.

Based on the user's viewing history and the content's tags, you will recommend similar content.

Viewing History: {viewing_history}
Content Tags: {content_tags}

Return JSON of the form {{"recommendations": ["<content id>", ...]}} using only content IDs from Content Tags.
"""


class ContentMetadata(BaseModel):
    duration: str
    tags: List[str] = Field(default_factory=list)
    description: str


class RecommendationOutput(BaseModel):
    recommendations: List[str] = Field(default_factory=list)


class ContentAIClient:
    """
    Calls a Gemini ``generateContent`` endpoint with JSON output.

    Calls are single request/response with no retries. Any failure is
    logged and reported as ``None`` ("unavailable"); callers carry on
    without the AI result.
    """

    def __init__(
            self,
            api_key: Optional[str] = None,
            model: Optional[str] = None,
            base_url: Optional[str] = None,
            timeout: Optional[int] = None
    ):
        self.api_key = api_key or get_ai_api_key()
        self.model = model or get_ai_model()
        self.base_url = (base_url or get_ai_base_url()).rstrip("/")
        self.timeout = timeout or get_ai_request_timeout()
        self.session = requests.Session()

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def _generate(self, prompt: str, output_model: Type[OutputT]) -> Optional[OutputT]:
        """Send one prompt and parse the JSON reply into ``output_model``."""
        if not self.enabled:
            logger.warning("AI API key is not configured; skipping request")
            return None

        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }

        try:
            response = self.session.post(
                self.endpoint,
                json=body,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
            text = payload["candidates"][0]["content"]["parts"][0]["text"]
            return output_model.model_validate(json.loads(text))
        except requests.RequestException as e:
            logger.warning(f"AI request failed: {e}")
        except (KeyError, IndexError, TypeError, ValueError) as e:
            # ValueError covers JSON decode errors and pydantic ValidationError
            logger.warning(f"AI response could not be parsed: {e}")
        return None

    def fetch_content_metadata(self, video_url: str, title: str) -> Optional[ContentMetadata]:
        """
        Suggest duration, tags and description for a new upload.

        Returns:
            ContentMetadata, or None if metadata is unavailable
        """
        prompt = METADATA_PROMPT.format(video_url=video_url, title=title)
        metadata = self._generate(prompt, ContentMetadata)
        if metadata is not None:
            logger.info(f"✓ Fetched metadata for '{title}' ({len(metadata.tags)} tags)")
        return metadata

    def recommend_content(
            self,
            viewing_history: List[str],
            content_tags: Dict[str, List[str]]
    ) -> Optional[List[str]]:
        """
        Recommend content IDs from a viewing history.

        Args:
            viewing_history: Content IDs the user has watched or saved
            content_tags: Mapping of content ID to its tags

        Returns:
            Recommended IDs, or None if recommendations are unavailable
        """
        prompt = RECOMMENDATION_PROMPT.format(
            viewing_history=json.dumps(viewing_history),
            content_tags=json.dumps(content_tags),
        )
        output = self._generate(prompt, RecommendationOutput)
        return output.recommendations if output is not None else None
