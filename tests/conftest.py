"""Shared fixtures: a scripted detector so API tests never load real models."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from lexis.config import Settings
from lexis.main import create_app
from lexis.pipeline.detector import DetectedLanguage

ENGLISH = DetectedLanguage("EN", "ENGLISH")


class FakeDetector:
    """Returns a fixed language and score, recording every text it sees."""

    def __init__(
        self,
        language: DetectedLanguage | None = ENGLISH,
        score: float = 0.93,
    ) -> None:
        self.language = language
        self.score = score
        self.detect_calls: list[str] = []
        self.confidence_calls: list[tuple[str, DetectedLanguage]] = []

    def detect(self, text: str) -> tuple[DetectedLanguage | None, bool]:
        self.detect_calls.append(text)
        return self.language, self.language is not None

    def confidence(self, text: str, language: DetectedLanguage) -> float:
        self.confidence_calls.append((text, language))
        return self.score


@pytest.fixture
def detector() -> FakeDetector:
    return FakeDetector()


@pytest.fixture
def settings() -> Settings:
    return Settings(port="3000", max_char_process=20)


@pytest.fixture
def client(detector: FakeDetector, settings: Settings) -> TestClient:
    return TestClient(create_app(detector, settings))
