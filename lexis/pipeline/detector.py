"""Stage 2 – Language classification capability.

Wraps a statistical language identifier behind a two-call contract:

* ``detect(text)`` returns ``(language, found)``; ``found`` is ``False`` when
  no target language passes the backend's acceptance threshold.
* ``confidence(text, language)`` scores *text* against the language that
  ``detect`` just returned.

Two backends are available, selected by ``DETECTOR_BACKEND``:

* **lingua** (default) – ``lingua-language-detector`` restricted to the
  target languages with all models preloaded at construction.
* **langdetect** – the ``langdetect`` port of Google's language-detection
  library, seeded for reproducible results and filtered to the targets.

A detector is built once at startup and is read-only afterwards, so it is
shared by every request thread without locking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

_log = logging.getLogger("lexis.pipeline.detector")


@dataclass(frozen=True)
class DetectedLanguage:
    """Language token handed back by a detector.

    ``iso_code`` is the ISO 639-1 code and ``name`` the English language
    name, both in the backend's own casing.
    """

    iso_code: str
    name: str


# Fixed target set.  Texts outside it cannot be confidently matched.
TARGET_LANGUAGES: tuple[DetectedLanguage, ...] = (
    DetectedLanguage("EN", "ENGLISH"),
    DetectedLanguage("TR", "TURKISH"),
    DetectedLanguage("DE", "GERMAN"),
    DetectedLanguage("FR", "FRENCH"),
    DetectedLanguage("ES", "SPANISH"),
    DetectedLanguage("IT", "ITALIAN"),
    DetectedLanguage("PT", "PORTUGUESE"),
    DetectedLanguage("RU", "RUSSIAN"),
    DetectedLanguage("AR", "ARABIC"),
    DetectedLanguage("ZH", "CHINESE"),
    DetectedLanguage("JA", "JAPANESE"),
    DetectedLanguage("KO", "KOREAN"),
    DetectedLanguage("NL", "DUTCH"),
    DetectedLanguage("AZ", "AZERBAIJANI"),
    DetectedLanguage("FA", "PERSIAN"),
)


class LanguageDetector(Protocol):
    """Read-only classification capability shared by all requests."""

    def detect(self, text: str) -> tuple[DetectedLanguage | None, bool]:
        ...

    def confidence(self, text: str, language: DetectedLanguage) -> float:
        ...


# ── lingua backend ─────────────────────────────────────────────────────────

class LinguaDetector:
    """Detector backed by ``lingua`` with preloaded language models."""

    def __init__(self, languages: Sequence[DetectedLanguage] = TARGET_LANGUAGES) -> None:
        from lingua import Language, LanguageDetectorBuilder  # heavy import – deferred

        self._language_enum = Language
        self._detector = (
            LanguageDetectorBuilder.from_languages(
                *(getattr(Language, lang.name.upper()) for lang in languages)
            )
            .with_preloaded_language_models()
            .build()
        )

    def detect(self, text: str) -> tuple[DetectedLanguage | None, bool]:
        result = self._detector.detect_language_of(text)
        if result is None:
            return None, False
        return DetectedLanguage(iso_code=result.iso_code_639_1.name, name=result.name), True

    def confidence(self, text: str, language: DetectedLanguage) -> float:
        lingua_language = getattr(self._language_enum, language.name.upper())
        return float(self._detector.compute_language_confidence(text, lingua_language))


# ── langdetect backend ─────────────────────────────────────────────────────

# langdetect splits Chinese into two profiles
_LANGDETECT_ALIASES = {"zh-cn": "zh", "zh-tw": "zh"}

LANGDETECT_ACCEPT_THRESHOLD = 0.5


class LangdetectDetector:
    """Detector backed by ``langdetect``.

    Probabilities are summed per target ISO code; a language is found when
    its probability reaches ``LANGDETECT_ACCEPT_THRESHOLD``.  Targets with
    no langdetect profile (Azerbaijani) are never matched.
    """

    def __init__(
        self,
        languages: Sequence[DetectedLanguage] = TARGET_LANGUAGES,
        seed: int = 0,
    ) -> None:
        from langdetect import DetectorFactory
        from langdetect.detector_factory import init_factory

        DetectorFactory.seed = seed
        init_factory()  # load every profile now rather than on first request
        self._targets = {lang.iso_code.lower(): lang for lang in languages}

    def _probabilities(self, text: str) -> dict[str, float]:
        from langdetect import LangDetectException, detect_langs

        try:
            candidates = detect_langs(text)
        except LangDetectException:
            return {}

        probabilities: dict[str, float] = {}
        for candidate in candidates:
            iso = _LANGDETECT_ALIASES.get(candidate.lang, candidate.lang)
            if iso in self._targets:
                probabilities[iso] = probabilities.get(iso, 0.0) + candidate.prob
        return probabilities

    def detect(self, text: str) -> tuple[DetectedLanguage | None, bool]:
        probabilities = self._probabilities(text)
        if not probabilities:
            return None, False

        iso, prob = max(probabilities.items(), key=lambda item: item[1])
        if prob < LANGDETECT_ACCEPT_THRESHOLD:
            return None, False
        return self._targets[iso], True

    def confidence(self, text: str, language: DetectedLanguage) -> float:
        prob = self._probabilities(text).get(language.iso_code.lower(), 0.0)
        return min(prob, 1.0)


# ── Factory ────────────────────────────────────────────────────────────────

_BACKENDS = {
    "lingua": LinguaDetector,
    "langdetect": LangdetectDetector,
}


def build_detector(
    backend: str = "lingua",
    languages: Sequence[DetectedLanguage] = TARGET_LANGUAGES,
) -> LanguageDetector:
    """Construct the detector for *backend*.  Slow: loads language models."""
    factory = _BACKENDS.get(backend)
    if factory is None:
        _log.warning("Unknown detector backend '%s', using lingua", backend)
        factory = LinguaDetector
    return factory(languages)
