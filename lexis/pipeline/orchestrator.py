"""Pipeline orchestrator – runs every stage for one ``/detect`` call.

Stage 0 parses and validates the raw body, stage 1 truncates the text to
the configured code-point budget, stage 2 classifies it and the result is
normalised into a ``DetectionResponse``.

Failures are raised as ``LexisError`` subclasses; the HTTP layer turns
them into error bodies.  Nothing is retried.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from lexis.errors import DetectionFailedError, EmptyTextError, InvalidJSONError
from lexis.logger import log_detection
from lexis.models import DetectionRequest, DetectionResponse
from lexis.pipeline.detector import LanguageDetector
from lexis.pipeline.truncate import truncate_text

_log = logging.getLogger("lexis.pipeline")


def parse_request(raw_body: bytes | str) -> DetectionRequest:
    """Decode *raw_body* into a ``DetectionRequest``.

    Raises ``InvalidJSONError`` for malformed JSON, a non-object body or a
    non-string ``text`` field.
    """
    try:
        return DetectionRequest.model_validate_json(raw_body)
    except ValidationError as exc:
        _log.debug("Rejected request body: %s", exc.errors()[0].get("type"))
        raise InvalidJSONError() from exc


class DetectionPipeline:
    """Request pipeline bound to one detector and one code-point budget.

    Holds no per-request state, so a single instance serves every request
    concurrently.
    """

    def __init__(self, detector: LanguageDetector, max_char_process: int) -> None:
        if max_char_process <= 0:
            raise ValueError("max_char_process must be a positive integer")
        self.detector = detector
        self.max_char_process = max_char_process

    def handle(self, raw_body: bytes | str) -> DetectionResponse:
        """Run the full pipeline on a raw request body."""
        request = parse_request(raw_body)
        return self.detect(request.text)

    def detect(self, text: str) -> DetectionResponse:
        """Validate, truncate and classify *text*."""
        # Emptiness is judged on the raw text, before truncation
        if len(text) == 0:
            raise EmptyTextError()

        sample = truncate_text(text, self.max_char_process)

        language, found = self.detector.detect(sample)
        if not found or language is None:
            log_detection("detection_failed", len(text), len(sample))
            raise DetectionFailedError()

        # Same sample for both calls keeps iso_code and confidence consistent
        confidence = self.detector.confidence(sample, language)

        response = DetectionResponse(
            iso_code=language.iso_code.lower(),
            language=language.name.lower(),
            confidence=confidence,
        )
        log_detection(
            "detected",
            len(text),
            len(sample),
            iso_code=response.iso_code,
            language=response.language,
            confidence=response.confidence,
        )
        return response
