"""Presidio adapter: exposes the detection engine as a Presidio recognizer.

Lets an existing ``presidio_analyzer.AnalyzerEngine`` pick up the
document-identifier families alongside its own NER recognizers:

    from presidio_analyzer import AnalyzerEngine
    from doc_redactor.presidio_layer import SensitiveDataRecognizer

    engine = AnalyzerEngine()
    engine.registry.add_recognizer(SensitiveDataRecognizer())

The engine reports values, not offsets, so every occurrence of each
value is re-located in the text (case-insensitively) to build spans.
"""

from __future__ import annotations
import re
from typing import TYPE_CHECKING

from presidio_analyzer import EntityRecognizer, RecognizerResult

from .patterns import detect
from .types import SensitiveType

if TYPE_CHECKING:
    from presidio_analyzer.nlp_engine import NlpArtifacts

# SensitiveType → Presidio entity name (reusing Presidio's names where they exist)
ENTITY_NAMES: dict[SensitiveType, str] = {
    SensitiveType.EMAIL: "EMAIL_ADDRESS",
    SensitiveType.PHONE: "PHONE_NUMBER",
    SensitiveType.SSN: "US_SSN",
    SensitiveType.CARD: "CREDIT_CARD",
    SensitiveType.BANK: "BANK_IDENTIFIER",
    SensitiveType.INSURANCE_POLICY: "INSURANCE_POLICY",
    SensitiveType.EMPLOYEE_ID: "EMPLOYEE_ID",
    SensitiveType.MEDICAL_RECORD_NUMBER: "MEDICAL_RECORD_NUMBER",
}

DEFAULT_SCORE = 0.85


class SensitiveDataRecognizer(EntityRecognizer):
    """Presidio recognizer backed by ``doc_redactor.detect``."""

    def __init__(
        self,
        supported_language: str = "en",
        score: float = DEFAULT_SCORE,
    ) -> None:
        self.score = score
        super().__init__(
            supported_entities=list(ENTITY_NAMES.values()),
            name="SensitiveDataRecognizer",
            supported_language=supported_language,
        )

    def load(self) -> None:
        # Patterns are compiled at import time
        pass

    def analyze(
        self,
        text: str,
        entities: list[str],
        nlp_artifacts: NlpArtifacts | None = None,
    ) -> list[RecognizerResult]:
        wanted = set(entities) if entities else set(ENTITY_NAMES.values())
        results: list[RecognizerResult] = []
        for match in detect(text):
            entity_type = ENTITY_NAMES[match.type]
            if entity_type not in wanted:
                continue
            for m in re.finditer(re.escape(match.value), text, re.IGNORECASE):
                results.append(RecognizerResult(
                    entity_type=entity_type,
                    start=m.start(),
                    end=m.end(),
                    score=self.score,
                ))
        return sorted(results, key=lambda r: r.start)
