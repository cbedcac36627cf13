from docintake.analysis.base import BaseAnalyzer
from docintake.analysis.models import Analysis

FALLBACK_SUMMARY = "Document uploaded successfully"
FALLBACK_CONFIDENCE = 0.5


class FallbackAnalyzer(BaseAnalyzer):
    """Deterministic analyzer used when no AI provider is available."""

    def analyze(self, text: str, document_type: str) -> Analysis:
        _ = text, document_type
        return Analysis(
            summary=FALLBACK_SUMMARY,
            key_points=[],
            relevant_to_domain=True,
            extracted_fields={},
            risk_factors=[],
            recommendations=[],
            confidence=FALLBACK_CONFIDENCE,
        )
