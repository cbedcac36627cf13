from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Analysis:
    """Structured semantic summary of a document's extracted text."""

    summary: str
    key_points: list[str] = field(default_factory=list)
    relevant_to_domain: bool = True
    extracted_fields: dict[str, str] = field(default_factory=dict)
    risk_factors: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    confidence: float | None = None

    def to_payload(self) -> dict[str, Any]:
        """Serialize with the camelCase keys used by the JSONB column and the API."""
        return {
            "summary": self.summary,
            "keyPoints": list(self.key_points),
            "relevantToDomain": self.relevant_to_domain,
            "extractedFields": dict(self.extracted_fields),
            "riskFactors": list(self.risk_factors),
            "recommendations": list(self.recommendations),
            "confidence": self.confidence,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Analysis":
        """Rebuild from a payload previously produced by to_payload."""
        return cls(
            summary=payload["summary"],
            key_points=list(payload.get("keyPoints", [])),
            relevant_to_domain=bool(payload.get("relevantToDomain", True)),
            extracted_fields=dict(payload.get("extractedFields", {})),
            risk_factors=list(payload.get("riskFactors", [])),
            recommendations=list(payload.get("recommendations", [])),
            confidence=payload.get("confidence"),
        )
