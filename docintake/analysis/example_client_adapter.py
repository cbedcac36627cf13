"""Offline analysis client adapter.

Implements BaseAnalysisClient without network calls. Handy for local
development and demos, and as a template for new provider adapters: implement
BaseAnalysisClient and register the provider in AnalyzerFactory.
"""

import json
from typing import ClassVar

from docintake.analysis.client_base import BaseAnalysisClient


class ExampleClientAdapter(BaseAnalysisClient):
    """Returns a fixed, valid analysis JSON document."""

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "summary": "Example analysis generated without calling a provider",
        "keyPoints": [],
        "relevantToInsurance": True,
        "extractedData": {},
        "riskFactors": [],
        "recommendations": [],
    }

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        _ = model, temperature, max_tokens, system_prompt, user_prompt
        return json.dumps(self.DEFAULT_RESPONSE)
