"""Language-model backed document analyzer."""

import json
from pathlib import Path

from docintake.analysis.base import BaseAnalyzer
from docintake.analysis.client_base import BaseAnalysisClient
from docintake.analysis.exceptions import AnalysisError
from docintake.analysis.models import Analysis
from docintake.analysis.prompt_loader import load_prompt_template
from docintake.analysis.validator import validate_and_build
from docintake.logging.logger import Log

DEFAULT_EXCERPT_CHARS = 4000


class GenerativeAnalyzer(BaseAnalyzer):
    """Analyzes an excerpt of the extracted text with an AI provider."""

    def __init__(
        self,
        *,
        client: BaseAnalysisClient,
        model: str,
        temperature: float = 0.0,
        max_tokens: int = 1000,
        excerpt_chars: int = DEFAULT_EXCERPT_CHARS,
        prompt_template_path: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(0.2, temperature))
        self._max_tokens = max_tokens
        self._excerpt_chars = excerpt_chars
        self._prompt_template = load_prompt_template(prompt_template_path)

    def analyze(self, text: str, document_type: str) -> Analysis:
        system_prompt = self._build_system_prompt(document_type)
        excerpt = text[: self._excerpt_chars]
        Log.debug(
            f"Analysis request: {len(excerpt)} of {len(text)} chars",
            document_type=document_type,
        )

        raw_response = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
            system_prompt=system_prompt,
            user_prompt=excerpt,
        )
        Log.debug(f"AI raw response:\n{raw_response}")

        result = validate_and_build(self._parse_json(raw_response))
        Log.info(
            f"Analysis complete: {len(result.key_points)} key points, "
            f"{len(result.risk_factors)} risk factors",
            document_type=document_type,
        )
        return result

    def _build_system_prompt(self, document_type: str) -> str:
        return self._prompt_template.format(document_type=document_type)

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise AnalysisError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise AnalysisError("JSON response must be an object")
        return parsed
