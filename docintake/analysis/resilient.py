from docintake.analysis.base import BaseAnalyzer
from docintake.analysis.fallback import FallbackAnalyzer
from docintake.analysis.models import Analysis
from docintake.logging.logger import Log


class ResilientAnalyzer(BaseAnalyzer):
    """Runs a primary analyzer and substitutes the fallback result on any error.

    analyze() never raises, so a processed document always carries an analysis.
    """

    def __init__(self, primary: BaseAnalyzer, fallback: BaseAnalyzer | None = None) -> None:
        self._primary = primary
        self._fallback = fallback if fallback is not None else FallbackAnalyzer()

    def analyze(self, text: str, document_type: str) -> Analysis:
        try:
            return self._primary.analyze(text, document_type)
        except Exception as exc:
            Log.warning(
                f"{type(self._primary).__name__} failed, using fallback analysis: {exc}",
                document_type=document_type,
            )
            return self._fallback.analyze(text, document_type)
