from abc import ABC, abstractmethod

from docintake.analysis.models import Analysis


class BaseAnalyzer(ABC):
    """Contract for all content analyzers."""

    @abstractmethod
    def analyze(self, text: str, document_type: str) -> Analysis:
        """Turn extracted text into a structured Analysis.

        Args:
            text: Extracted document text, possibly empty.
            document_type: Caller-supplied classification tag used to bias the analysis.

        Returns:
            A well-formed Analysis.

        Raises:
            AnalysisError: implementations backed by external services may raise;
                           ResilientAnalyzer absorbs these.
        """
