from abc import ABC, abstractmethod
from dataclasses import dataclass

from docintake.analysis.models import Analysis
from docintake.processor.models import Document, Submission


@dataclass(slots=True)
class PipelineContext:
    submission: Submission
    document: Document
    extracted_text: str | None = None
    analysis: Analysis | None = None
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
