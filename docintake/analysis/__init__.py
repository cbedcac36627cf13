from docintake.analysis.base import BaseAnalyzer
from docintake.analysis.factory import AnalyzerFactory
from docintake.analysis.fallback import FallbackAnalyzer
from docintake.analysis.generative import GenerativeAnalyzer
from docintake.analysis.models import Analysis
from docintake.analysis.resilient import ResilientAnalyzer

__all__ = [
    "Analysis",
    "AnalyzerFactory",
    "BaseAnalyzer",
    "FallbackAnalyzer",
    "GenerativeAnalyzer",
    "ResilientAnalyzer",
]
