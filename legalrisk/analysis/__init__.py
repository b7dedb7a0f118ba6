from legalrisk.analysis.analyzer import Analyzer
from legalrisk.analysis.base import BaseAnalyzer
from legalrisk.analysis.factory import AnalyzerFactory
from legalrisk.analysis.fallback import fallback_analysis

__all__ = ["Analyzer", "AnalyzerFactory", "BaseAnalyzer", "fallback_analysis"]
