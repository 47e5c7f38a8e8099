"""
Pipeline stages for the HR chat assistant.

Usage:
    from hrchat.agents import IntentClassifier, StatementExtractor, QueryExecutor

    classifier = IntentClassifier()
    result = classifier.classify("What is the leave policy?")
"""

from hrchat.agents.classifier import IntentClassifier
from hrchat.agents.executor import QueryExecutor
from hrchat.agents.extraction import StatementExtractor
from hrchat.agents.formatting import format_fallback
from hrchat.agents.response_synthesis import ResponseSynthesizer
from hrchat.agents.validator import BLOCKED_KEYWORDS, is_safe_query, strip_sql_comments

__all__ = [
    "IntentClassifier",
    "StatementExtractor",
    "QueryExecutor",
    "ResponseSynthesizer",
    "format_fallback",
    "is_safe_query",
    "strip_sql_comments",
    "BLOCKED_KEYWORDS",
]
