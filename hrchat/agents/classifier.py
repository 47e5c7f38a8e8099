"""
IntentClassifier: decide whether a message is a handbook (policy) question.

Rule-based, no LLM call. Three ordered keyword tiers are scanned against the
lower-cased message:

1. Explicit policy vocabulary ("leave policy", "dress code") -> policy
2. Policy question phrasings ("what are the rules", "can i take") -> policy
3. Data request indicators ("show me", "'s report") -> not policy

The first tier with a hit decides; within a tier the first listed phrase wins.
Nothing matching means a data question.
"""

import logging

from hrchat.models.agent import ClassificationResult

logger = logging.getLogger(__name__)


EXPLICIT_POLICY_KEYWORDS: tuple[str, ...] = (
    "leave policy",
    "attendance policy",
    "dress code policy",
    "dress code",
    "code of conduct",
    "probation policy",
    "confirmation policy",
    "appraisal policy",
    "performance policy",
    "review policy",
    "travel policy",
    "benefits policy",
    "welfare policy",
    "employee handbook",
    "hr handbook",
    "hr policy",
    "company policy",
    "work from home policy",
    "wfh policy",
    "holiday policy",
    "salary policy",
    "increment policy",
    "bonus policy",
    "grievance policy",
    "separation policy",
    "retirement policy",
    "notice period policy",
)

POLICY_PHRASES: tuple[str, ...] = (
    "what is the policy",
    "what are the rules",
    "what is the procedure",
    "what are the procedures",
    "explain the policy",
    "tell me about the policy",
    "what are the guidelines",
    "how does the policy work",
    "policy regarding",
    "rules regarding",
    "rules for",
    "guidelines for",
    "procedure for",
    "what are my benefits",
    "what benefits do i get",
    "what benefits am i entitled",
    "how many days of leave am i entitled",
    "how many days of leave do i get",
    "how many days of leave can i",
    "what is my leave entitlement",
    "am i allowed to",
    "can i take",
    "what is the notice period",
    "what is the probation period",
    "how long is probation",
    "how long is notice period",
)

DATA_INDICATORS: tuple[str, ...] = (
    "show me",
    "display",
    "list all",
    "list the",
    "get me",
    "find",
    "search for",
    "report for",
    "report of",
    "'s report",
    "'s leave",
    "'s attendance",
    "'s details",
    "'s records",
    "'s history",
    "how many employees",
    "how many staff",
    "count of",
    "total number",
    "who took",
    "who has",
    "which employees",
    "employees who",
    "staff who",
)


class IntentClassifier:
    """
    Ordered keyword classifier for policy vs. data questions.

    The tiers are constructor arguments so a deployment can extend the
    vocabulary without touching the precedence logic.
    """

    def __init__(
        self,
        explicit_keywords: tuple[str, ...] = EXPLICIT_POLICY_KEYWORDS,
        policy_phrases: tuple[str, ...] = POLICY_PHRASES,
        data_indicators: tuple[str, ...] = DATA_INDICATORS,
    ) -> None:
        self.explicit_keywords = explicit_keywords
        self.policy_phrases = policy_phrases
        self.data_indicators = data_indicators

    def classify(self, message: str) -> ClassificationResult:
        """Classify a raw user message."""
        lowered = message.lower()

        for keyword in self.explicit_keywords:
            if keyword in lowered:
                return self._result(True, f'Contains explicit policy keyword: "{keyword}"')

        for phrase in self.policy_phrases:
            if phrase in lowered:
                return self._result(True, f'Contains policy phrase: "{phrase}"')

        for indicator in self.data_indicators:
            if indicator in lowered:
                return self._result(False, f'Contains data indicator: "{indicator}"')

        return self._result(False, "No policy keywords or phrases detected")

    def _result(self, is_policy: bool, reason: str) -> ClassificationResult:
        logger.debug(f"Intent classified (policy={is_policy}): {reason}")
        return ClassificationResult(is_policy=is_policy, reason=reason)
