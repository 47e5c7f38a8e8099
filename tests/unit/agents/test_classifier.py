"""Unit tests for the rule-based IntentClassifier."""

import pytest

from hrchat.agents.classifier import (
    DATA_INDICATORS,
    EXPLICIT_POLICY_KEYWORDS,
    POLICY_PHRASES,
    IntentClassifier,
)


class TestIntentClassifier:
    """Test suite for policy/data classification."""

    @pytest.fixture
    def classifier(self):
        return IntentClassifier()

    @pytest.mark.parametrize(
        "message",
        [
            "What is the leave policy?",
            "Tell me about the DRESS CODE",
            "Where can I read the employee handbook?",
            "Explain the WFH policy please",
        ],
    )
    def test_explicit_keywords_are_policy(self, classifier, message):
        result = classifier.classify(message)

        assert result.is_policy is True
        assert result.reason.startswith("Contains explicit policy keyword:")

    @pytest.mark.parametrize(
        "message",
        [
            "Can I take leave on Friday?",
            "What is the notice period?",
            "How long is probation here?",
            "What are the rules for overtime?",
        ],
    )
    def test_policy_phrases_are_policy(self, classifier, message):
        result = classifier.classify(message)

        assert result.is_policy is True
        assert result.reason.startswith("Contains policy phrase:")

    @pytest.mark.parametrize(
        "message",
        [
            "Show me Aamir's leave records",
            "How many employees are active?",
            "List all staff in the IT department",
            "Which employees joined this year?",
        ],
    )
    def test_data_indicators_are_not_policy(self, classifier, message):
        result = classifier.classify(message)

        assert result.is_policy is False
        assert result.reason.startswith("Contains data indicator:")

    def test_explicit_keyword_beats_data_indicator(self, classifier):
        result = classifier.classify("Show me the leave policy")

        assert result.is_policy is True
        assert result.reason == 'Contains explicit policy keyword: "leave policy"'

    def test_first_listed_keyword_is_reported(self, classifier):
        # "dress code policy" is listed before "dress code"
        result = classifier.classify("what does the dress code policy say")

        assert result.reason == 'Contains explicit policy keyword: "dress code policy"'

    def test_policy_phrase_beats_data_indicator(self, classifier):
        result = classifier.classify("Can I take a day off? Show me how")

        assert result.is_policy is True
        assert result.reason == 'Contains policy phrase: "can i take"'

    def test_no_match_defaults_to_data(self, classifier):
        result = classifier.classify("Good morning")

        assert result.is_policy is False
        assert result.reason == "No policy keywords or phrases detected"

    def test_data_indicator_reason_names_indicator(self, classifier):
        result = classifier.classify("Give me Priya's details")

        assert result.reason == 'Contains data indicator: "\'s details"'

    def test_custom_vocabulary(self):
        classifier = IntentClassifier(
            explicit_keywords=("canteen policy",),
            policy_phrases=(),
            data_indicators=("show me",),
        )

        assert classifier.classify("What is the canteen policy?").is_policy is True
        assert classifier.classify("What is the leave policy?").is_policy is False

    def test_vocabulary_sizes(self):
        assert len(EXPLICIT_POLICY_KEYWORDS) == len(set(EXPLICIT_POLICY_KEYWORDS))
        assert len(POLICY_PHRASES) == 26
        assert len(DATA_INDICATORS) == 24
