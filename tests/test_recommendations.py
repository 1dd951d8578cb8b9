"""
Test recommendations extraction
"""
from paperlens.core.models import InferenceSuccess
from paperlens.core.recommendations import MAX_RECOMMENDATIONS, RecommendationExtractor


CHAPTER_TEXT = """CHAPTER 5
Recommendations for Practice
1. School administrators should provide regular training for new teachers.
2. The value of peer mentoring
programs should be communicated to all freshmen.
3. Counselors need to monitor student attendance weekly.
References
Smith, J. (2020). Schools should change. Journal of Practice.
"""

NEUTRAL_TEXT = (
    "The weather was pleasant during the data collection period. "
    "Participants arrived on time and completed all sessions. "
    "The building had enough rooms for every group that attended. "
    "Sessions lasted about forty minutes and ended with a short break. "
)


class _FakeClient:
    has_token = True

    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = 0

    def call_model(self, model_id, inputs, parameters=None, token=None, max_attempts=None, timeout_ms=None):
        self.calls += 1
        return self.outcome


class TestRecommendationExtractor:
    """Test RecommendationExtractor"""

    def test_numbered_section(self):
        """Test numbered items with wrapped lines are merged"""
        result = RecommendationExtractor().extract(CHAPTER_TEXT)

        assert result.items == [
            "School administrators should provide regular training for new teachers.",
            "The value of peer mentoring programs should be communicated to all freshmen.",
            "Counselors need to monitor student attendance weekly.",
        ]

    def test_reference_list_is_ignored(self):
        """Test entries after the References heading never become items"""
        result = RecommendationExtractor().extract(CHAPTER_TEXT)
        assert not any("Schools should change" in item for item in result)

    def test_lettered_items(self):
        """Test lettered sub-items"""
        text = (
            "Future studies:\n"
            "a. A longitudinal study should follow students for four years.\n"
            "b. Nothing else was planned here.\n"
        )
        result = RecommendationExtractor().extract(text)
        assert result.items == ["A longitudinal study should follow students for four years."]

    def test_sentences_in_future_work_section(self):
        """Test strong recommendation sentences under a heading"""
        text = (
            "Results\nScores rose in every group.\n\n"
            "Future Work\n"
            "Future research could examine rural schools over a longer period. "
            "The sample was small. Policy makers should fund tutoring in remote areas.\n"
        )
        result = RecommendationExtractor().extract(text)
        assert result.items == [
            "Future research could examine rural schools over a longer period.",
            "Policy makers should fund tutoring in remote areas.",
        ]

    def test_flattened_text(self):
        """Test list markers are recovered from single-line text"""
        text = (
            "Recommendations 1. Teachers should use formative quizzes every week. "
            "2. Parents should review homework with their children."
        )
        result = RecommendationExtractor().extract(text)
        assert "Teachers should use formative quizzes every week." in result.items
        assert "Parents should review homework with their children." in result.items

    def test_flattened_text_with_figure_references(self):
        """Test Fig. and Table numbers are not read as list markers"""
        text = (
            "We report results in Fig. 2. The authors should note that Table 3. "
            "Results improved greatly here. Teachers should use quizzes every single week in class."
        )
        result = RecommendationExtractor().extract(text)
        assert result.items == [
            "The authors should note that Table 3.",
            "Teachers should use quizzes every single week in class.",
        ]

    def test_prepare_text_keeps_figure_references_inline(self):
        """Test only sentence-ending or heading words start a list line"""
        prepared = RecommendationExtractor.prepare_text(
            "See Fig. 2. The plan: 1. Schools should act. 2. Parents should help."
        )
        assert prepared.splitlines() == [
            "See Fig. 2. The plan:",
            "1. Schools should act.",
            "2. Parents should help.",
        ]

    def test_capped_at_twelve(self):
        """Test the final list never exceeds the cap"""
        text = "\n".join(
            f"{index}. Teachers should practice classroom strategy number {index} daily." for index in range(1, 16)
        )
        result = RecommendationExtractor().extract(text)
        assert len(result) == MAX_RECOMMENDATIONS

    def test_no_recommendations(self):
        """Test neutral text renders the explanation"""
        result = RecommendationExtractor().extract(NEUTRAL_TEXT)
        assert len(result) == 0
        rendered = result.render()
        assert "No specific recommendations were identified" in rendered
        assert "This could be because:" in rendered

    def test_model_strategy_used_last(self):
        """Test model lines are used when nothing else matched"""
        client = _FakeClient(
            InferenceSuccess(
                "1. Schools should invest in tutoring programs.\n"
                "2. Parents should attend meetings regularly at school."
            )
        )
        result = RecommendationExtractor(client).extract(NEUTRAL_TEXT)
        assert client.calls == 1
        assert result.items == [
            "Schools should invest in tutoring programs.",
            "Parents should attend meetings regularly at school.",
        ]

    def test_model_not_called_when_rules_match(self):
        """Test rule-based results skip the model"""
        client = _FakeClient(InferenceSuccess("1. Unused line that should not appear."))
        RecommendationExtractor(client).extract(CHAPTER_TEXT)
        assert client.calls == 0


class TestFinalize:
    """Test finalize validation and dedup"""

    def test_dedup_ignores_trailing_punctuation(self):
        """Test near-identical candidates collapse to one"""
        result = RecommendationExtractor.finalize(
            [
                "Schools should adopt peer mentoring programs",
                "Schools should adopt peer mentoring programs.",
            ]
        )
        assert result.items == ["Schools should adopt peer mentoring programs."]

    def test_exclusions_and_short_items(self):
        """Test headings and short fragments are dropped"""
        result = RecommendationExtractor.finalize(
            [
                "CHAPTER 5 should not count as a recommendation",
                "To address the issue we should do more",
                "Too short, should",
                "RECOMMENDATIONS FOR PRACTICE",
                "Researchers should examine the effect of class size.",
            ]
        )
        assert result.items == ["Researchers should examine the effect of class size."]

    def test_items_are_capitalized_sentences(self):
        """Test each item starts upper-case and ends in punctuation"""
        result = RecommendationExtractor.finalize(["future research should include private schools"])
        assert result.items == ["Future research should include private schools."]
