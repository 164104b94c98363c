"""Tests for the learning-rate engine."""
from types import SimpleNamespace

import pytest

from vocaloop.models.learning_models import LearningStatus, QuizType, RGB
from vocaloop.services.learning_rate import (
    DANGER_COLOR,
    PROGRESS_COLOR,
    STATUS_CONFIG,
    SUCCESS_COLOR,
    clamp_rate,
    classify,
    color_for,
    group_by_status,
    quiz_weight,
    score_on_correct,
    score_on_wrong,
    sort_by_learning_rate,
)


@pytest.mark.parametrize("rate, expected", [
    (0, LearningStatus.DIFFICULT),
    (39, LearningStatus.DIFFICULT),
    (40, LearningStatus.LEARNING),
    (79, LearningStatus.LEARNING),
    (80, LearningStatus.MEMORIZED),
    (100, LearningStatus.MEMORIZED),
    (-15, LearningStatus.DIFFICULT),
    (250, LearningStatus.MEMORIZED),
    (None, LearningStatus.DIFFICULT),
    ("high", LearningStatus.DIFFICULT),
    (float("nan"), LearningStatus.DIFFICULT),
])
def test_classify(rate, expected) -> None:
    """Test status bands and their inclusive lower edges."""
    assert classify(rate) == expected


def test_status_config_ranges_match_classify() -> None:
    """Test that the display ranges agree with the classification."""
    for status, config in STATUS_CONFIG.items():
        assert classify(config.low) == status
        assert classify(config.high) == status


def test_color_anchors() -> None:
    """Test the fixed colors at the band edges."""
    assert color_for(0) == DANGER_COLOR == RGB(239, 68, 68)
    assert color_for(39) == PROGRESS_COLOR
    assert color_for(40) == PROGRESS_COLOR == RGB(59, 130, 246)
    assert color_for(79) == SUCCESS_COLOR
    assert color_for(80) == SUCCESS_COLOR == RGB(34, 197, 94)
    assert color_for(100) == SUCCESS_COLOR
    assert SUCCESS_COLOR.hex == "#22c55e"


def test_color_interpolates_per_channel() -> None:
    """Test linear interpolation halfway through the difficult band."""
    color = color_for(19.5)
    assert color == RGB(149, 99, 157)


def test_color_clamps_input() -> None:
    """Test that out-of-range and missing rates are clamped."""
    assert color_for(-50) == DANGER_COLOR
    assert color_for(None) == DANGER_COLOR
    assert color_for(1000) == SUCCESS_COLOR


@pytest.mark.parametrize("rate", range(-10, 111))
def test_color_and_status_agree(rate: int) -> None:
    """Test that every rate gets a color from its own band."""
    status = classify(rate)
    color = color_for(clamp_rate(rate))
    if status == LearningStatus.MEMORIZED:
        assert color == SUCCESS_COLOR
    elif status == LearningStatus.LEARNING:
        # Between progress and success on every channel
        for channel, low, high in zip(color, PROGRESS_COLOR, SUCCESS_COLOR):
            assert min(low, high) <= channel <= max(low, high)
    else:
        for channel, low, high in zip(color, DANGER_COLOR, PROGRESS_COLOR):
            assert min(low, high) <= channel <= max(low, high)


def test_quiz_weight() -> None:
    """Test quiz type weights, including unknown types."""
    assert quiz_weight(QuizType.MULTIPLE) == 1.0
    assert quiz_weight("short") == 1.4
    assert quiz_weight("toefl-complete") == 1.8
    assert quiz_weight("essay") == 1.0
    assert quiz_weight(None) == 1.0


def test_score_on_correct_base_gain() -> None:
    """Test plain correct answers in each modality."""
    assert score_on_correct(
        current_rate=50, quiz_type="multiple", is_reasked=False, is_ai_similar=False, last_penalty=0
    ) == 62
    assert score_on_correct(current_rate=50, quiz_type="short") == 67  # 50 + 16.8
    assert score_on_correct(current_rate=50, quiz_type=QuizType.TOEFL_COMPLETE) == 72  # 50 + 21.6
    assert score_on_correct(current_rate=50, quiz_type="unknown") == 62
    assert score_on_correct() == 12


def test_score_on_correct_reasked_recovers_part_of_penalty() -> None:
    """Test that a re-asked word recovers 60% of its last penalty."""
    assert score_on_correct(
        current_rate=30, quiz_type="short", is_reasked=True, is_ai_similar=False, last_penalty=10
    ) == 36


def test_score_on_correct_ai_similar_recovers_all_plus_bonus() -> None:
    """Test that a paraphrased re-ask recovers the full penalty plus 3."""
    assert score_on_correct(current_rate=30, is_reasked=True, is_ai_similar=True, last_penalty=10) == 43
    # The AI branch wins even without the re-asked flag
    assert score_on_correct(current_rate=30, is_ai_similar=True, last_penalty=10) == 43


def test_score_on_correct_without_penalty_uses_base_gain() -> None:
    """Test that recovery needs a positive last penalty."""
    assert score_on_correct(current_rate=30, is_reasked=True, last_penalty=0) == 42
    assert score_on_correct(current_rate=30, is_ai_similar=True, last_penalty=0) == 42


def test_score_on_correct_accepts_signed_penalty() -> None:
    """Test that the signed penalty from score_on_wrong works as a magnitude."""
    assert score_on_correct(current_rate=30, is_reasked=True, last_penalty=-10) == 36


@pytest.mark.parametrize("penalty", [0, 5, 10, 20, 30])
def test_recovery_ordering(penalty: int) -> None:
    """Test that AI-similar gain >= re-asked gain >= 0."""
    base = 40
    ai_gain = score_on_correct(current_rate=base, is_ai_similar=True, last_penalty=penalty) - base
    reasked_gain = score_on_correct(current_rate=base, is_reasked=True, last_penalty=penalty) - base
    assert ai_gain >= reasked_gain >= 0


def test_score_on_correct_clamps() -> None:
    """Test upper clamping and out-of-range input."""
    assert score_on_correct(current_rate=95, quiz_type="toefl-complete") == 100
    assert score_on_correct(current_rate=150) == 100
    assert score_on_correct(current_rate=-40) == 0
    assert score_on_correct(current_rate=None) == 12
    assert score_on_correct(current_rate=50, is_ai_similar=True, last_penalty=float("inf")) == 100


def test_huge_integers_are_clamped() -> None:
    """Test integers beyond the float range."""
    huge = 10 ** 400
    assert score_on_correct(current_rate=huge) == 100
    assert score_on_correct(current_rate=-huge) == 0
    assert score_on_correct(current_rate=50, is_reasked=True, last_penalty=huge) == 100
    assert score_on_wrong(current_rate=50, wrong_count=huge) == (20, -30)
    assert score_on_wrong(current_rate=huge, wrong_count=-huge) == (100, -5)
    assert classify(huge) == LearningStatus.MEMORIZED
    assert color_for(-huge) == DANGER_COLOR
    assert clamp_rate(huge) == 100


def test_score_on_wrong_first_miss() -> None:
    """Test the lenient first-miss penalty."""
    assert score_on_wrong(current_rate=50, wrong_count=0) == (45, -5)
    assert score_on_wrong(current_rate=0, wrong_count=0).new_rate == 0


def test_score_on_wrong_repeated_miss() -> None:
    """Test escalation with the number of earlier misses."""
    result = score_on_wrong(current_rate=20, wrong_count=2)
    assert result.penalty == -20
    assert result.new_rate == 0
    assert score_on_wrong(current_rate=60, wrong_count=1) == (50, -10)


def test_score_on_wrong_escalation_is_monotonic_and_capped() -> None:
    """Test non-decreasing penalty up to three misses, constant after."""
    magnitudes = [abs(score_on_wrong(current_rate=100, wrong_count=n).penalty) for n in range(0, 8)]
    assert magnitudes == sorted(magnitudes)
    assert magnitudes[3:] == [30] * 5


@pytest.mark.parametrize("current_rate, wrong_count", [
    (150, 0),
    (-40, 2),
    (50, 10000),
    (None, None),
    (50, -3),
    (float("-inf"), 1),
])
def test_score_on_wrong_stays_in_range(current_rate, wrong_count) -> None:
    """Test that extreme input is clamped rather than rejected."""
    result = score_on_wrong(current_rate=current_rate, wrong_count=wrong_count)
    assert isinstance(result.new_rate, int)
    assert 0 <= result.new_rate <= 100


def test_negative_wrong_count_counts_as_first_miss() -> None:
    """Test that a negative count is treated as zero."""
    assert score_on_wrong(current_rate=50, wrong_count=-3).penalty == -5


def test_clamp_rate_rounds_half_up() -> None:
    """Test rounding of fractional scores."""
    assert clamp_rate(12.5) == 13
    assert clamp_rate(12.4) == 12
    assert clamp_rate(-0.4) == 0
    assert clamp_rate(100.6) == 100


def test_group_by_status() -> None:
    """Test grouping words by status."""
    words = [SimpleNamespace(learning_rate=rate) for rate in (0, 45, 90, 39, None)]
    groups = group_by_status(words)
    assert set(groups) == set(LearningStatus)
    assert [w.learning_rate for w in groups[LearningStatus.DIFFICULT]] == [0, 39, None]
    assert [w.learning_rate for w in groups[LearningStatus.LEARNING]] == [45]
    assert [w.learning_rate for w in groups[LearningStatus.MEMORIZED]] == [90]


def test_group_by_status_empty() -> None:
    """Test that every status is present even without words."""
    assert group_by_status([]) == {status: [] for status in LearningStatus}


def test_sort_by_learning_rate() -> None:
    """Test ascending and descending sorting."""
    words = [SimpleNamespace(learning_rate=rate) for rate in (50, None, 90, 10)]
    assert [w.learning_rate for w in sort_by_learning_rate(words)] == [None, 10, 50, 90]
    assert [w.learning_rate for w in sort_by_learning_rate(words, descending=True)] == [90, 50, 10, None]


if __name__ == "__main__":
    pytest.main([__file__])
