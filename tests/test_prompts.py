"""Tests for prompt rendering."""
from app.core.agents.quiz.prompts import build_analysis_prompt, build_quiz_prompt
from app.core.agents.quiz.schemas import GradedResult

SENTINEL = "☃"


def test_quiz_prompt_truncates_to_first_3000_characters() -> None:
    text = "a" * 2999 + "b" + SENTINEL * 500
    prompt = build_quiz_prompt(text)

    assert "a" * 2999 + "b" in prompt
    assert SENTINEL not in prompt


def test_quiz_prompt_respects_custom_limit() -> None:
    prompt = build_quiz_prompt("x" * 10 + SENTINEL, limit=10)
    assert SENTINEL not in prompt


def test_quiz_prompt_is_deterministic_and_describes_mix() -> None:
    first = build_quiz_prompt("Photosynthesis converts light into chemical energy.")
    second = build_quiz_prompt("Photosynthesis converts light into chemical energy.")

    assert first == second
    assert "3 Multiple Choice Questions" in first
    assert "2 Short Answer Questions" in first
    assert "1 Long Answer Question" in first
    assert '"questions"' in first


def test_quiz_prompt_handles_missing_text() -> None:
    assert "Textbook Content:" in build_quiz_prompt(None)


def test_analysis_prompt_embeds_results_and_score() -> None:
    results = [
        GradedResult(
            question="What is 2 + 2?",
            user_answer="",
            correct_answer="B",
            explanation="Basic arithmetic.",
            is_correct=False,
            type="mcq",
        )
    ]
    prompt = build_analysis_prompt(results, 66.666666)

    assert "What is 2 + 2?" in prompt
    assert "Not answered" in prompt
    assert "Score: 66.67%" in prompt
    assert "keyInsights" in prompt
