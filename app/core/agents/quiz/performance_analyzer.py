"""
Performance analyzer for graded quiz attempts.
Asks the generation provider for qualitative feedback and falls back to a
rule-based analysis whenever that fails.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from app.core.exceptions import AnalysisFormatError
from app.core.agents.quiz.parser import parse_strict
from app.core.agents.quiz.prompts import build_analysis_prompt
from app.core.agents.quiz.provider import GenerationProvider
from app.core.agents.quiz.sanitizer import sanitize_response
from app.core.agents.quiz.schemas import Analysis, GradedResult, Question
from app.core.agents.quiz.scorer import answer_at, is_answer_correct

logger = logging.getLogger(__name__)

# Provider key -> Analysis field, with the statement used when a field comes back empty
ANALYSIS_FIELDS = {
    "strengths": ("strengths", "Demonstrated some understanding of the material"),
    "weaknesses": ("weaknesses", "Areas for improvement identified"),
    "recommendations": ("recommendations", "Review the material and practice more"),
    "keyInsights": ("key_insights", "Keep practicing to improve"),
}


def _as_string_list(value: Any) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        value = [value]
    return [str(item).strip() for item in value if item is not None and str(item).strip()]


def validate_analysis(payload: Any) -> Analysis:
    """
    Coerce a decoded provider payload into an Analysis.

    Scalars become one-item lists, blank entries are dropped and empty
    fields get a generic statement.

    Raises:
        AnalysisFormatError: If the payload is not an object or has none of the fields
    """
    if not isinstance(payload, dict):
        raise AnalysisFormatError("Analysis payload is not a JSON object")

    if not any(key in payload or field in payload for key, (field, _) in ANALYSIS_FIELDS.items()):
        raise AnalysisFormatError("Analysis payload has none of the expected fields")

    values: Dict[str, List[str]] = {}
    for key, (field, fallback) in ANALYSIS_FIELDS.items():
        items = _as_string_list(payload.get(key, payload.get(field)))
        values[field] = items or [fallback]

    return Analysis(**values)


def get_basic_analysis(
    questions: Sequence[Question],
    answers: Sequence[Optional[str]],
    score: float
) -> Analysis:
    """
    Rule-based analysis computed from local data only.

    Args:
        questions: Quiz questions
        answers: User answers by position
        score: Final percentage score

    Returns:
        Deterministic Analysis for the same inputs
    """
    missed_mcqs = sum(
        1 for index, question in enumerate(questions)
        if question.type == "mcq" and not is_answer_correct(question, answer_at(answers, index))
    )
    unanswered = sum(
        1 for index in range(len(questions))
        if not answer_at(answers, index).strip()
    )

    if score >= 70:
        strengths = ["Good conceptual understanding"]
    elif score >= 50:
        strengths = ["Basic understanding of concepts"]
    else:
        strengths = ["Willingness to learn and improve"]

    weaknesses = []
    if missed_mcqs > 0:
        weaknesses.append("Multiple Choice Questions")
    if unanswered > 0:
        weaknesses.append("Question completion")

    return Analysis(
        strengths=strengths,
        weaknesses=weaknesses or ["No major weaknesses identified"],
        recommendations=[
            "Review incorrect answers carefully",
            "Practice more questions to improve accuracy",
            "Focus on understanding the explanations",
        ],
        key_insights=[
            f"Scored {round(score, 2)}% on this quiz",
            f"Missed {missed_mcqs} multiple choice questions"
            if missed_mcqs > 0 else "All multiple choice questions correct",
            f"{unanswered} questions were not answered"
            if unanswered > 0 else "All questions were attempted",
        ],
    )


class PerformanceAnalyzer:
    """
    Produces strengths, weaknesses, recommendations and key insights for an attempt.
    """

    def __init__(self, provider: GenerationProvider):
        self.provider = provider

    async def analyze(
        self,
        questions: Sequence[Question],
        results: List[GradedResult],
        answers: Sequence[Optional[str]],
        score: float
    ) -> Analysis:
        """
        Analyze a graded attempt. Never raises.

        Args:
            questions: Quiz questions
            results: Graded results from the scorer
            answers: Raw user answers
            score: Final percentage score

        Returns:
            Provider analysis, or the rule-based analysis if that fails
        """
        try:
            prompt = build_analysis_prompt(results, score)
            response_text = await self.provider.generate_content(prompt)
            analysis = validate_analysis(parse_strict(sanitize_response(response_text)))
            logger.info("AI analysis completed successfully")
            return analysis

        except Exception as e:
            logger.warning(f"AI analysis failed, using basic analysis: {e}")
            return get_basic_analysis(questions, answers, score)
