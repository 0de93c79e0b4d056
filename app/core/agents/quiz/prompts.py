"""
Prompts for quiz generation and performance analysis.
"""
import json
from typing import List, Optional

from app.core.config import settings
from app.core.agents.quiz.schemas import GradedResult

# System prompt sent with every provider request
QUIZ_SYSTEM_PROMPT = """You are an educational assistant specializing in creating quizzes and learning materials. Always return valid JSON format when requested. Be accurate and educational."""


# ============= Quiz Generation Prompts =============

QUIZ_GENERATION_PROMPT = """
IMPORTANT: You MUST return ONLY valid JSON format. Do not include any other text, explanations, or markdown.

Create a comprehensive quiz based on the following textbook content. Generate:
- 3 Multiple Choice Questions (MCQs) with 4 options each
- 2 Short Answer Questions (SAQs)
- 1 Long Answer Question (LAQ)

For each question, provide:
- Clear question text
- For MCQs: 4 options labeled A, B, C, D
- Correct answer (for MCQs, the letter A, B, C or D)
- Detailed explanation

Textbook Content:
{content}

Return ONLY valid JSON in this exact format:
{{
  "questions": [
    {{
      "type": "mcq",
      "question": "Question text?",
      "options": ["Option A", "Option B", "Option C", "Option D"],
      "correctAnswer": "A",
      "explanation": "Detailed explanation..."
    }},
    {{
      "type": "saq",
      "question": "Question text?",
      "correctAnswer": "Model answer",
      "explanation": "Detailed explanation..."
    }}
  ]
}}

CRITICAL: Return ONLY the JSON object, no additional text, no markdown formatting, no thinking process.
"""


# ============= Performance Analysis Prompts =============

ANALYSIS_PROMPT = """
Analyze this quiz performance and return ONLY valid JSON.

Quiz Data: {quiz_data}
Score: {score}%

Return JSON in this exact format (all fields must be arrays):
{{
  "strengths": ["strength1", "strength2"],
  "weaknesses": ["weakness1", "weakness2"],
  "recommendations": ["recommendation1", "recommendation2"],
  "keyInsights": ["insight1", "insight2"]
}}

IMPORTANT: Return ONLY the JSON object, no other text, no <think> tags.
"""


def build_quiz_prompt(text: Optional[str], limit: Optional[int] = None) -> str:
    """
    Render the quiz generation prompt for a book.

    Only the first ``limit`` characters of the book text are used.

    Args:
        text: Extracted book text
        limit: Character cap (defaults to settings.QUIZ_TEXT_LIMIT)

    Returns:
        Prompt text
    """
    if limit is None:
        limit = settings.QUIZ_TEXT_LIMIT
    return QUIZ_GENERATION_PROMPT.format(content=(text or "")[:limit])


def build_analysis_prompt(results: List[GradedResult], score: float) -> str:
    """Render the performance analysis prompt for a graded attempt."""
    quiz_data = [
        {
            "question": result.question,
            "type": result.type,
            "correctAnswer": result.correct_answer,
            "userAnswer": result.user_answer or "Not answered",
            "isCorrect": result.is_correct,
        }
        for result in results
    ]
    return ANALYSIS_PROMPT.format(
        quiz_data=json.dumps(quiz_data, indent=2, ensure_ascii=False),
        score=round(score, 2),
    )
