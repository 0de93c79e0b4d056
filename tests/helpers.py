"""Shared test doubles and sample payloads."""
import asyncio
import json
from typing import List, Optional, Union

from app.core.agents.quiz.provider import GenerationProvider

SAMPLE_QUIZ = {
    "questions": [
        {
            "type": "mcq",
            "question": "What organelle produces ATP?",
            "options": ["Nucleus", "Mitochondria", "Ribosome", "Golgi apparatus"],
            "correctAnswer": "B",
            "explanation": "Mitochondria are the site of cellular respiration.",
        },
        {
            "type": "mcq",
            "question": "Which molecule carries genetic information?",
            "options": ["DNA", "ATP", "Glucose", "Lipid"],
            "correctAnswer": "A",
            "explanation": "DNA stores hereditary information.",
        },
        {
            "type": "mcq",
            "question": "What is the basic unit of life?",
            "options": ["Atom", "Organ", "Tissue", "Cell"],
            "correctAnswer": "D",
            "explanation": "The cell is the smallest unit of life.",
        },
        {
            "type": "saq",
            "question": "Define osmosis.",
            "correctAnswer": "Diffusion of water across a semi-permeable membrane.",
            "explanation": "Water moves toward the higher solute concentration.",
        },
        {
            "type": "saq",
            "question": "Name the pigment used in photosynthesis.",
            "correctAnswer": "Chlorophyll",
            "explanation": "Chlorophyll absorbs light energy.",
        },
        {
            "type": "laq",
            "question": "Explain how cells obtain energy from glucose.",
            "correctAnswer": "Glycolysis, the Krebs cycle and oxidative phosphorylation...",
            "explanation": "Cellular respiration releases energy stored in glucose.",
        },
    ]
}

SAMPLE_QUIZ_JSON = json.dumps(SAMPLE_QUIZ)

SAMPLE_ANALYSIS = {
    "strengths": ["Solid grasp of cell structure"],
    "weaknesses": ["Energy metabolism"],
    "recommendations": ["Revisit the chapter on respiration"],
    "keyInsights": ["Free-text answers were thorough"],
}

SAMPLE_ANALYSIS_JSON = json.dumps(SAMPLE_ANALYSIS)

Reply = Union[str, Exception]


class ScriptedProvider(GenerationProvider):
    """
    Generation provider that replays scripted replies in order.

    The last reply repeats once the script runs out. When ``gate`` is set,
    every call waits on it before answering.
    """

    def __init__(self, *replies: Reply, gate: Optional[asyncio.Event] = None):
        self.replies: List[Reply] = list(replies)
        self.prompts: List[str] = []
        self.gate = gate

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def generate_content(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.gate is not None:
            await self.gate.wait()
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply
