"""Prompt templates sent to the generative model."""

from __future__ import annotations

from typing import Sequence

DIFFICULTY_BY_TIER: dict[str, str] = {
    "junior": "basic to intermediate",
    "mid": "intermediate to advanced",
    "senior": "advanced to expert",
}

QUESTION_PROMPT = """You are an expert technical interviewer. Generate exactly {count} technical interview questions based on the following candidate skills: {skills}.

Experience Level: {tier} ({difficulty})

Requirements:
1. Each question should test one specific skill from the list
2. Questions must increase in difficulty (Q1 basic, Q{count} expert level)
3. Questions should be practical and real-world scenario based
4. For each question, provide a comprehensive correct answer (3-5 sentences)
5. Answers should demonstrate deep understanding of the skill

Return a JSON array with exactly {count} objects in this format:
[
  {{
    "id": 1,
    "skill": "skill name",
    "question": "the question text",
    "correct_answer": "comprehensive correct answer",
    "difficulty": "easy|medium|hard",
    "keywords": ["keyword1", "keyword2", "keyword3"]
  }}
]

Only return the JSON array, no markdown or extra text."""

EVALUATION_PROMPT = """You are an expert technical interviewer evaluating a candidate's answer to a technical question.

Question: "{question}"

Correct Answer (reference): "{reference_answer}"

Candidate's Answer: "{answer}"

Expected Keywords: {keywords}

Evaluate the candidate's answer based on:
1. Technical Accuracy (0-40 points): Does the answer correctly address the question?
2. Completeness (0-30 points): Does it cover the main concepts?
3. Clarity (0-20 points): Is the answer clear and well-structured?
4. Keyword Coverage (0-10 points): Are key concepts mentioned?

Return a JSON object with:
{{
  "score": number (0-100),
  "accuracy": number (0-40),
  "completeness": number (0-30),
  "clarity": number (0-20),
  "keyword_score": number (0-10),
  "verdict": "pass|fail",
  "feedback": "specific feedback about the answer",
  "strengths": ["strength1", "strength2"],
  "improvements": ["improvement1", "improvement2"]
}}

Only return the JSON object, no markdown or extra text."""


def question_prompt(skills: Sequence[str], tier: str, count: int = 5) -> str:
    return QUESTION_PROMPT.format(
        count=count,
        skills=", ".join(skills),
        tier=tier,
        difficulty=DIFFICULTY_BY_TIER.get(tier, "intermediate"),
    )


def evaluation_prompt(
    question: str,
    answer: str,
    reference_answer: str,
    keywords: Sequence[str],
) -> str:
    return EVALUATION_PROMPT.format(
        question=question,
        answer=answer,
        reference_answer=reference_answer,
        keywords=", ".join(keywords),
    )
