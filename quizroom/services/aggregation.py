"""Helpers for building answer aggregates shared across routes."""

from __future__ import annotations

from typing import Any

from quizroom.database import Database
from quizroom.models import AnswerBundle


async def get_all_answers_by_event_key(db: Database, event_key: str) -> list[AnswerBundle]:
    """Return one bundle per question of the room, ordered by question id.

    Questions are resolved first, then each question's choices and answers are
    fetched one question at a time. Unknown event keys give an empty list.
    """

    bundles: list[AnswerBundle] = []

    for question in await db.get_all_questions_by_event_key(event_key):
        choices = await db.get_all_choices_by_question(question.question_id)
        answers = await db.get_all_answers_by_question(question.question_id)

        bundles.append(
            AnswerBundle(
                question_id=question.question_id,
                question_label=question.question_label,
                choices=[c.choice_label for c in choices],
                answers=[a.answer_label for a in answers],
            )
        )

    return bundles


def build_distribution(bundle: AnswerBundle) -> dict[str, Any]:
    """Return answer counts and percentages for a bundle."""

    counts: dict[str, int] = {label: 0 for label in bundle.choices}
    for label in bundle.answers:
        counts[label] = counts.get(label, 0) + 1

    total = len(bundle.answers)
    percentages: dict[str, float] = {}

    if total > 0:
        for key, count in counts.items():
            percentages[key] = round((count / total) * 100, 2)
    else:
        for key in counts.keys():
            percentages[key] = 0.0

    return {
        "question_id": bundle.question_id,
        "question_label": bundle.question_label,
        "counts": counts,
        "total": total,
        "percentages": percentages,
        "choices": bundle.choices,
    }
