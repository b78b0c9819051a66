"""
Participant routes for joining a room and submitting answers
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from quizroom.database import Database
from quizroom.dependencies import get_database, verify_user_auth
from quizroom.models import Choice, Question, Room

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# Request/Response models

class AnswerSubmitRequest(BaseModel):
    """Request to submit an answer"""
    question_id: int
    answer_label: str


class AnswerSubmitResponse(BaseModel):
    """Response for answer submission"""
    status: str
    answer_id: int


@router.get("/rooms/{event_key}")
async def join_room(
    event_key: str,
    db: Annotated[Database, Depends(get_database)],
) -> Room:
    """
    Look up the room a participant is joining by its event key
    """
    found = await db.get_room_by_event_key(event_key)
    if found is None:
        raise HTTPException(status_code=404, detail="Room not found")
    return found


@router.get("/questions/room/{event_key}")
async def get_questions_by_event_key(
    event_key: str,
    db: Annotated[Database, Depends(get_database)],
) -> list[Question]:
    """List every question of a room"""
    return await db.get_all_questions_by_event_key(event_key)


@router.get("/questions/{question_id}/choices")
async def get_choices_by_question(
    question_id: int,
    db: Annotated[Database, Depends(get_database)],
) -> list[Choice]:
    """List the choices of a question"""
    return await db.get_all_choices_by_question(question_id)


@router.post("/answers", status_code=201)
async def submit_answer(
    body: AnswerSubmitRequest,
    participant_id: Annotated[str, Depends(verify_user_auth)],
    db: Annotated[Database, Depends(get_database)],
) -> AnswerSubmitResponse:
    """
    Record an answer for the signed-in participant

    Answers are appended as-is; resubmitting adds another entry.
    """
    entry = await db.create_answer(body.question_id, participant_id, body.answer_label)
    logger.info("Answer %s recorded for question %s", entry.answer_id, body.question_id)
    return AnswerSubmitResponse(status="submitted", answer_id=entry.answer_id)
