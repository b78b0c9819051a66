"""
Presenter routes for room, quiz and question management and analytics
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from quizroom.database import Database
from quizroom.dependencies import get_database, verify_user_auth
from quizroom.models import AnswerBundle, AnswerEntry, Question, Quiz, Room
from quizroom.services.aggregation import build_distribution, get_all_answers_by_event_key

router = APIRouter(prefix="/api")


# Request/Response models

class RoomCreateRequest(BaseModel):
    """Request to create a room for the signed-in presenter"""
    room_name: str


class QuizCreateRequest(BaseModel):
    """Request to create a quiz"""
    max_duration: int
    title: str
    room_id: int


class QuizUpdateRequest(BaseModel):
    """Request to update a quiz"""
    max_duration: int
    title: str


class QuestionCreateRequest(BaseModel):
    """Request to create a question; omit choices for an open-ended question"""
    question_label: str
    correct_answer: str | None = None
    quiz_id: int
    choices: list[str] | None = None


class QuestionUpdateRequest(BaseModel):
    """Request to update a question; a missing correct answer is left as is"""
    question_label: str
    correct_answer: str | None = None


class DistributionResponse(BaseModel):
    """Answer distribution for one question"""
    question_id: int
    question_label: str
    counts: dict[str, int]
    total: int
    percentages: dict[str, float]
    choices: list[str]


# Rooms

@router.post("/rooms", status_code=201)
async def create_room(
    body: RoomCreateRequest,
    presenter_id: Annotated[str, Depends(verify_user_auth)],
    db: Annotated[Database, Depends(get_database)],
) -> Room:
    """
    Create a room with a freshly generated event key
    """
    return await db.create_room_with_generated_key(body.room_name, presenter_id)


@router.get("/rooms/presenter/{presenter_id}")
async def get_rooms_by_presenter(
    presenter_id: str,
    db: Annotated[Database, Depends(get_database)],
) -> list[Room]:
    """List a presenter's rooms"""
    return await db.get_all_rooms_by_presenter(presenter_id)


# Quizzes

@router.post("/quizzes", status_code=201)
async def create_quiz(
    body: QuizCreateRequest,
    _: Annotated[str, Depends(verify_user_auth)],
    db: Annotated[Database, Depends(get_database)],
) -> Quiz:
    """Create a quiz in a room"""
    return await db.create_quiz(body.max_duration, body.title, body.room_id)


@router.get("/quizzes/room/{event_key}")
async def get_quizzes_by_event_key(
    event_key: str,
    db: Annotated[Database, Depends(get_database)],
) -> list[Quiz]:
    """List the quizzes of a room"""
    return await db.get_all_quizzes_by_event_key(event_key)


@router.put("/quizzes/{quiz_id}")
async def update_quiz(
    quiz_id: int,
    body: QuizUpdateRequest,
    _: Annotated[str, Depends(verify_user_auth)],
    db: Annotated[Database, Depends(get_database)],
) -> Quiz:
    """Update a quiz's duration and title"""
    updated = await db.update_quiz(quiz_id, body.max_duration, body.title)
    if updated is None:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return updated


# Questions

@router.post("/questions", status_code=201)
async def create_question(
    body: QuestionCreateRequest,
    _: Annotated[str, Depends(verify_user_auth)],
    db: Annotated[Database, Depends(get_database)],
) -> Question:
    """Create a question together with its choices"""
    return await db.create_question_and_choices(
        body.question_label,
        body.correct_answer,
        body.quiz_id,
        body.choices,
    )


@router.put("/questions/{question_id}")
async def update_question(
    question_id: int,
    body: QuestionUpdateRequest,
    _: Annotated[str, Depends(verify_user_auth)],
    db: Annotated[Database, Depends(get_database)],
) -> Question:
    """Update a question's label and, if given, its correct answer"""
    updated = await db.update_question(question_id, body.question_label, body.correct_answer)
    if updated is None:
        raise HTTPException(status_code=404, detail="Question not found")
    return updated


# Analytics

@router.get("/answers/room/{event_key}", response_model=list[AnswerBundle])
async def get_answers_by_event_key(
    event_key: str,
    db: Annotated[Database, Depends(get_database)],
) -> list[AnswerBundle]:
    """
    Every question of a room with its choices and collected answers
    """
    return await get_all_answers_by_event_key(db, event_key)


@router.get("/answers/room/{event_key}/distribution")
async def get_distribution_by_event_key(
    event_key: str,
    db: Annotated[Database, Depends(get_database)],
) -> list[DistributionResponse]:
    """Answer counts and percentages for every question of a room"""
    bundles = await get_all_answers_by_event_key(db, event_key)
    return [DistributionResponse(**build_distribution(bundle)) for bundle in bundles]


@router.get("/answers/quiz/{quiz_id}")
async def get_answers_by_quiz(
    quiz_id: int,
    db: Annotated[Database, Depends(get_database)],
) -> list[AnswerEntry]:
    """List the answers to every question of a quiz"""
    return await db.get_all_answers_by_quiz(quiz_id)


@router.get("/answers/question/{question_id}")
async def get_answers_by_question(
    question_id: int,
    db: Annotated[Database, Depends(get_database)],
) -> list[AnswerEntry]:
    """List the answers to a question"""
    return await db.get_all_answers_by_question(question_id)
