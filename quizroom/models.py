"""
Pydantic models for the application
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Room(BaseModel):
    """A presenter's room, joined by participants through its event key"""

    room_id: int
    event_key: str
    room_name: str
    presenter_id: str


class Quiz(BaseModel):
    """A titled, time-bounded set of questions inside a room"""

    quiz_id: int
    max_duration: int
    title: str
    room_id: int


class Question(BaseModel):
    """A single prompt; open-ended when it has no choices"""

    question_id: int
    question_label: str
    correct_answer: str | None = None
    quiz_id: int


class Choice(BaseModel):
    """A predefined option for a question"""

    choice_id: int
    choice_label: str
    question_id: int


class AnswerEntry(BaseModel):
    """One submitted answer"""

    answer_id: int
    question_id: int
    participant_id: str
    answer_label: str


class AnswerBundle(BaseModel):
    """Aggregated view of a question with its choices and answers"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    question_id: int
    question_label: str
    choices: list[str] = Field(default_factory=list)
    answers: list[str] = Field(default_factory=list)


def row_to_model(model: type[BaseModel], row: Any) -> Any:
    """Build a model from a SQLAlchemy row mapping"""
    return model.model_validate(dict(row._mapping))
