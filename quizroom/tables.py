"""
Relational schema for rooms, quizzes, questions, choices and answers
"""

from sqlalchemy import Column, ForeignKey, Integer, MetaData, String, Table, Text

metadata = MetaData()

room = Table(
    "room",
    metadata,
    Column("room_id", Integer, primary_key=True, autoincrement=True),
    Column("event_key", String(32), unique=True, nullable=False, index=True),
    Column("room_name", String(255), nullable=False),
    Column("presenter_id", String(128), nullable=False, index=True),
)

quiz = Table(
    "quiz",
    metadata,
    Column("quiz_id", Integer, primary_key=True, autoincrement=True),
    Column("max_duration", Integer, nullable=False),
    Column("title", String(255), nullable=False),
    Column(
        "room_id",
        Integer,
        ForeignKey("room.room_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
)

question = Table(
    "question",
    metadata,
    Column("question_id", Integer, primary_key=True, autoincrement=True),
    Column("question_label", Text, nullable=False),
    Column("correct_answer", Text),  # null for open-ended questions
    Column(
        "quiz_id",
        Integer,
        ForeignKey("quiz.quiz_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
)

choice = Table(
    "choice",
    metadata,
    Column("choice_id", Integer, primary_key=True, autoincrement=True),
    Column("choice_label", Text, nullable=False),
    Column(
        "question_id",
        Integer,
        ForeignKey("question.question_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
)

answer_entry = Table(
    "answer_entry",
    metadata,
    Column("answer_id", Integer, primary_key=True, autoincrement=True),
    Column(
        "question_id",
        Integer,
        ForeignKey("question.question_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("participant_id", String(128), nullable=False),
    Column("answer_label", Text, nullable=False),
)
