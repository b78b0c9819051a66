"""
Database access layer for rooms, quizzes, questions, choices and answers
"""

import logging
import uuid
from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event, inspect, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.schema import CreateSchema

from quizroom.config import Settings
from quizroom.models import AnswerEntry, Choice, Question, Quiz, Room, row_to_model
from quizroom.tables import answer_entry, choice, metadata, question, quiz, room

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_database_engine(settings: Settings) -> AsyncEngine:
    """
    Create the process-wide async engine (and its connection pool)

    Args:
        settings: Application settings

    Returns:
        Configured AsyncEngine
    """
    options: dict[str, Any] = {"echo": settings.db_echo, "pool_pre_ping": True}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            pool_timeout=settings.pool_timeout,
        )

    engine = create_async_engine(settings.database_url, **options)

    if settings.is_sqlite:
        # SQLite only enforces foreign keys per connection
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    return engine


class Database:
    """Async wrapper over the connection pool for all application queries"""

    def __init__(
        self,
        engine: AsyncEngine,
        schema: str | None = None,
        event_key_length: int = 8,
    ) -> None:
        """
        Initialize the database wrapper

        Args:
            engine: Async engine owning the connection pool
            schema: Optional schema namespace for every table
            event_key_length: Length of generated event keys
        """
        self.engine = engine
        self.schema = schema
        self.event_key_length = event_key_length

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a Database with its own engine from settings"""
        return cls(
            create_database_engine(settings),
            schema=None if settings.is_sqlite else settings.db_schema,
            event_key_length=settings.event_key_length,
        )

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncConnection]:
        """
        Check out a pooled connection inside a transaction

        Commits when the block exits normally, rolls back on error.
        """
        async with self.engine.begin() as conn:
            if self.schema:
                await conn.execution_options(schema_translate_map={None: self.schema})
            yield conn

    async def dispose(self) -> None:
        """Close every pooled connection"""
        await self.engine.dispose()

    # Schema management

    async def create_tables(self) -> None:
        """Create the schema namespace (if any) and all tables"""
        async with self.transaction() as conn:
            if self.schema:
                exists = await conn.run_sync(
                    lambda sync_conn: inspect(sync_conn).has_schema(self.schema)
                )
                if not exists:
                    await conn.execute(CreateSchema(self.schema))
            await conn.run_sync(metadata.create_all)

    async def reset_database(self) -> None:
        """Drop and recreate every table"""
        async with self.transaction() as conn:
            await conn.run_sync(metadata.drop_all)
        await self.create_tables()
        logger.warning("Database reset")

    async def get_all_from_table(self, table_name: str) -> list[dict[str, Any]]:
        """
        Dump every row of a known table

        Args:
            table_name: Name of a table defined in the schema

        Returns:
            Rows as plain dictionaries

        Raises:
            ValueError: If the table is not part of the schema
        """
        table = metadata.tables.get(table_name)
        if table is None:
            raise ValueError(f"Unknown table: {table_name}")

        async with self.transaction() as conn:
            result = await conn.execute(select(table))
            return [dict(row._mapping) for row in result]

    # Rooms

    def _random_event_key(self) -> str:
        return uuid.uuid4().hex[: self.event_key_length]

    async def generate_unique_event_key(
        self,
        key_factory: Callable[[], str] | None = None,
    ) -> str:
        """
        Generate an event key not used by any room

        Retries until a free key is found. There is no retry cap: with 16^8
        possible keys a long run of collisions is not expected.

        Args:
            key_factory: Optional key source (defaults to random uuid4 hex)

        Returns:
            Unused event key
        """
        make_key = key_factory or self._random_event_key

        while True:
            event_key = make_key()
            async with self.transaction() as conn:
                existing = await conn.scalar(
                    select(room.c.room_id).where(room.c.event_key == event_key).limit(1)
                )
            if existing is None:
                return event_key
            logger.info("Event key %s already taken, retrying", event_key)

    async def create_room(self, event_key: str, room_name: str, presenter_id: str) -> Room:
        """
        Create a room

        Args:
            event_key: Unique public key for the room
            room_name: Display name
            presenter_id: Opaque id of the presenter

        Returns:
            The inserted room
        """
        stmt = (
            insert(room)
            .values(event_key=event_key, room_name=room_name, presenter_id=presenter_id)
            .returning(*room.c)
        )
        async with self.transaction() as conn:
            row = (await conn.execute(stmt)).one()

        logger.info("Created room %s (%s) for presenter %s", row.room_id, event_key, presenter_id)
        return row_to_model(Room, row)

    async def create_room_with_generated_key(
        self,
        room_name: str,
        presenter_id: str,
        key_factory: Callable[[], str] | None = None,
    ) -> Room:
        """
        Create a room under a freshly generated event key

        The key is claimed by the insert itself. When another room took the
        same key first, the unique constraint rejects the insert and a new
        key is drawn. There is no retry cap.

        Args:
            room_name: Display name
            presenter_id: Opaque id of the presenter
            key_factory: Optional key source (defaults to random uuid4 hex)

        Returns:
            The inserted room

        Raises:
            IntegrityError: If the insert fails for another reason than a taken key
        """
        make_key = key_factory or self._random_event_key

        while True:
            event_key = make_key()
            try:
                return await self.create_room(event_key, room_name, presenter_id)
            except IntegrityError:
                if await self.get_room_by_event_key(event_key) is None:
                    raise
            logger.info("Event key %s already taken, retrying", event_key)

    async def get_room_by_event_key(self, event_key: str) -> Room | None:
        """Get a room by its event key, or None"""
        async with self.transaction() as conn:
            row = (
                await conn.execute(select(room).where(room.c.event_key == event_key))
            ).first()
        return row_to_model(Room, row) if row is not None else None

    async def get_all_rooms_by_presenter(self, presenter_id: str) -> list[Room]:
        """Get every room owned by a presenter, oldest first"""
        stmt = (
            select(room)
            .where(room.c.presenter_id == presenter_id)
            .order_by(room.c.room_id)
        )
        async with self.transaction() as conn:
            result = await conn.execute(stmt)
            return [row_to_model(Room, row) for row in result]

    # Quizzes

    async def create_quiz(self, max_duration: int, title: str, room_id: int) -> Quiz:
        """
        Create a quiz inside a room

        Args:
            max_duration: Time limit for the quiz
            title: Quiz title
            room_id: Owning room

        Returns:
            The inserted quiz
        """
        stmt = (
            insert(quiz)
            .values(max_duration=max_duration, title=title, room_id=room_id)
            .returning(*quiz.c)
        )
        async with self.transaction() as conn:
            row = (await conn.execute(stmt)).one()

        logger.info("Created quiz %s in room %s", row.quiz_id, room_id)
        return row_to_model(Quiz, row)

    async def get_all_quizzes_by_event_key(self, event_key: str) -> list[Quiz]:
        """Get the quizzes of the room with the given event key"""
        stmt = (
            select(quiz)
            .join(room, room.c.room_id == quiz.c.room_id)
            .where(room.c.event_key == event_key)
            .order_by(quiz.c.quiz_id)
        )
        async with self.transaction() as conn:
            result = await conn.execute(stmt)
            return [row_to_model(Quiz, row) for row in result]

    async def update_quiz(self, quiz_id: int, max_duration: int, title: str) -> Quiz | None:
        """
        Update a quiz's duration and title

        Returns:
            The updated quiz, or None if it does not exist
        """
        stmt = (
            update(quiz)
            .where(quiz.c.quiz_id == quiz_id)
            .values(max_duration=max_duration, title=title)
            .returning(*quiz.c)
        )
        async with self.transaction() as conn:
            row = (await conn.execute(stmt)).first()
        return row_to_model(Quiz, row) if row is not None else None

    # Questions and choices

    async def _insert_question(
        self,
        conn: AsyncConnection,
        question_label: str,
        correct_answer: str | None,
        quiz_id: int,
    ) -> Question:
        values: dict[str, Any] = {"question_label": question_label, "quiz_id": quiz_id}
        if correct_answer is not None:
            values["correct_answer"] = correct_answer
        row = (
            await conn.execute(insert(question).values(**values).returning(*question.c))
        ).one()
        return row_to_model(Question, row)

    async def _insert_choices(
        self,
        conn: AsyncConnection,
        question_id: int,
        choice_labels: Sequence[str],
    ) -> list[Choice]:
        choices = []
        for choice_label in choice_labels:
            stmt = (
                insert(choice)
                .values(choice_label=choice_label, question_id=question_id)
                .returning(*choice.c)
            )
            row = (await conn.execute(stmt)).one()
            choices.append(row_to_model(Choice, row))
        return choices

    async def create_question(
        self,
        question_label: str,
        correct_answer: str | None,
        quiz_id: int,
    ) -> Question:
        """
        Create a question without choices

        Args:
            question_label: Prompt text
            correct_answer: Expected answer, None for open-ended questions
            quiz_id: Owning quiz

        Returns:
            The inserted question
        """
        async with self.transaction() as conn:
            return await self._insert_question(conn, question_label, correct_answer, quiz_id)

    async def create_choices(self, question_id: int, choice_labels: Sequence[str]) -> list[Choice]:
        """Insert choices for a question one at a time, in order"""
        async with self.transaction() as conn:
            return await self._insert_choices(conn, question_id, choice_labels)

    async def create_question_and_choices(
        self,
        question_label: str,
        correct_answer: str | None,
        quiz_id: int,
        choice_labels: Sequence[str] | None = None,
    ) -> Question:
        """
        Create a question and its choices in a single transaction

        Args:
            question_label: Prompt text
            correct_answer: Expected answer, None for open-ended questions
            quiz_id: Owning quiz
            choice_labels: Predefined options; None creates an open-ended question

        Returns:
            The inserted question
        """
        async with self.transaction() as conn:
            created = await self._insert_question(conn, question_label, correct_answer, quiz_id)
            if choice_labels is not None:
                await self._insert_choices(conn, created.question_id, choice_labels)

        logger.info(
            "Created question %s in quiz %s with %d choices",
            created.question_id,
            quiz_id,
            len(choice_labels or []),
        )
        return created

    async def update_question(
        self,
        question_id: int,
        question_label: str,
        correct_answer: str | None = None,
    ) -> Question | None:
        """
        Update a question's label and, if given, its correct answer

        A None correct answer leaves the stored value untouched.

        Returns:
            The updated question, or None if it does not exist
        """
        values: dict[str, Any] = {"question_label": question_label}
        if correct_answer is not None:
            values["correct_answer"] = correct_answer

        stmt = (
            update(question)
            .where(question.c.question_id == question_id)
            .values(**values)
            .returning(*question.c)
        )
        async with self.transaction() as conn:
            row = (await conn.execute(stmt)).first()
        return row_to_model(Question, row) if row is not None else None

    async def get_all_questions_by_event_key(self, event_key: str) -> list[Question]:
        """Get every question across the quizzes of a room, by question id"""
        stmt = (
            select(question)
            .join(quiz, quiz.c.quiz_id == question.c.quiz_id)
            .join(room, room.c.room_id == quiz.c.room_id)
            .where(room.c.event_key == event_key)
            .order_by(question.c.question_id)
        )
        async with self.transaction() as conn:
            result = await conn.execute(stmt)
            return [row_to_model(Question, row) for row in result]

    async def get_all_choices_by_question(self, question_id: int) -> list[Choice]:
        """Get the choices of a question"""
        stmt = (
            select(choice)
            .where(choice.c.question_id == question_id)
            .order_by(choice.c.choice_id)
        )
        async with self.transaction() as conn:
            result = await conn.execute(stmt)
            return [row_to_model(Choice, row) for row in result]

    # Answers

    async def create_answer(
        self,
        question_id: int,
        participant_id: str,
        answer_label: str,
    ) -> AnswerEntry:
        """
        Record a participant's answer

        Append-only: labels are not checked against choices and repeated
        answers from the same participant are all kept.

        Args:
            question_id: Answered question
            participant_id: Opaque id of the participant
            answer_label: Choice label or free text

        Returns:
            The inserted answer entry
        """
        stmt = (
            insert(answer_entry)
            .values(
                question_id=question_id,
                participant_id=participant_id,
                answer_label=answer_label,
            )
            .returning(*answer_entry.c)
        )
        async with self.transaction() as conn:
            row = (await conn.execute(stmt)).one()

        logger.debug("Participant %s answered question %s", participant_id, question_id)
        return row_to_model(AnswerEntry, row)

    async def get_all_answers_by_question(self, question_id: int) -> list[AnswerEntry]:
        """Get the answers to a question in submission order"""
        stmt = (
            select(answer_entry)
            .where(answer_entry.c.question_id == question_id)
            .order_by(answer_entry.c.answer_id)
        )
        async with self.transaction() as conn:
            result = await conn.execute(stmt)
            return [row_to_model(AnswerEntry, row) for row in result]

    async def get_all_answers_by_quiz(self, quiz_id: int) -> list[AnswerEntry]:
        """Get the answers to every question of a quiz in submission order"""
        stmt = (
            select(answer_entry)
            .join(question, question.c.question_id == answer_entry.c.question_id)
            .where(question.c.quiz_id == quiz_id)
            .order_by(answer_entry.c.answer_id)
        )
        async with self.transaction() as conn:
            result = await conn.execute(stmt)
            return [row_to_model(AnswerEntry, row) for row in result]
