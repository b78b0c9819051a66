"""
Tests for participant routes

This test file covers:
- Joining a room by event key
- Listing questions and choices
- Answer submission (append-only, duplicates kept)
- Labels outside the choices accepted
- Unauthorized submission blocked
- Answers to unknown questions rejected by the store
"""

from collections.abc import Callable
from typing import Any

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def room_with_question(client: TestClient, sign_in: Callable[[str], None]) -> dict[str, Any]:
    """Room with one quiz and one multiple choice question, created by p1"""
    sign_in("p1")
    room = client.post("/api/rooms", json={"room_name": "Room1"}).json()
    quiz = client.post(
        "/api/quizzes", json={"max_duration": 10, "title": "Q1", "room_id": room["room_id"]}
    ).json()
    question = client.post(
        "/api/questions",
        json={
            "question_label": "2+2?",
            "correct_answer": "4",
            "quiz_id": quiz["quiz_id"],
            "choices": ["3", "4", "5"],
        },
    ).json()
    return {"room": room, "quiz": quiz, "question": question}


class TestJoinRoom:
    """Test cases for joining a room"""

    def test_join_room(self, client: TestClient, room_with_question: dict[str, Any]) -> None:
        """Test looking up a room by its key"""
        room = room_with_question["room"]

        response = client.get(f"/api/rooms/{room['event_key']}")

        assert response.status_code == 200
        assert response.json() == room

    def test_join_unknown_room(self, client: TestClient) -> None:
        """Test that an unknown key returns 404"""
        response = client.get("/api/rooms/unknown1")

        assert response.status_code == 404
        assert response.json()["detail"] == "Room not found"

    def test_list_questions(self, client: TestClient, room_with_question: dict[str, Any]) -> None:
        """Test listing a room's questions"""
        room = room_with_question["room"]

        response = client.get(f"/api/questions/room/{room['event_key']}")

        assert response.status_code == 200
        assert response.json() == [room_with_question["question"]]

    def test_list_questions_unknown_room(self, client: TestClient) -> None:
        """Test that an unknown key lists nothing"""
        response = client.get("/api/questions/room/unknown1")

        assert response.status_code == 200
        assert response.json() == []


class TestAnswerSubmission:
    """Test cases for answer submission"""

    def test_submit_answer(
        self,
        client: TestClient,
        sign_in: Callable[[str], None],
        room_with_question: dict[str, Any],
    ) -> None:
        """Test submitting an answer as a participant"""
        question_id = room_with_question["question"]["question_id"]
        sign_in("u1")

        response = client.post(
            "/api/answers", json={"question_id": question_id, "answer_label": "4"}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "submitted"
        assert isinstance(data["answer_id"], int)

        answers = client.get(f"/api/answers/question/{question_id}").json()
        assert answers == [
            {
                "answer_id": data["answer_id"],
                "question_id": question_id,
                "participant_id": "u1",
                "answer_label": "4",
            }
        ]

    def test_resubmission_appends(
        self,
        client: TestClient,
        sign_in: Callable[[str], None],
        room_with_question: dict[str, Any],
    ) -> None:
        """Test that answering again adds another entry instead of replacing"""
        question_id = room_with_question["question"]["question_id"]
        sign_in("u1")

        for label in ["3", "4", "4"]:
            response = client.post(
                "/api/answers", json={"question_id": question_id, "answer_label": label}
            )
            assert response.status_code == 201

        answers = client.get(f"/api/answers/question/{question_id}").json()
        assert [a["answer_label"] for a in answers] == ["3", "4", "4"]

    def test_label_outside_choices_accepted(
        self,
        client: TestClient,
        sign_in: Callable[[str], None],
        room_with_question: dict[str, Any],
    ) -> None:
        """Test that the label is not checked against the choices"""
        question_id = room_with_question["question"]["question_id"]
        sign_in("u1")

        response = client.post(
            "/api/answers", json={"question_id": question_id, "answer_label": "forty-two"}
        )
        assert response.status_code == 201

    def test_submit_requires_identity(
        self, client: TestClient, room_with_question: dict[str, Any]
    ) -> None:
        """Test that anonymous submissions are blocked"""
        client.cookies.clear()
        question_id = room_with_question["question"]["question_id"]

        response = client.post(
            "/api/answers", json={"question_id": question_id, "answer_label": "4"}
        )

        assert response.status_code == 401

    def test_submit_to_unknown_question(
        self, client: TestClient, sign_in: Callable[[str], None]
    ) -> None:
        """Test that the foreign key rejects unknown questions"""
        sign_in("u1")

        response = client.post("/api/answers", json={"question_id": 9999, "answer_label": "A"})
        assert response.status_code == 422

    def test_submit_missing_fields(
        self, client: TestClient, sign_in: Callable[[str], None]
    ) -> None:
        """Test that malformed bodies are rejected"""
        sign_in("u1")

        response = client.post("/api/answers", json={"answer_label": "A"})
        assert response.status_code == 422
