"""POST /api/answers и GET /api/user/{id}/stats."""

from bson import ObjectId


def _answer(client, question_id, index, **extra):
    return client.post(
        "/api/answers",
        json={"question_id": question_id, "selected_option_index": index, **extra},
    )


def _stats(client, user_id):
    response = client.get(f"/api/user/{user_id}/stats")
    assert response.status_code == 200
    return response.json()


class TestSubmitAnswer:

    def test_correct_option(self, client, question_payload, create_question):
        question = create_question({**question_payload, "explanation": "2+2 is 4"})

        response = _answer(client, question["_id"], 1, user_id="u1")

        assert response.status_code == 200
        assert response.json() == {
            "is_correct": True,
            "explanation": "2+2 is 4",
            "correct_answer": "4",
        }

    def test_wrong_option(self, client, question_payload, create_question):
        question = create_question(question_payload)

        body = _answer(client, question["_id"], 0, user_id="u1").json()

        assert body["is_correct"] is False
        assert body["correct_answer"] == "4"
        assert body["explanation"] == "No explanation available"

    def test_unknown_question_is_404(self, client):
        response = _answer(client, str(ObjectId()), 0, user_id="u1")

        assert response.status_code == 404
        assert response.json()["status"] == "error"

    def test_malformed_question_id_is_404(self, client):
        response = _answer(client, "not-an-object-id", 0)

        assert response.status_code == 404

    def test_out_of_range_index_is_400(self, client, question_payload, create_question):
        question = create_question(question_payload)

        assert _answer(client, question["_id"], 2, user_id="u1").status_code == 400
        assert _answer(client, question["_id"], -1, user_id="u1").status_code == 400
        assert _stats(client, "u1")["total_attempts"] == 0

    def test_question_without_correct_option_is_400(self, client, question_payload, create_question):
        question = create_question({
            **question_payload,
            "options": [{"text": "3", "is_correct": False}, {"text": "5", "is_correct": False}],
        })

        response = _answer(client, question["_id"], 0, user_id="u1")

        assert response.status_code == 400
        assert _stats(client, "u1")["total_attempts"] == 0

    def test_missing_question_id_is_400(self, client):
        response = client.post("/api/answers", json={"selected_option_index": 0})

        assert response.status_code == 400
        assert "question_id" in response.json()["message"]


class TestUserStats:

    def test_unknown_user_has_zero_stats(self, client):
        stats = _stats(client, "nobody")

        assert stats["total_score"] == 0
        assert stats["total_attempts"] == 0
        assert stats["weak_topics"] == []

    def test_answers_accumulate(self, client, question_payload, create_question):
        question = create_question(question_payload)

        _answer(client, question["_id"], 1, user_id="u1")
        assert _stats(client, "u1")["total_attempts"] == 1
        assert _stats(client, "u1")["total_score"] == 1

        _answer(client, question["_id"], 0, user_id="u1")
        _answer(client, question["_id"], 1, user_id="u1")

        stats = _stats(client, "u1")
        assert stats["total_attempts"] == 3
        assert stats["total_score"] == 2
        assert stats["total_score"] <= stats["total_attempts"]

    def test_users_are_independent(self, client, question_payload, create_question):
        question = create_question(question_payload)

        _answer(client, question["_id"], 1, user_id="u1")
        _answer(client, question["_id"], 0, user_id="u2")

        assert _stats(client, "u1")["total_score"] == 1
        assert _stats(client, "u2")["total_score"] == 0
        assert _stats(client, "u2")["total_attempts"] == 1

    def test_numeric_user_id(self, client, question_payload, create_question):
        question = create_question(question_payload)

        _answer(client, question["_id"], 1, user_id=42)

        assert _stats(client, "42")["total_score"] == 1

    def test_answer_without_user_id_credits_anonymous_user(self, client, question_payload, create_question):
        question = create_question(question_payload)

        _answer(client, question["_id"], 1)

        assert _stats(client, "1")["total_attempts"] == 1


class TestExplicitNullUser:

    def test_null_user_id_records_nothing(self, client, question_payload, create_question):
        question = create_question(question_payload)

        response = _answer(client, question["_id"], 1, user_id=None)

        assert response.status_code == 200
        assert response.json()["is_correct"] is True
        assert _stats(client, "1")["total_attempts"] == 0

    def test_credited_user_id(self):
        from app.schemas.answer_schemas import AnswerSubmit

        absent = AnswerSubmit(question_id="q", selected_option_index=0)
        null = AnswerSubmit(question_id="q", selected_option_index=0, user_id=None)
        given = AnswerSubmit(question_id="q", selected_option_index=0, user_id=7)

        assert absent.credited_user_id() == "1"
        assert null.credited_user_id() is None
        assert given.credited_user_id() == "7"


class TestStoreErrors:

    def test_answer_store_error_is_500(self, client, question_payload, create_question, monkeypatch):
        from pymongo.errors import PyMongoError
        from app.services import quiz_service

        question = create_question(question_payload)

        async def broken(*args, **kwargs):
            raise PyMongoError("users collection unavailable")

        monkeypatch.setattr(quiz_service, "record_attempt", broken)

        response = _answer(client, question["_id"], 1, user_id="u1")

        assert response.status_code == 500
        assert response.json()["status"] == "error"
        assert response.json()["message"] == "users collection unavailable"

    def test_stats_store_error_is_500(self, client, monkeypatch):
        from pymongo.errors import PyMongoError
        from app.services import quiz_service

        async def broken(*args, **kwargs):
            raise PyMongoError("stats unavailable")

        monkeypatch.setattr(quiz_service, "get_user_stats", broken)

        response = client.get("/api/user/u1/stats")

        assert response.status_code == 500
        assert response.json()["message"] == "stats unavailable"
