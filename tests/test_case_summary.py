"""Tests for POST /generate-conversation-summary."""

import uuid
from datetime import datetime, timedelta, timezone

from langchain_core.messages import SystemMessage

from legal_intake.database.entities import Conversation, Message
from legal_intake.database.entities.cases import Case


def add_turns(session, conversation_id, turns):
    start = datetime.now(timezone.utc) - timedelta(minutes=5)
    session.add_all([
        Message(
            conversation_id=conversation_id,
            role=role,
            content=content,
            created_at=start + timedelta(seconds=index),
        )
        for index, (role, content) in enumerate(turns)
    ])
    session.commit()


TURNS = [
    ("user", "My employer dismissed me without notice."),
    ("assistant", "How long did you work there?"),
    ("user", "Eight years."),
]


class TestConversationSummary:

    def test_summarizes_linked_conversation(self, client, fake_llm, make_case, make_conversation, db_session):
        user_id = uuid.uuid4()
        case_id = make_case(user_id=user_id)
        conversation_id = make_conversation(user_id=user_id, case_id=case_id)
        add_turns(db_session, conversation_id, TURNS)
        fake_llm.responses.append("Mona reports a dismissal without notice after eight years of service.")

        response = client.post(
            "/generate-conversation-summary", json={"caseId": str(case_id), "clientName": "Mona"}
        )

        assert response.status_code == 200
        assert response.json() == {"summary": "Mona reports a dismissal without notice after eight years of service."}
        db_session.expire_all()
        assert db_session.get(Case, case_id).ai_summary.startswith("Mona reports")

        system, human = fake_llm.calls[0]["messages"]
        assert isinstance(system, SystemMessage)
        assert '"Mona"' in system.content
        assert "USER: My employer dismissed me without notice." in human.content
        assert "ASSISTANT: How long did you work there?" in human.content

    def test_falls_back_to_latest_intake_conversation_and_links_it(
        self, client, fake_llm, make_case, make_conversation, db_session
    ):
        user_id = uuid.uuid4()
        case_id = make_case(user_id=user_id)
        conversation_id = make_conversation(user_id=user_id)
        add_turns(db_session, conversation_id, TURNS)
        fake_llm.responses.append("The client reports a dismissal.")

        response = client.post("/generate-conversation-summary", json={"caseId": str(case_id)})

        assert response.status_code == 200
        assert '"the client"' in fake_llm.calls[0]["messages"][0].content
        db_session.expire_all()
        assert db_session.get(Conversation, conversation_id).case_id == case_id

    def test_missing_case_id_returns_500(self, client, fake_llm):
        response = client.post("/generate-conversation-summary", json={})

        assert response.status_code == 500
        assert response.json() == {"error": "caseId is required"}
        assert fake_llm.calls == []

    def test_unknown_case_returns_500(self, client):
        response = client.post("/generate-conversation-summary", json={"caseId": str(uuid.uuid4())})

        assert response.status_code == 500
        assert response.json() == {"error": "No case found"}

    def test_case_without_conversation_returns_500(self, client, fake_llm, make_case):
        case_id = make_case()

        response = client.post("/generate-conversation-summary", json={"caseId": str(case_id)})

        assert response.status_code == 500
        assert "error" in response.json()
        assert fake_llm.calls == []

    def test_options(self, client, fake_llm):
        response = client.options("/generate-conversation-summary")

        assert response.status_code == 200
        assert response.content == b""
        assert fake_llm.calls == []
