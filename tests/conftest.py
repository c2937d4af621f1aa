"""
Shared fixtures: a throwaway SQLite database, a scripted chat model and a
TestClient wired to it.

The environment is prepared before `legal_intake` is imported because the
settings singleton and the engine are created at import time.
"""

import json
import os
import tempfile
import uuid

_db_fd, _db_path = tempfile.mkstemp(suffix=".sqlite3")
os.close(_db_fd)
os.environ["DATABASE_URL"] = f"sqlite:///{_db_path}"
os.environ["OPENAI_API_KEY"] = "test-key"

import httpx
import openai
import pytest
from fastapi.testclient import TestClient
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage
from langchain_core.outputs import ChatGeneration, ChatResult
from pydantic import Field

import legal_intake.database.entities  # noqa: F401  (registers the tables)
from legal_intake.api.fast_api import get_chat_model_factory
from legal_intake.database.config.connection_engine import connection_engine, declarativeBase
from legal_intake.database.entities import CaseCategory, Conversation, LegalKnowledge, Message
from legal_intake.database.entities.cases import Case
from legal_intake.database.helpers.transactionManagement import SessionFactory
from legal_intake.main import app


class FakeChatModel(BaseChatModel):
    """Chat model replaying scripted replies and recording every call."""

    responses: list = Field(default_factory=list)
    calls: list = Field(default_factory=list)

    @property
    def _llm_type(self) -> str:
        return "fake-chat"

    def _generate(self, messages, stop=None, run_manager=None, **kwargs):
        self.calls.append({"messages": messages, "kwargs": kwargs})
        if not self.responses:
            raise AssertionError("unexpected chat model call")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            response = AIMessage(content=response)
        return ChatResult(generations=[ChatGeneration(message=response)])


def function_call_reply(arguments, content="", name="extract_case_data"):
    """AIMessage carrying an `extract_case_data` call."""
    if not isinstance(arguments, str):
        arguments = json.dumps(arguments)
    return AIMessage(
        content=content,
        additional_kwargs={"function_call": {"name": name, "arguments": arguments}},
    )


def api_status_error(status_code=500, text="upstream unavailable"):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(status_code, request=request, text=text)
    return openai.APIStatusError(f"Error code: {status_code}", response=response, body=None)


SAMPLE_EXTRACTION = {
    "category": "Employment Law",
    "urgency": "high",
    "summary": "Client was dismissed without notice after eight years.",
    "entities": {"parties": ["ACME Egypt"], "dates": ["2024-03-01"], "location": "Cairo, Egypt"},
    "legalClassification": {"area": "Labour", "subArea": "Dismissal", "applicableLaws": ["Labour Law 12/2003"]},
    "violationTypes": ["unfair dismissal"],
    "remedies": ["compensation"],
    "complexityScore": 6,
    "needsPersonalDetails": True,
    "readyForNextStep": False,
    "nextQuestions": ["When did you receive the dismissal letter?"],
}


@pytest.fixture(autouse=True)
def database():
    declarativeBase.metadata.create_all(connection_engine)
    yield
    declarativeBase.metadata.drop_all(connection_engine)


@pytest.fixture
def fake_llm():
    return FakeChatModel()


@pytest.fixture
def model_overrides():
    """Keyword overrides passed to the factory, one dict per model built."""
    return []


@pytest.fixture
def model_factory(fake_llm, model_overrides):
    def factory(**overrides):
        model_overrides.append(overrides)
        return fake_llm
    return factory


@pytest.fixture
def client(model_factory):
    app.dependency_overrides[get_chat_model_factory] = lambda: model_factory
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    session = SessionFactory()
    yield session
    session.close()


@pytest.fixture
def make_conversation(db_session):
    def _make(mode="intake", user_id=None, case_id=None, language="en", meta=None):
        conversation = Conversation(
            id=uuid.uuid4(),
            session_id=uuid.uuid4().hex,
            mode=mode,
            language=language,
            status="active",
            user_id=user_id,
            case_id=case_id,
            meta=meta or {},
        )
        db_session.add(conversation)
        db_session.commit()
        return conversation.id
    return _make


@pytest.fixture
def make_case(db_session):
    def _make(user_id=None, **fields):
        values = {
            "id": uuid.uuid4(),
            "case_number": f"LC-TEST-{uuid.uuid4().hex[:6]}",
            "user_id": user_id or uuid.uuid4(),
            "title": "Existing case",
            "description": "Existing description",
            "category": "Family Law",
            "urgency": "low",
            "status": "draft",
            "step": 1,
            "language": "en",
            "jurisdiction": "egypt",
        }
        values.update(fields)
        case = Case(**values)
        db_session.add(case)
        db_session.commit()
        return case.id
    return _make


@pytest.fixture
def seed_reference_data(db_session):
    db_session.add_all([
        LegalKnowledge(
            title="Termination of employment",
            content="An employer may not terminate a contract without a legitimate reason.",
            category="Employment Law",
            language="en",
            law_reference="Labour Law 12/2003",
            article_number="69",
            keywords=["dismissal", "employment"],
            is_active=True,
        ),
        LegalKnowledge(
            title="Inactive entry about dismissal",
            content="Should never be returned.",
            category="Employment Law",
            language="en",
            keywords=["dismissal"],
            is_active=False,
        ),
        CaseCategory(name="Employment Law", name_ar="قانون العمل", name_de="Arbeitsrecht", is_active=True),
        CaseCategory(name="Retired Category", is_active=False),
    ])
    db_session.commit()


def fetch_messages(session, conversation_id):
    session.expire_all()
    return (
        session.query(Message)
        .filter(Message.conversation_id == conversation_id)
        .order_by(Message.created_at)
        .all()
    )
