"""Shared fixtures: a scripted LLM client and an in-memory database."""
import inspect
import json
import os
import re

# Configure before any digicraft module builds its settings singleton
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["GEMINI_API_KEY"] = "test-key"
os.environ["GEMINI_PROVIDER"] = "ai_studio"
os.environ["GEMINI_MODEL"] = "gemini-2.5-flash"
os.environ["OPENROUTER_API_KEY"] = ""
os.environ["DEBUG_MODE"] = "false"
os.environ["TRACK_USAGE"] = "true"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from digicraft import models  # noqa: F401  (registers tables on Base)
from digicraft.db import Base, get_db
from digicraft.gemini_client import LLMReply
from digicraft.schemas import Usage


_DRIVER_RE = re.compile(r"DEFINITION:\n([^\n]*?): ")


def driver_in(prompt):
    """Name of the driver a section prompt was built for."""
    match = _DRIVER_RE.search(prompt)
    return match.group(1) if match else None


def section_payload(name, count, keys, description="desc"):
    return {
        "sectionName": name,
        "sectionDescription": description,
        "elements": [{k: f"{name} {k} {i}" for k in keys} for i in range(count)],
    }


QUESTION_KEYS = ("question", "relevance", "infoPrompt", "actionSteps", "redFlags", "keyMetrics")


class FakeLLMClient:
    """Stands in for GeminiClient.

    ``responder(prompt, schema)`` may return a dict (sent back as JSON), a raw
    string, an ``LLMReply``, or an exception instance to raise. It may also be
    a coroutine function.
    """

    def __init__(self, responder=None, model="gemini-2.5-flash", usage=None):
        self.responder = responder or (lambda prompt, schema: {"sectionName": "", "sectionDescription": "", "elements": []})
        self.model = model
        self.usage = usage or Usage(input_tokens=100, output_tokens=50, total_tokens=150)
        self.prompts = []
        self.schemas = []

    async def generate_json(self, prompt, *, response_schema=None):
        self.prompts.append(prompt)
        self.schemas.append(response_schema)
        result = self.responder(prompt, response_schema)
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, BaseException):
            raise result
        if isinstance(result, LLMReply):
            return result
        text = result if isinstance(result, str) else json.dumps(result)
        return LLMReply(text=text, model=self.model, usage=self.usage)

    async def aclose(self):
        pass


def by_driver(mapping, default=None):
    """Responder answering per driver name; unknown drivers get an empty section."""

    def respond(prompt, schema):
        name = driver_in(prompt)
        if name in mapping:
            return mapping[name]
        if default is not None:
            return default
        return {"sectionName": name or "", "sectionDescription": "", "elements": []}

    return respond


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def fake_llm():
    return FakeLLMClient()


@pytest.fixture
def api(db_session, fake_llm):
    from digicraft.dependencies import get_enrich_client, get_llm_client
    from digicraft.main import app

    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_llm_client] = lambda: fake_llm
    app.dependency_overrides[get_enrich_client] = lambda: fake_llm
    yield TestClient(app)
    app.dependency_overrides.clear()
