"""Pytest configuration and fixtures."""

import json
from collections.abc import Callable, Generator

import httpx
import numpy as np
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from cognote.api.deps import get_db, get_embedder, get_llm
from cognote.database import load_sqlite_vec
from cognote.main import app
from cognote.models import Note
from cognote.services.embedding_service import EmbeddingService, keyword_vector
from cognote.services.llm_service import LLMService
from cognote.utils.vector import serialize_vector

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite://"

DIMENSION = 384
DEFAULT_ANSWER = "Here is what I found in your memories."


class FakeSentenceModel:
    """Deterministic stand-in for a sentence-transformers model."""

    def __init__(self):
        self.calls: list[str] = []

    def encode(self, text: str, normalize_embeddings: bool = False) -> np.ndarray:
        self.calls.append(text)
        return np.asarray(keyword_vector(text, DIMENSION), dtype=np.float32)


@pytest.fixture(name="engine")
def engine_fixture():
    """Create a test database engine with sqlite-vec loaded."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", load_sqlite_vec)
    SQLModel.metadata.create_all(engine)
    yield engine


@pytest.fixture(name="session")
def session_fixture(engine) -> Generator[Session, None, None]:
    """Create a test database session."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="embedder")
def embedder_fixture() -> EmbeddingService:
    """Embedding service backed by the fake model."""
    return EmbeddingService(
        model_name="fake-minilm",
        dimension=DIMENSION,
        device="cpu",
        model_factory=lambda name, device: FakeSentenceModel(),
    )


@pytest.fixture(name="llm_requests")
def llm_requests_fixture() -> list[dict]:
    """Payloads sent to the fake completion provider."""
    return []


@pytest.fixture(name="llm")
def llm_fixture(llm_requests: list[dict]) -> LLMService:
    """LLM service talking to an in-process mock provider."""

    def handler(request: httpx.Request) -> httpx.Response:
        llm_requests.append(json.loads(request.content))
        return httpx.Response(
            200, json={"choices": [{"message": {"content": DEFAULT_ANSWER}}]}
        )

    return LLMService(
        base_url="http://llm.test/v1",
        model="test-model",
        api_key="test-key",
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture(name="client")
def client_fixture(
    session: Session, embedder: EmbeddingService, llm: LLMService
) -> Generator[TestClient, None, None]:
    """Create a test client with database, embedder and LLM overrides."""

    def get_session_override() -> Generator[Session, None, None]:
        yield session

    app.dependency_overrides[get_db] = get_session_override
    app.dependency_overrides[get_embedder] = lambda: embedder
    app.dependency_overrides[get_llm] = lambda: llm
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="make_note")
def make_note_fixture(session: Session) -> Callable[..., Note]:
    """Factory for stored notes."""

    def _make(
        user_id: str = "user-1",
        title: str = "Test note",
        content: str = "This is a test note about Python programming.",
        embedding: list[float] | None = None,
        **kwargs,
    ) -> Note:
        note = Note(
            user_id=user_id,
            title=title,
            content=content,
            embedding=serialize_vector(embedding) if embedding is not None else None,
            **kwargs,
        )
        session.add(note)
        session.commit()
        session.refresh(note)
        return note

    return _make


def unit_vector(*weights: float) -> list[float]:
    """Normalized vector whose leading components are ``weights``."""
    vector = np.zeros(DIMENSION, dtype=np.float32)
    vector[: len(weights)] = weights
    return (vector / np.linalg.norm(vector)).tolist()


@pytest.fixture(name="vec")
def vec_fixture() -> Callable[..., list[float]]:
    """Build test vectors, e.g. vec(1, 0) or vec(1, 1)."""
    return unit_vector
