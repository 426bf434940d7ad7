import json
import re

import httpx
import pytest
from fastapi.testclient import TestClient

from docchat.config import Settings
from docchat.db.session import build_engine, build_sessionmaker, init_db
from docchat.files.blob_store import BlobStore
from docchat.llm.llm_gateway import NOT_FOUND_ANSWER
from docchat.main import create_app

PASSWORD = "correct horse battery"

STOPWORDS = {"what", "is", "the", "of", "a", "an", "in", "on", "for", "to", "and", "who", "how", "does"}


HELVETICA = b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>"


def _text_run(text: str) -> bytes:
    escaped = text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")
    return f"BT /F1 12 Tf 72 720 Td ({escaped}) Tj ET".encode("latin-1")


def make_pdf(pages, font: bytes = HELVETICA) -> bytes:
    """PDF with one page per entry, every page using font /F1.

    A str entry becomes a single text run, None an empty page, and bytes
    are used as the raw content stream. A bare str or None is one page.
    """
    if pages is None or isinstance(pages, str):
        pages = [pages]
    streams = [b"" if p is None else p if isinstance(p, bytes) else _text_run(p) for p in pages]

    # 1 catalog, 2 page tree, 3 font, then a page object and its content per page
    page_refs = " ".join(f"{4 + 2 * i} 0 R" for i in range(len(streams))).encode()
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [" + page_refs + b"] /Count %d >>" % len(streams),
        font,
    ]
    for i, stream in enumerate(streams):
        objects.append(
            b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            b"/Resources << /Font << /F1 3 0 R >> >> /Contents %d 0 R >>" % (5 + 2 * i)
        )
        objects.append(b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream")

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_at = len(out)
    out += b"xref\n0 %d\n" % (len(objects) + 1)
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_at)
    return bytes(out)


class FakeModel:
    """Stands in for the chat-completions endpoint.

    Answers with the first document sentence sharing a keyword with the
    question, otherwise with the not-found phrase, like an obedient model.
    """

    def __init__(self):
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)
        user = payload["messages"][-1]["content"]
        document, _, question = user.partition("\n\nQuestion:\n")
        document = document.removeprefix("Document:\n")
        keywords = {w for w in re.findall(r"[a-z]+", question.lower()) if w not in STOPWORDS}
        answer = NOT_FOUND_ANSWER
        for sentence in re.split(r"(?<=[.!?])\s+", document):
            if keywords & set(re.findall(r"[a-z]+", sentence.lower())):
                answer = f"**Answer**\n- {sentence.strip()}"
                break
        return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": answer}}]})


@pytest.fixture
def settings(tmp_path):
    return Settings(
        APP_ENV="dev",
        SECRET_KEY="test-secret",
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        LLM_API_KEY="test-key",
        LLM_BASE_URL="https://llm.test/v1",
    )


@pytest.fixture
def fake_model():
    return FakeModel()


@pytest.fixture
def make_client(settings):
    clients = []

    def _make(handler, **overrides):
        app_settings = settings.model_copy(update=overrides) if overrides else settings
        client = TestClient(create_app(app_settings, llm_transport=httpx.MockTransport(handler)))
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client, fake_model):
    return make_client(fake_model)


@pytest.fixture
def upload_dir(settings):
    from pathlib import Path
    return Path(settings.upload_dir)


@pytest.fixture
def db(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'unit.db'}")
    init_db(engine)
    session = build_sessionmaker(engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def blobs(tmp_path):
    return BlobStore(tmp_path / "blobs")


def signup(client, email, password=PASSWORD):
    client.cookies.clear()
    return client.post("/auth/signup", json={"email": email, "password": password})


def login(client, email, password=PASSWORD):
    client.cookies.clear()
    return client.post("/auth/login", json={"email": email, "password": password})


def upload(client, name, data, content_type):
    return client.post("/files", files={"file": (name, data, content_type)})
