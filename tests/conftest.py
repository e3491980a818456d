"""
Pytest configuration and fixtures
"""
import os
from types import SimpleNamespace

import pytest

# Settings are read when main is imported
os.environ["APP_ENV"] = "development"
os.environ["STORE_BACKEND"] = "memory"
os.environ["ANALYZE_BACKEND"] = "fixture"
os.environ["OPENAI_API_KEY"] = "sk-test-openai"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_1234567890abcdef"
os.environ["STRIPE_PRICE_SINGLE"] = "price_test_single"
os.environ["APP_URL"] = "https://patternlabs.test"

import main  # noqa: E402
from store import MemoryStore  # noqa: E402


class FakeResponses:
    def __init__(self, text="Respuesta de prueba", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(output_text=self.text)


class FakeCompletions:
    def __init__(self, content="{}", error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    def __init__(self, answer="Respuesta de prueba", completion="{}", error=None):
        self.responses = FakeResponses(answer, error)
        self.chat = SimpleNamespace(completions=FakeCompletions(completion, error))


class FakeCheckout:
    """Stands in for stripe.checkout.Session create/retrieve"""

    def __init__(self, payment_status="paid", error=None):
        self.payment_status = payment_status
        self.error = error
        self.created = []
        self.retrieved = []

    def create(self, **params):
        self.created.append(params)
        if self.error:
            raise self.error
        return SimpleNamespace(id="cs_test_1", url="https://checkout.stripe.com/c/pay/cs_test_1")

    def retrieve(self, session_id):
        self.retrieved.append(session_id)
        if self.error:
            raise self.error
        return SimpleNamespace(id=session_id, payment_status=self.payment_status)


@pytest.fixture
def app():
    saved = dict(main.app.config)
    main.app.config.update(TESTING=True)
    main.app.extensions["patternlabs_store"] = MemoryStore()
    yield main.app
    main.app.config.clear()
    main.app.config.update(saved)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return app.extensions["patternlabs_store"]


@pytest.fixture
def fake_openai(monkeypatch):
    fake = FakeOpenAI()
    monkeypatch.setattr(main.chat_proxy, "get_client", lambda api_key: fake)
    monkeypatch.setattr(main.analysis, "get_openai_client", lambda api_key: fake)
    return fake


@pytest.fixture
def fake_checkout(monkeypatch):
    fake = FakeCheckout()
    monkeypatch.setattr(main.stripe.checkout.Session, "create", fake.create)
    monkeypatch.setattr(main.stripe.checkout.Session, "retrieve", fake.retrieve)
    return fake


@pytest.fixture
def chat_export():
    lines = [
        "12/03/24, 22:14 - Ana: hola? 👀 estás?",
        "12/03/24, 22:15 - Luis: sí, recién llego",
        "12/03/24, 22:16 - Ana: ¿Sigues enojado? no puedo dormir así",
        "12/03/24, 22:20 - Luis: perdón por lo de hace rato, hablamos?",
    ]
    return "\n".join(lines)
