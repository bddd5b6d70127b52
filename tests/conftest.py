"""
Shared fixtures: one Flask app on in-memory SQLite, with the Piston API
replaced by an httpx mock transport.
"""

import json
from datetime import datetime

import httpx
import pytest

from runlab import create_app
from runlab.auth import Identity
from runlab.config import TestConfig
from runlab.models.db import db
from runlab.models.execution_model import CodeExecution
from runlab.models.snippet_model import Snippet, Star
from runlab.models.user_model import User


class FakeRuntime:
    """Answers /execute with whatever the test configured"""

    def __init__(self):
        self.reset()

    def reset(self):
        self.requests = []
        self.status_code = 200
        self.body = {"language": "javascript", "version": "18.15.0",
                     "run": {"code": 0, "stdout": "", "stderr": "", "output": ""}}
        self.error = None

    def respond(self, body, status_code=200):
        self.body = body
        self.status_code = status_code

    def __call__(self, request):
        if request.url.path.endswith('/runtimes'):
            return httpx.Response(200, json=[])

        self.requests.append(json.loads(request.content))
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.body)


@pytest.fixture(scope='session')
def runtime():
    return FakeRuntime()


@pytest.fixture(scope='session')
def app(runtime):
    return create_app(TestConfig, piston_transport=httpx.MockTransport(runtime))


@pytest.fixture(autouse=True)
def clean_state(app, runtime):
    runtime.reset()
    with app.app_context():
        db.drop_all()
        db.create_all()
        yield
        db.session.remove()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(app):
    return app.extensions['execution_store']


@pytest.fixture
def make_user():
    def _make_user(user_id, is_pro=False, email=None):
        user = User(user_id=user_id, email=email or f"{user_id}@example.com", name=user_id, is_pro=is_pro)
        db.session.add(user)
        db.session.commit()
        return Identity(user_id=user_id)
    return _make_user


@pytest.fixture
def add_execution():
    """Insert a stored execution directly, bypassing the entitlement check"""
    def _add_execution(user_id, language, created_at=None, output="ok", error=None, code="print(1)"):
        execution = CodeExecution(
            user_id=user_id,
            language=language,
            code=code,
            output=output,
            error=error,
            created_at=created_at or datetime.utcnow(),
        )
        db.session.add(execution)
        db.session.commit()
        return execution
    return _add_execution


@pytest.fixture
def star_snippet():
    def _star_snippet(user_id, language, owner="author"):
        snippet = Snippet(user_id=owner, user_name=owner, title=f"{language} snippet", language=language, code="x")
        db.session.add(snippet)
        db.session.flush()
        db.session.add(Star(user_id=user_id, snippet_id=snippet.id))
        db.session.commit()
        return snippet
    return _star_snippet
