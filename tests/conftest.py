"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory repository and recording mailer fakes
- A fast bcrypt hasher and ready-wired AuthService
- Test client setup with dependency overrides
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.adapters.repository.memory import InMemoryUserRepository
from src.api.dependencies import get_auth_config, get_repository
from src.api.errors import register_exception_handlers
from src.api.routes import router
from src.domain.auth import AuthService, AuthServiceConfig
from src.domain.passwords import BcryptPasswordHasher
from tests.fakes import SECRET_KEY, SIGNING_KEY, RecordingMailer


@pytest.fixture
def hasher() -> BcryptPasswordHasher:
    """Lowest bcrypt cost to keep tests fast."""
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def auth_config(mailer: RecordingMailer, hasher: BcryptPasswordHasher) -> AuthServiceConfig:
    return AuthServiceConfig(
        signing_key=SIGNING_KEY,
        secret_key=SECRET_KEY,
        mailer=mailer,
        token_expiration_hours=1,
        base_url="http://localhost",
        server_port=8080,
        password_hasher=hasher,
    )


@pytest.fixture
def service(repository: InMemoryUserRepository, auth_config: AuthServiceConfig) -> AuthService:
    return AuthService(repository=repository, config=auth_config)


@pytest.fixture
def app(repository: InMemoryUserRepository, auth_config: AuthServiceConfig) -> FastAPI:
    """FastAPI app wired to the in-memory repository and recording mailer."""
    test_app = FastAPI()
    register_exception_handlers(test_app)
    test_app.include_router(router)
    test_app.dependency_overrides[get_repository] = lambda: repository
    test_app.dependency_overrides[get_auth_config] = lambda: auth_config
    return test_app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create test client for the application."""
    return TestClient(app)
