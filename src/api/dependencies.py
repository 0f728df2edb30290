"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from datetime import timedelta

from fastapi import Depends, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository.postgres import PostgresUserRepository
from src.adapters.smtp.console import ConsoleMailer
from src.adapters.smtp.mailer import SmtpMailer
from src.config.settings import Settings
from src.domain.auth import AuthService, AuthServiceConfig
from src.domain.passwords import BcryptPasswordHasher
from src.domain.ports import Mailer, UserRepository


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresUserRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresUserRepository(pool)


def build_mailer(settings: Settings) -> Mailer:
    """SMTP mailer when a host is configured, console mailer otherwise."""
    ttl = timedelta(hours=settings.verification_ttl_hours)
    if not settings.smtp_host:
        return ConsoleMailer(ttl=ttl)
    return SmtpMailer(
        host=settings.smtp_host,
        port=settings.smtp_port,
        from_email=settings.smtp_from_email,
        from_name=settings.smtp_from_name,
        username=settings.smtp_username,
        password=settings.smtp_password,
        ttl=ttl,
    )


def build_auth_config(settings: Settings, mailer: Mailer) -> AuthServiceConfig:
    """Translate process settings into the service's injected configuration."""
    return AuthServiceConfig(
        signing_key=settings.jwt_signing_key,
        secret_key=settings.secret_key,
        mailer=mailer,
        token_expiration_hours=settings.jwt_expiration,
        base_url=settings.base_url,
        server_port=settings.server_port,
        enforce_link_expiry=settings.enforce_link_expiry,
        password_hasher=BcryptPasswordHasher(rounds=settings.bcrypt_cost),
    )


def get_auth_config(request: Request) -> AuthServiceConfig:
    """
    Get the service configuration from app state.

    The configuration is built once during app lifespan startup, together
    with the mailer and the login dummy hash.
    """
    return request.app.state.auth_config


def get_auth_service(
    repository: UserRepository = Depends(get_repository),
    config: AuthServiceConfig = Depends(get_auth_config),
) -> AuthService:
    """
    Create auth service with injected dependencies.

    Wires together the repository and the service configuration.
    """
    return AuthService(repository=repository, config=config)
