"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting the registration
state machine, its collaborators and the step controllers into routes.
"""

import uuid

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from psycopg_pool import ConnectionPool

from bank_onboarding.adapters.identity.postgres import PostgresIdentityProvider
from bank_onboarding.adapters.notify.collector import CollectingNotifier
from bank_onboarding.adapters.repository.postgres import (
    PostgresEphemeralStore,
    PostgresProfileRecordStore,
)
from bank_onboarding.adapters.smtp.console import ConsoleEmailSender
from bank_onboarding.adapters.storage.local import LocalDocumentStore
from bank_onboarding.config.settings import get_settings
from bank_onboarding.domain.controllers import AuthContext, RegistrationFlow
from bank_onboarding.domain.ephemeral import RegistrationStateStore
from bank_onboarding.domain.exceptions import AuthenticationFailed, CollaboratorError
from bank_onboarding.domain.models import Session
from bank_onboarding.domain.registration import RegistrationStateMachine

# Module-level singleton - ConsoleEmailSender is stateless
_email_sender = ConsoleEmailSender()


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_registration_scope(request: Request, response: Response) -> str:
    """
    Return the client's registration scope id, issuing one on first contact.

    The scope namespaces ephemeral registration state the way a browser
    profile would; the cookie is refreshed on every request.
    """
    settings = get_settings()
    scope = request.cookies.get(settings.scope_cookie_name) or uuid.uuid4().hex
    response.set_cookie(
        settings.scope_cookie_name,
        scope,
        max_age=settings.scope_cookie_max_age,
        httponly=True,
        samesite="lax",
    )
    return scope


def get_ephemeral_store(
    request: Request, scope: str = Depends(get_registration_scope)
) -> PostgresEphemeralStore:
    """Create ephemeral store bound to the client's registration scope."""
    return PostgresEphemeralStore(get_pool(request), scope)


def get_identity_provider(request: Request) -> PostgresIdentityProvider:
    """Create identity provider with connection pool from app state."""
    settings = get_settings()
    return PostgresIdentityProvider(get_pool(request), _email_sender, settings.bcrypt_cost)


def get_record_store(request: Request) -> PostgresProfileRecordStore:
    """Create profile record store with connection pool from app state."""
    return PostgresProfileRecordStore(get_pool(request))


def get_document_store() -> LocalDocumentStore:
    """Create document store from settings."""
    settings = get_settings()
    return LocalDocumentStore(settings.document_root, settings.document_base_url)


def get_notifier() -> CollectingNotifier:
    """Per-request notifier; its notices are returned with the response."""
    return CollectingNotifier()


def get_state_machine(
    ephemeral_store: PostgresEphemeralStore = Depends(get_ephemeral_store),
    identity_provider: PostgresIdentityProvider = Depends(get_identity_provider),
    record_store: PostgresProfileRecordStore = Depends(get_record_store),
    document_store: LocalDocumentStore = Depends(get_document_store),
) -> RegistrationStateMachine:
    """
    Create the registration state machine with injected collaborators.

    Wires together the identity provider, document store, record store and
    the client's ephemeral state.
    """
    return RegistrationStateMachine(
        identity_provider=identity_provider,
        document_store=document_store,
        record_store=record_store,
        state_store=RegistrationStateStore(ephemeral_store),
    )


# HTTP BASIC AUTH is optional: its absence selects the fresh signup path
http_basic = HTTPBasic(auto_error=False)


def get_session(
    credentials: HTTPBasicCredentials | None = Depends(http_basic),
    identity_provider: PostgresIdentityProvider = Depends(get_identity_provider),
) -> Session | None:
    """
    Sign in with HTTP BASIC AUTH credentials when they are supplied.

    Returns:
        The authenticated session, or None for anonymous requests

    Raises:
        HTTPException: 401 if credentials are supplied but rejected,
            503 if the identity provider cannot be reached
    """
    if credentials is None:
        return None
    try:
        return identity_provider.sign_in(credentials.username, credentials.password)
    except AuthenticationFailed:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        ) from None
    except CollaboratorError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        ) from e


def get_registration_flow(
    machine: RegistrationStateMachine = Depends(get_state_machine),
    notifier: CollectingNotifier = Depends(get_notifier),
    session: Session | None = Depends(get_session),
) -> RegistrationFlow:
    """Build the step controllers for this request."""
    return RegistrationFlow.build(machine, notifier, AuthContext(session=session))
