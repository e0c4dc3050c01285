"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory ephemeral state
- Mocked identity provider, document store and record store
- A state machine wired to those mocks with a fixed clock
"""

from unittest.mock import Mock

import pytest
from helpers import FIXED_NOW

from bank_onboarding.adapters.repository.memory import InMemoryEphemeralStore
from bank_onboarding.domain.ephemeral import RegistrationStateStore
from bank_onboarding.domain.models import Identity, Session
from bank_onboarding.domain.registration import RegistrationStateMachine


@pytest.fixture
def ephemeral() -> InMemoryEphemeralStore:
    return InMemoryEphemeralStore()


@pytest.fixture
def state_store(ephemeral: InMemoryEphemeralStore) -> RegistrationStateStore:
    return RegistrationStateStore(ephemeral)


@pytest.fixture
def identity_provider() -> Mock:
    provider = Mock()
    provider.create_account.return_value = Identity(uid="uid-1", email="a@bank.com", role="bank")
    provider.sign_in.return_value = Session(uid="uid-1", email="a@bank.com")
    return provider


@pytest.fixture
def document_store() -> Mock:
    store = Mock()
    store.upload.return_value = "bank_documents/a@bank.com/1714564800000_licence.pdf"
    store.resolve_url.return_value = (
        "http://docs.test/bank_documents/a@bank.com/1714564800000_licence.pdf"
    )
    return store


@pytest.fixture
def record_store() -> Mock:
    return Mock()


@pytest.fixture
def machine(
    identity_provider: Mock,
    document_store: Mock,
    record_store: Mock,
    state_store: RegistrationStateStore,
) -> RegistrationStateMachine:
    return RegistrationStateMachine(
        identity_provider=identity_provider,
        document_store=document_store,
        record_store=record_store,
        state_store=state_store,
        clock=lambda: FIXED_NOW,
    )
