"""Identity adapters - Account creation and authentication."""

from .postgres import EmailSender, PostgresIdentityProvider

__all__ = ["EmailSender", "PostgresIdentityProvider"]
