"""
Console email sender adapter - Implements the identity provider's EmailSender.

This module provides a console-based email channel, logging verification
emails to stdout for demo purposes.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - logs instead of delivering mail.
    """

    def send_verification_email(self, email: str) -> None:
        """
        Log a verification email (simulates email delivery).

        The message is logged at INFO level to be visible in server logs.

        Args:
            email: Recipient email address (normalized by the identity provider)
        """
        logger.info("[VERIFICATION] Verification email sent to: %s", email)
