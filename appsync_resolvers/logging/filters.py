"""
Custom logging filters for appsync_resolvers.

Masks AWS credentials that might end up in log messages, e.g. from SDK
error strings or a debug dump of a session.
"""

import logging
import re
from typing import List, Pattern, Tuple


class SensitiveDataFilter(logging.Filter):
    """Filter to mask sensitive data in log messages."""

    def __init__(self) -> None:
        """Initialize sensitive data filter."""
        super().__init__()

        self.rules: List[Tuple[Pattern[str], str]] = [
            # Access key ids (long-term AKIA and temporary ASIA)
            (re.compile(r"\b(AKIA|ASIA)[A-Z0-9]{16}\b"), r"\1***MASKED***"),
            # Secret keys and session tokens given as key=value / key: value
            (
                re.compile(
                    r'(aws_secret_access_key|secret_?key|session_?token|'
                    r'aws_session_token|x-amz-security-token)(["\'\s]*[:=]["\'\s]*)([^\s"\',]+)',
                    re.IGNORECASE,
                ),
                r"\1\2***MASKED***",
            ),
            # SigV4 signatures
            (re.compile(r"(Signature=)([0-9a-f]{64})"), r"\1***MASKED***"),
        ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log record to mask sensitive data."""
        message = record.getMessage()
        masked = message
        for pattern, replacement in self.rules:
            masked = pattern.sub(replacement, masked)

        if masked != message:
            record.msg = masked
            record.args = ()

        return True
