"""Error taxonomy.

Error codes travel on the wire as plain strings.  The five standard codes
below belong to the dispatch engine; anything else is a procedure-declared
code that a procedure lists in its ``errors()``.
"""

from __future__ import annotations

# ── Standard error codes ─────────────────────────────────────────────
EINTRN = "EINTRN"  # internal failure inside a procedure
EPARAM = "EPARAM"  # parameters rejected by the procedure's schema
EREQST = "EREQST"  # malformed request or unknown method
ERESLT = "ERESLT"  # result violates the procedure's result schema (debug only)
EERROR = "EERROR"  # undeclared error code returned (debug only)

STANDARD_ERRORS: frozenset[str] = frozenset({EINTRN, EPARAM, EREQST, ERESLT, EERROR})


def is_standard(code: str) -> bool:
    return code in STANDARD_ERRORS


class ConfigurationError(ValueError):
    """Raised when a server is built from an invalid configuration."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid server configuration: {reason}")
