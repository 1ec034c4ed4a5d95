"""Error types raised while building a certificate signing request.

Every error carries the pipeline ``stage`` that produced it so a caller
can tell a bad SAN entry apart from a bad key or a signing failure.
"""

from __future__ import annotations


class CertRequestError(Exception):
    """Base class for all CSR build failures."""

    stage = "build"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field

    def __str__(self) -> str:
        msg = super().__str__()
        if self.field:
            return f"[{self.stage}] {self.field}: {msg}"
        return f"[{self.stage}] {msg}"


class ValidationError(CertRequestError):
    """Raised when a subject attribute or SAN entry cannot be encoded."""

    stage = "validation"

    def __init__(self, field: str, value: object, reason: str) -> None:
        super().__init__(f"invalid value {value!r}: {reason}", field=field)
        self.value = value
        self.reason = reason


class KeyParseError(CertRequestError):
    """Raised when private-key material cannot be decoded."""

    stage = "key-parse"

    def __init__(self, reason: str) -> None:
        super().__init__(reason, field="private_key_pem")


class KeyMismatchError(CertRequestError):
    """Raised when the key type disagrees with the declared algorithm."""

    stage = "key-mismatch"

    def __init__(self, declared: str, actual: str) -> None:
        super().__init__(
            f"declared algorithm {declared} does not match {actual} private key",
            field="key_algorithm",
        )
        self.declared = declared
        self.actual = actual


class UnsupportedAlgorithmError(CertRequestError):
    """Raised for an unknown key algorithm tag or key type."""

    stage = "algorithm"

    def __init__(self, tag: object) -> None:
        super().__init__(f"unsupported key algorithm {tag!r}", field="key_algorithm")
        self.tag = tag


class SigningError(CertRequestError):
    """Raised when the underlying signature operation fails."""

    stage = "signing"
