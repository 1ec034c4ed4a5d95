"""CSR (Certificate Signing Request) construction, signing and encoding."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.types import PrivateKeyTypes

from .crypto_utils import KeyAlgorithm, key_algorithm_of, load_private_key, pick_hash
from .errors import SigningError
from .san import SubjectAltNames, build_san_extension, sans_from_extensions
from .subject import SubjectAttributes, build_x509_name, subject_from_name

PEM_HEADER = "-----BEGIN CERTIFICATE REQUEST-----"
PEM_FOOTER = "-----END CERTIFICATE REQUEST-----"


@dataclass(frozen=True)
class CertificateRequest:
    """A signed PKCS#10 request in both DER and PEM form."""

    der: bytes
    pem: str
    key_algorithm: KeyAlgorithm

    @property
    def id(self) -> str:
        """SHA-1 hex digest of the PEM text, used as a stable identifier."""
        return hashlib.sha1(self.pem.encode("ascii")).hexdigest()

    @property
    def csr(self) -> x509.CertificateSigningRequest:
        return x509.load_der_x509_csr(self.der)


def sign_request(
    name: x509.Name,
    san_extension: x509.SubjectAlternativeName | None,
    private_key: PrivateKeyTypes,
    algorithm: KeyAlgorithm | str,
) -> CertificateRequest:
    """Sign a request for *name* and encode it.

    The SAN extension is added (non-critical) only when given. DER and
    PEM are both taken from the single signed object.

    Raises:
        UnsupportedAlgorithmError: Unknown *algorithm* tag.
        KeyMismatchError: *private_key* is not an *algorithm* key.
        SigningError: The signature operation failed.
    """
    algorithm = KeyAlgorithm.from_tag(algorithm)
    sign_algo = pick_hash(private_key, algorithm)

    builder = x509.CertificateSigningRequestBuilder().subject_name(name)
    if san_extension is not None:
        builder = builder.add_extension(san_extension, critical=False)

    try:
        csr = builder.sign(private_key, sign_algo)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise SigningError(f"failed to sign request: {exc}") from exc

    return CertificateRequest(
        der=csr.public_bytes(serialization.Encoding.DER),
        pem=csr.public_bytes(serialization.Encoding.PEM).decode("ascii"),
        key_algorithm=algorithm,
    )


def build_csr(
    subject: SubjectAttributes | None,
    sans: SubjectAltNames | None,
    private_key_pem: str | bytes,
    key_algorithm: KeyAlgorithm | str | None = None,
    passphrase: bytes | None = None,
    logger: logging.Logger | None = None,
) -> CertificateRequest:
    """Build and sign a PKCS#10 request.

    Args:
        subject: Distinguished-name attributes; None means an empty subject.
        sans: Subject Alternative Names; None means no SAN extension.
        private_key_pem: PEM text of the requester's private key.
        key_algorithm: Declared algorithm. If None it is inferred from the key.
        passphrase: Passphrase for an encrypted private key.
        logger: Logger instance; defaults to the ``certreq`` logger.

    Returns:
        The signed :class:`CertificateRequest`.
    """
    logger = logger or logging.getLogger("certreq")

    name = build_x509_name(subject or SubjectAttributes())
    san_ext = build_san_extension(sans or SubjectAltNames())
    logger.debug("Mapped subject %s", name.rfc4514_string())

    declared = KeyAlgorithm.from_tag(key_algorithm) if key_algorithm is not None else None
    private_key = load_private_key(private_key_pem, passphrase)
    algorithm = declared or key_algorithm_of(private_key)

    logger.info("Starting CSR signing (%s)...", algorithm.value)
    request = sign_request(name, san_ext, private_key, algorithm)
    logger.info("CSR signing completed successfully (id %s).", request.id)
    return request


def load_csr(pem_data: str | bytes) -> x509.CertificateSigningRequest:
    """Parse a PEM-encoded CSR."""
    if isinstance(pem_data, str):
        pem_data = pem_data.encode("ascii")
    return x509.load_pem_x509_csr(pem_data)


def read_csr(pem_data: str | bytes) -> tuple[SubjectAttributes, SubjectAltNames]:
    """Decode a PEM CSR back into its subject attributes and SAN lists."""
    csr = load_csr(pem_data)
    return subject_from_name(csr.subject), sans_from_extensions(csr.extensions)


def verify_csr(csr: x509.CertificateSigningRequest) -> bool:
    """Verify that the CSR is properly self-signed."""
    return csr.is_signature_valid
