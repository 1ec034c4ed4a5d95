"""Shared test fixtures."""

import logging

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa


def _pem(key, fmt=serialization.PrivateFormat.PKCS8) -> str:
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=fmt,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ecdsa_key():
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ed25519_key():
    return ed25519.Ed25519PrivateKey.generate()


@pytest.fixture(scope="session")
def rsa_key_pem(rsa_key):
    """RSA key in the traditional ``RSA PRIVATE KEY`` (PKCS#1) form."""
    return _pem(rsa_key, serialization.PrivateFormat.TraditionalOpenSSL)


@pytest.fixture(scope="session")
def ecdsa_key_pem(ecdsa_key):
    return _pem(ecdsa_key)


@pytest.fixture(scope="session")
def ed25519_key_pem(ed25519_key):
    return _pem(ed25519_key)


@pytest.fixture()
def key_file(tmp_path, rsa_key_pem):
    """Write the RSA key to disk and return its path."""
    path = tmp_path / "key.pem"
    path.write_text(rsa_key_pem)
    return str(path)


@pytest.fixture(autouse=True)
def _reset_certreq_logger():
    """Drop handlers installed by setup_logging so they do not outlive a test."""
    yield
    logger = logging.getLogger("certreq")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
