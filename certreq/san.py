"""Subject Alternative Name parsing and extension mapping.

Three independent, ordered SAN lists are supported: DNS names, IP
addresses and URIs. Malformed IP literals and URIs are rejected with a
:class:`ValidationError` before any key material is touched.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import Iterable
from urllib.parse import urlsplit

from cryptography import x509

from .errors import ValidationError

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address


@dataclass
class SubjectAltNames:
    dns_names: list[str] = field(default_factory=list)
    ip_addresses: list[IPAddress] = field(default_factory=list)
    uris: list[str] = field(default_factory=list)

    @classmethod
    def from_strings(
        cls,
        dns_names: Iterable[str] | None = None,
        ip_addresses: Iterable[str] | None = None,
        uris: Iterable[str] | None = None,
    ) -> "SubjectAltNames":
        """Parse textual SAN lists. ``None`` is treated as an empty list."""
        return cls(
            dns_names=list(dns_names or []),
            ip_addresses=parse_ip_addresses(ip_addresses or []),
            uris=parse_uris(uris or []),
        )

    def is_empty(self) -> bool:
        return not (self.dns_names or self.ip_addresses or self.uris)


def parse_ip_addresses(values: Iterable[str]) -> list[IPAddress]:
    """Parse IPv4/IPv6 literals, preserving order."""
    result: list[IPAddress] = []
    for value in values:
        if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
            address = value
        elif not isinstance(value, str):
            raise ValidationError("ip_addresses", value, "expected a string")
        else:
            try:
                address = ipaddress.ip_address(value)
            except ValueError as exc:
                raise ValidationError(
                    "ip_addresses", value, "not a valid IPv4 or IPv6 address"
                ) from exc
        # The SAN encoding carries only the packed address bytes.
        if isinstance(address, ipaddress.IPv6Address) and address.scope_id is not None:
            raise ValidationError("ip_addresses", value, "scoped IPv6 addresses cannot be encoded")
        result.append(address)
    return result


def parse_uris(values: Iterable[str]) -> list[str]:
    """Validate absolute URIs (``scheme:`` plus authority or path)."""
    result: list[str] = []
    for value in values:
        if not isinstance(value, str):
            raise ValidationError("uris", value, "expected a string")
        if not value.isascii() or any(c.isspace() for c in value):
            raise ValidationError("uris", value, "URI must be ASCII without whitespace")
        try:
            parts = urlsplit(value)
        except ValueError as exc:
            raise ValidationError("uris", value, str(exc)) from exc
        if not parts.scheme:
            raise ValidationError("uris", value, "URI must be absolute (missing scheme)")
        if not (parts.netloc or parts.path):
            raise ValidationError("uris", value, "URI has no authority or path")
        result.append(value)
    return result


def build_san_extension(sans: SubjectAltNames) -> x509.SubjectAlternativeName | None:
    """Build a SubjectAlternativeName extension.

    Entries are grouped as DNS names, then IPs, then URIs, each group in
    input order. Returns None when all three lists are empty.
    """
    names: list[x509.GeneralName] = []

    for dns in sans.dns_names:
        try:
            names.append(x509.DNSName(dns))
        except (TypeError, ValueError) as exc:
            raise ValidationError("dns_names", dns, str(exc)) from exc
    for ip_addr in sans.ip_addresses:
        names.append(x509.IPAddress(ip_addr))
    for uri in sans.uris:
        try:
            names.append(x509.UniformResourceIdentifier(uri))
        except (TypeError, ValueError) as exc:
            raise ValidationError("uris", uri, str(exc)) from exc

    if not names:
        return None
    return x509.SubjectAlternativeName(names)


def sans_from_extensions(extensions: x509.Extensions) -> SubjectAltNames:
    """Read SAN lists back from a CSR's extensions.

    A missing extension reads as three empty lists.
    """
    try:
        ext = extensions.get_extension_for_class(x509.SubjectAlternativeName)
    except x509.ExtensionNotFound:
        return SubjectAltNames()

    return SubjectAltNames(
        dns_names=ext.value.get_values_for_type(x509.DNSName),
        ip_addresses=ext.value.get_values_for_type(x509.IPAddress),
        uris=ext.value.get_values_for_type(x509.UniformResourceIdentifier),
    )
