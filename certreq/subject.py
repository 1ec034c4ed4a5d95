"""Subject distinguished-name mapping.

Translates :class:`SubjectAttributes` into an :class:`x509.Name` and back.
Each value becomes its own RDN so that multi-valued attributes keep the
caller's order (a multi-valued RDN is a DER ``SET OF`` and gets sorted).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

from cryptography import x509
from cryptography.x509.oid import NameOID

from .errors import ValidationError


@dataclass
class SubjectAttributes:
    common_name: str = ""
    organization: list[str] = field(default_factory=list)
    organizational_unit: list[str] = field(default_factory=list)
    street_address: list[str] = field(default_factory=list)
    locality: list[str] = field(default_factory=list)
    province: list[str] = field(default_factory=list)
    country: list[str] = field(default_factory=list)
    postal_code: list[str] = field(default_factory=list)
    # Subject serialNumber attribute (2.5.4.5), not a certificate serial.
    serial_number: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "SubjectAttributes":
        """Build from a loosely typed mapping.

        ``None`` values are treated as absent and a bare string is accepted
        for list fields (``{"organization": "Example, Inc"}``).
        """
        if not data:
            return cls()

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValidationError(unknown[0], data[unknown[0]], "unknown subject attribute")

        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                continue
            if key in _SCALAR_FIELDS:
                if not isinstance(value, str):
                    raise ValidationError(key, value, "expected a string")
                kwargs[key] = value
            elif isinstance(value, str):
                kwargs[key] = [value]
            elif isinstance(value, (list, tuple)):
                kwargs[key] = list(value)
            else:
                raise ValidationError(key, value, "expected a string or a list of strings")
        return cls(**kwargs)


_SCALAR_FIELDS = frozenset({"common_name", "serial_number"})

# Emission order of the encoded name.
_FIELD_OIDS: list[tuple[str, x509.ObjectIdentifier]] = [
    ("country", NameOID.COUNTRY_NAME),
    ("province", NameOID.STATE_OR_PROVINCE_NAME),
    ("locality", NameOID.LOCALITY_NAME),
    ("street_address", NameOID.STREET_ADDRESS),
    ("postal_code", NameOID.POSTAL_CODE),
    ("organization", NameOID.ORGANIZATION_NAME),
    ("organizational_unit", NameOID.ORGANIZATIONAL_UNIT_NAME),
    ("common_name", NameOID.COMMON_NAME),
    ("serial_number", NameOID.SERIAL_NUMBER),
]


def _values(subject: SubjectAttributes, name: str) -> list[str]:
    value = getattr(subject, name)
    if name in _SCALAR_FIELDS:
        return [value] if value else []
    return list(value or [])


def _name_attribute(name: str, oid: x509.ObjectIdentifier, value: object) -> x509.NameAttribute:
    if not isinstance(value, str):
        raise ValidationError(name, value, "expected a string")
    if not value:
        raise ValidationError(name, value, "empty values are not allowed")
    try:
        return x509.NameAttribute(oid, value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(name, value, str(exc)) from exc


def build_x509_name(subject: SubjectAttributes) -> x509.Name:
    """Convert :class:`SubjectAttributes` into an :class:`x509.Name`.

    Absent attributes (empty string or empty list) are left out entirely.
    """
    rdns = []
    for name, oid in _FIELD_OIDS:
        for value in _values(subject, name):
            rdns.append(x509.RelativeDistinguishedName([_name_attribute(name, oid, value)]))
    return x509.Name(rdns)


def subject_from_name(name: x509.Name) -> SubjectAttributes:
    """Read an :class:`x509.Name` back into :class:`SubjectAttributes`."""
    result = SubjectAttributes()
    for field_name, oid in _FIELD_OIDS:
        values = [str(attr.value) for attr in name.get_attributes_for_oid(oid)]
        if field_name in _SCALAR_FIELDS:
            setattr(result, field_name, values[0] if values else "")
        else:
            setattr(result, field_name, values)
    return result
