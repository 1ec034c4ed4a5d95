"""Unit tests for subject distinguished-name mapping."""

import pytest
from cryptography.x509.oid import NameOID

from certreq.errors import ValidationError
from certreq.subject import SubjectAttributes, build_x509_name, subject_from_name


class TestBuildName:
    def test_absent_fields_are_omitted(self):
        name = build_x509_name(SubjectAttributes(serial_number="42"))
        assert len(name) == 1
        assert name.get_attributes_for_oid(NameOID.SERIAL_NUMBER)[0].value == "42"
        assert name.get_attributes_for_oid(NameOID.COMMON_NAME) == []

    def test_empty_subject(self):
        assert len(build_x509_name(SubjectAttributes())) == 0

    def test_empty_list_same_as_absent(self):
        a = build_x509_name(SubjectAttributes(common_name="x", organization=[]))
        b = build_x509_name(SubjectAttributes(common_name="x"))
        assert a == b

    def test_multi_valued_order_preserved(self):
        name = build_x509_name(SubjectAttributes(organizational_unit=["Zeta", "Alpha", "Mid"]))
        values = [a.value for a in name.get_attributes_for_oid(NameOID.ORGANIZATIONAL_UNIT_NAME)]
        assert values == ["Zeta", "Alpha", "Mid"]

    def test_one_rdn_per_value(self):
        name = build_x509_name(SubjectAttributes(organization=["B", "A"]))
        assert len(name.rdns) == 2

    def test_emission_order(self):
        name = build_x509_name(SubjectAttributes(
            common_name="example.com",
            organization=["Example, Inc"],
            country=["US"],
            serial_number="2",
        ))
        oids = [attr.oid for attr in name]
        assert oids == [
            NameOID.COUNTRY_NAME,
            NameOID.ORGANIZATION_NAME,
            NameOID.COMMON_NAME,
            NameOID.SERIAL_NUMBER,
        ]

    def test_empty_list_element_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            build_x509_name(SubjectAttributes(locality=["Pirate Harbor", ""]))
        assert exc_info.value.field == "locality"

    def test_country_must_be_two_characters(self):
        with pytest.raises(ValidationError) as exc_info:
            build_x509_name(SubjectAttributes(country=["USA"]))
        assert exc_info.value.field == "country"
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_non_string_rejected(self):
        with pytest.raises(ValidationError, match="expected a string"):
            build_x509_name(SubjectAttributes(province=[7]))


class TestRoundTrip:
    def test_full_subject(self):
        subject = SubjectAttributes(
            common_name="example.com",
            organization=["Example, Inc", "Second Org"],
            organizational_unit=["Department of Terraform Testing"],
            street_address=["5879 Cotton Link"],
            locality=["Pirate Harbor"],
            province=["CA"],
            country=["US"],
            postal_code=["95559-1227"],
            serial_number="2",
        )
        assert subject_from_name(build_x509_name(subject)) == subject

    def test_unset_fields_read_back_empty(self):
        parsed = subject_from_name(build_x509_name(SubjectAttributes(serial_number="42")))
        assert parsed.common_name == ""
        assert parsed.organization == []
        assert parsed.postal_code == []
        assert parsed.serial_number == "42"


class TestFromDict:
    def test_scalar_coerced_to_list(self):
        subject = SubjectAttributes.from_dict({"organization": "Example, Inc", "common_name": "x"})
        assert subject.organization == ["Example, Inc"]
        assert subject.common_name == "x"

    def test_none_means_absent(self):
        subject = SubjectAttributes.from_dict({"locality": None, "serial_number": None})
        assert subject == SubjectAttributes()

    def test_empty_mapping(self):
        assert SubjectAttributes.from_dict(None) == SubjectAttributes()

    def test_unknown_key(self):
        with pytest.raises(ValidationError, match="unknown subject attribute"):
            SubjectAttributes.from_dict({"email": "a@example.com"})

    def test_scalar_field_requires_string(self):
        with pytest.raises(ValidationError) as exc_info:
            SubjectAttributes.from_dict({"serial_number": ["1", "2"]})
        assert exc_info.value.field == "serial_number"

    def test_list_field_rejects_other_types(self):
        with pytest.raises(ValidationError) as exc_info:
            SubjectAttributes.from_dict({"country": 42})
        assert exc_info.value.field == "country"
