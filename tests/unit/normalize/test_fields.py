import sys

import pytest

from hms_records.domain.models import Gender
from hms_records.domain.references import (
    DoctorIdRef,
    EmbeddedDoctorRef,
    EmbeddedPatientRef,
    PatientIdRef,
)
from hms_records.normalize.fields import (
    as_number,
    as_text,
    compute_bmi,
    first_positive_int,
    flatten_address,
    parse_gender,
)
from hms_records.normalize.references import parse_doctor_ref, parse_patient_ref


class TestAsText:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("  hi ", "hi"),
            (None, ""),
            (True, ""),
            (42, "42"),
            (70.0, "70"),
            (72.5, "72.5"),
            (float("inf"), ""),
            ({"a": 1}, ""),
            (["a"], ""),
        ],
        ids=["string", "none", "bool", "int", "integral-float", "float", "inf", "dict", "list"],
    )
    def test_renders(self, value: object, expected: str) -> None:
        assert as_text(value) == expected

    @pytest.mark.skipif(
        not getattr(sys, "get_int_max_str_digits", lambda: 0)(),
        reason="no int-to-str digit limit",
    )
    def test_int_past_digit_limit_renders_empty(self) -> None:
        assert as_text(10 ** (sys.get_int_max_str_digits() + 1)) == ""


class TestNumbers:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("12.5", 12.5), (3, 3.0), (" 7 ", 7.0), ("abc", None), ("nan", None), (False, None)],
        ids=["string", "int", "padded", "text", "nan", "bool"],
    )
    def test_as_number(self, value: object, expected: float | None) -> None:
        assert as_number(value) == expected

    def test_int_too_large_for_float(self) -> None:
        assert as_number(10**400) is None

    def test_first_positive_int_skips_zero_and_junk(self) -> None:
        assert first_positive_int(0, "x", "-3", "15.9", 20, default=1) == 15
        assert first_positive_int(None, default=20) == 20

    @pytest.mark.parametrize(
        ("height", "weight", "expected"),
        [
            (180, 81, 25.0),
            ("170", "65", 22.5),
            (170, 0, None),
            (None, 60, None),
            ("1e-200", 70, None),
            (1e-150, 1e300, None),
        ],
        ids=["numbers", "strings", "zero-weight", "missing-height", "underflow", "overflow"],
    )
    def test_compute_bmi(self, height: object, weight: object, expected: float | None) -> None:
        assert compute_bmi(height, weight) == expected


class TestParseGender:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("Female", Gender.FEMALE),
            ("m", Gender.MALE),
            ("x", Gender.OTHER),
            ("", None),
            (1, Gender.OTHER),
        ],
        ids=["female", "m", "other", "empty", "number"],
    )
    def test_folds(self, value: object, expected: Gender | None) -> None:
        assert parse_gender(value) == expected


class TestFlattenAddress:
    def test_structured(self) -> None:
        value = {"houseNo": "4B", "street": "Main St", "city": "Pune", "country": "India"}

        assert flatten_address(value) == "4B, Main St, Pune, India"

    def test_plain(self) -> None:
        assert flatten_address(" 1 Infinite Loop ") == "1 Infinite Loop"


class TestReferences:
    def test_string_patient_reference(self) -> None:
        assert parse_patient_ref("xyz") == PatientIdRef(value="xyz")

    @pytest.mark.parametrize(
        "value",
        [None, "", "   ", ["a"], True],
        ids=["none", "empty", "blank", "list", "bool"],
    )
    def test_absent_patient_reference(self, value: object) -> None:
        assert parse_patient_ref(value) is None

    def test_embedded_patient_reference(self) -> None:
        ref = parse_patient_ref(
            {
                "_id": "abc",
                "firstName": "Jane",
                "lastName": "Doe",
                "phoneNumber": {"phone": "555"},
                "metadata": {"patientCode": "PT-1", "gender": "F"},
                "profession": "Nurse",
            }
        )

        assert isinstance(ref, EmbeddedPatientRef)
        assert ref.full_name == "Jane Doe"
        assert ref.object_id == "abc"
        assert ref.phone == "555"
        assert ref.gender == "F"
        assert ref.patient_code == "PT-1"
        assert ref.profession == "Nurse"

    def test_doctor_references(self) -> None:
        assert parse_doctor_ref("Dr. X") == DoctorIdRef(value="Dr. X")
        assert parse_doctor_ref({"firstName": "A"}) == EmbeddedDoctorRef(first_name="A")
        assert parse_doctor_ref(None) is None
