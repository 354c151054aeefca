"""Tests for verification and reset code generation."""

import pytest

from services.codes import VerificationCodeGenerator


@pytest.mark.parametrize("length", [4, 6])
def test_codes_have_requested_length_and_are_numeric(length):
    code = VerificationCodeGenerator().generate(length)

    assert len(code) == length
    assert code.isdigit()


def test_codes_use_the_configured_alphabet():
    codes = {VerificationCodeGenerator("AB").generate(8) for _ in range(20)}

    assert all(set(code) <= {"A", "B"} for code in codes)
    assert len(codes) > 1


def test_invalid_arguments():
    with pytest.raises(ValueError):
        VerificationCodeGenerator().generate(0)
    with pytest.raises(ValueError):
        VerificationCodeGenerator("")
