"""
Validation utilities for form input.

The services trust what they receive; these checks run in the form layer
before a record is submitted.
"""

from typing import Any, Optional, Tuple

from models import UpdateStatus, LETTER_CLASSIFICATIONS, DELIVERY_METHODS
from services.errors import ValidationError


def parse_count(value: Any, field_name: str) -> int:
    """
    Parse a household/family count from a form field.

    Empty input counts as 0, matching the form default.

    Raises:
        ValidationError: If the value is not a non-negative whole number
    """
    if value is None or value == "":
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(field_name, f"{field_name} harus berupa angka")
    if number != int(number):
        raise ValidationError(field_name, f"{field_name} harus bilangan bulat")
    if number < 0:
        raise ValidationError(field_name, f"{field_name} tidak boleh negatif")
    return int(number)


def validate_update_form(sample_code: Optional[str], status: Optional[str]) -> Tuple[bool, str]:
    """
    Validate the non-numeric fields of the survey update form.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not sample_code or not str(sample_code).strip():
        return False, "Pilih Nomor Kode Sampel terlebih dahulu"

    valid_statuses = [status.value for status in UpdateStatus]
    if status not in valid_statuses:
        return False, f"Status tidak valid: {status}"

    return True, ""


def validate_mail_form(
    number: Optional[str],
    classification: Optional[str],
    delivery_method: Optional[str],
) -> Tuple[bool, str]:
    """
    Validate the mail form.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not number or not number.strip():
        return False, "Nomor surat tidak boleh kosong"

    if classification and classification not in LETTER_CLASSIFICATIONS:
        return False, f"Klasifikasi tidak dikenal: {classification}"

    if delivery_method and delivery_method not in DELIVERY_METHODS:
        return False, f"Metode pengiriman tidak dikenal: {delivery_method}"

    return True, ""
