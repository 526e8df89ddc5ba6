"""
paint_rewards/core/submission.py

Field-by-field validation of contractor input before persistence.

Rules:
- Every field is checked independently; all problems are returned together
  so the form can show them at once.
- Region-specific formats come from the RegionConfig; the same functions are
  applied to every region.
- An accepted result carries a normalized record ready for the persistence
  collaborator. Feeding that record back in yields the same decision.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, List, Mapping, Optional

from .errors import FieldValidationError
from .location import validate_location
from .paint_yield import PAINT_MATERIALS, calculate_liters
from .regions import RegionConfig, find_region

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_SEPARATORS_RE = re.compile(r"[\s\-\.\(\)]")

PROJECT_NAME_MIN_LENGTH = 3
CONTRACTOR_NAME_MIN_LENGTH = 2
PASSWORD_MIN_LENGTH = 6
MAX_TEXT_LENGTH = 255

# Matches the Numeric(12, 2) area column
AREA_QUANTUM = Decimal("0.01")
AREA_MAX = Decimal("9999999999.99")

# Field reasons (consumed verbatim by the presentation layer)
REQUIRED = "required"
TOO_SHORT = "too_short"
TOO_LONG = "too_long"
INVALID_FORMAT = "invalid_format"
NOT_NUMERIC = "not_numeric"
NOT_POSITIVE = "not_positive"
TOO_LARGE = "too_large"
NOT_INTEGER = "not_integer"
UNKNOWN_MATERIAL = "unknown_material"
UNKNOWN_REGION = "unknown_region"
UNKNOWN_SUB_REGION = "unknown_sub_region"


@dataclass
class SubmissionResult:
    accepted: bool
    record: Optional[Dict[str, Any]] = None
    errors: List[FieldValidationError] = field(default_factory=list)

    def errors_for(self, field_name: str) -> List[FieldValidationError]:
        return [e for e in self.errors if e.field == field_name]

    def to_dict(self) -> Dict[str, Any]:
        return {"accepted": self.accepted, "errors": [e.to_dict() for e in self.errors]}


# ---------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------
def _clean(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Parse a decimal from user input (accepts comma or dot). None if blank/invalid."""
    raw = _clean(value).replace(",", ".")
    if raw == "":
        return None
    try:
        parsed = Decimal(raw)
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def normalize_phone(value: Any) -> str:
    return PHONE_SEPARATORS_RE.sub("", _clean(value))


def normalize_identifier(value: Any) -> str:
    return _clean(value).upper()


# ---------------------------------------------------------------------
# Reusable field rules
# ---------------------------------------------------------------------
def _check_text(errors, field_name, value, min_length, max_length=MAX_TEXT_LENGTH) -> str:
    text = _clean(value)
    if not text:
        errors.append(FieldValidationError(field_name, REQUIRED))
    elif len(text) < min_length:
        errors.append(FieldValidationError(field_name, TOO_SHORT, min_length))
    elif len(text) > max_length:
        errors.append(FieldValidationError(field_name, TOO_LONG, max_length))
    return text


def _check_email(errors, value) -> str:
    email = _clean(value).lower()
    if not email:
        errors.append(FieldValidationError("email", REQUIRED))
    elif len(email) > MAX_TEXT_LENGTH:
        errors.append(FieldValidationError("email", TOO_LONG, MAX_TEXT_LENGTH))
    elif not EMAIL_RE.match(email):
        errors.append(FieldValidationError("email", INVALID_FORMAT))
    return email


def _check_phone(errors, value, region: Optional[RegionConfig]) -> str:
    phone = normalize_phone(value)
    if not phone:
        errors.append(FieldValidationError("phone", REQUIRED))
        return phone
    if region is None:
        # Region problems are reported on the region field.
        return phone

    if len(phone) < region.phone_min_length:
        errors.append(FieldValidationError("phone", TOO_SHORT, region.phone_min_length))
    elif len(phone) > region.phone_max_length:
        errors.append(FieldValidationError("phone", TOO_LONG, region.phone_max_length))
    elif not region.phone_pattern.match(phone):
        errors.append(FieldValidationError("phone", INVALID_FORMAT, region.phone_placeholder))
    return phone


def _check_identifier(errors, value, region: Optional[RegionConfig]) -> Optional[str]:
    identifier = normalize_identifier(value)
    if region is None:
        return identifier or None

    if not region.requires_identifier:
        # Optional: only the max length is enforced.
        if identifier and len(identifier) > region.identifier_max_length:
            errors.append(FieldValidationError("identifier", TOO_LONG, region.identifier_max_length))
        return identifier or None

    if not identifier:
        errors.append(FieldValidationError("identifier", REQUIRED, region.identifier_label))
    elif len(identifier) < region.identifier_min_length:
        errors.append(FieldValidationError("identifier", TOO_SHORT, region.identifier_min_length))
    elif len(identifier) > region.identifier_max_length:
        errors.append(FieldValidationError("identifier", TOO_LONG, region.identifier_max_length))
    elif not region.identifier_pattern.match(identifier):
        errors.append(FieldValidationError("identifier", INVALID_FORMAT, region.identifier_placeholder))
    return identifier or None


# ---------------------------------------------------------------------
# Project submission
# ---------------------------------------------------------------------
def validate_project_submission(
    data: Mapping[str, Any],
    region_code: Optional[str],
    sub_region_code: Optional[str] = None,
) -> SubmissionResult:
    """
    Validate a project submission for a contractor in ``region_code``.

    Expected keys: name, location, area, material, liters, description.
    When liters is blank and a material is selected, the yield suggestion is
    used instead (``liters_estimated`` is set in the record).
    """
    errors: List[FieldValidationError] = []

    name = _check_text(errors, "name", data.get("name"), PROJECT_NAME_MIN_LENGTH)

    location = _clean(data.get("location"))
    loc_result = validate_location(location, region_code, sub_region_code)
    if not loc_result.valid:
        errors.append(FieldValidationError("location", loc_result.reason.value, loc_result.expected))

    area = None
    raw_area = _clean(data.get("area"))
    if not raw_area:
        errors.append(FieldValidationError("area", REQUIRED))
    else:
        area = parse_decimal(raw_area)
        if area is None:
            errors.append(FieldValidationError("area", NOT_NUMERIC))
        elif area > AREA_MAX:
            errors.append(FieldValidationError("area", TOO_LARGE, str(AREA_MAX)))
            area = None
        else:
            # Stored with two decimals: the rounded value must stay positive.
            area = area.quantize(AREA_QUANTUM, rounding=ROUND_HALF_UP) if area > 0 else area
            if area <= 0:
                errors.append(FieldValidationError("area", NOT_POSITIVE, str(AREA_QUANTUM)))
                area = None

    material = _clean(data.get("material")).lower() or None
    if material and material not in PAINT_MATERIALS:
        errors.append(FieldValidationError("material", UNKNOWN_MATERIAL, tuple(PAINT_MATERIALS)))
        material = None

    liters = None
    liters_estimated = False
    raw_liters = _clean(data.get("liters"))
    if raw_liters:
        parsed = parse_decimal(raw_liters)
        if parsed is None:
            errors.append(FieldValidationError("liters", NOT_NUMERIC))
        elif parsed != parsed.to_integral_value():
            errors.append(FieldValidationError("liters", NOT_INTEGER))
        elif parsed <= 0:
            errors.append(FieldValidationError("liters", NOT_POSITIVE))
        else:
            liters = int(parsed)
    elif material and area is not None:
        liters = calculate_liters(area, material)
        liters_estimated = True
    else:
        errors.append(FieldValidationError("liters", REQUIRED))

    description = _clean(data.get("description")) or None

    if errors:
        return SubmissionResult(accepted=False, errors=errors)

    return SubmissionResult(
        accepted=True,
        record={
            "name": name,
            "location": location,
            "area": area,
            "material": material,
            "liters": liters,
            "liters_estimated": liters_estimated,
            "description": description,
        },
    )


# ---------------------------------------------------------------------
# Contractor identity
# ---------------------------------------------------------------------
def validate_contractor_registration(data: Mapping[str, Any]) -> SubmissionResult:
    """
    Validate a contractor registration.

    Expected keys: name, email, phone, identifier, region_code,
    sub_region_code, password.
    """
    errors: List[FieldValidationError] = []

    region_code = _clean(data.get("region_code")).upper()
    region = find_region(region_code)
    if not region_code:
        errors.append(FieldValidationError("region_code", REQUIRED))
    elif region is None:
        errors.append(FieldValidationError("region_code", UNKNOWN_REGION))

    sub_region_code = _clean(data.get("sub_region_code")).upper() or None
    if region is not None:
        if not region.has_sub_regions:
            sub_region_code = None
        elif sub_region_code and region.find_sub_region(sub_region_code) is None:
            errors.append(
                FieldValidationError(
                    "sub_region_code",
                    UNKNOWN_SUB_REGION,
                    tuple(s.code for s in region.sub_regions),
                )
            )

    name = _check_text(errors, "name", data.get("name"), CONTRACTOR_NAME_MIN_LENGTH)
    email = _check_email(errors, data.get("email"))
    phone = _check_phone(errors, data.get("phone"), region)
    identifier = _check_identifier(errors, data.get("identifier"), region)

    password = data.get("password")
    password = "" if password is None else str(password)
    if not password:
        errors.append(FieldValidationError("password", REQUIRED))
    elif len(password) < PASSWORD_MIN_LENGTH:
        errors.append(FieldValidationError("password", TOO_SHORT, PASSWORD_MIN_LENGTH))

    if errors:
        return SubmissionResult(accepted=False, errors=errors)

    return SubmissionResult(
        accepted=True,
        record={
            "name": name,
            "email": email,
            "phone": phone,
            "identifier": identifier,
            "region_code": region.code,
            "sub_region_code": sub_region_code,
            "password": password,
        },
    )


def validate_contractor_profile(data: Mapping[str, Any], region_code: Optional[str]) -> SubmissionResult:
    """
    Validate a profile edit (name/email/phone).

    The region never changes after registration; legacy contractors without a
    region only get the presence checks on phone.
    """
    errors: List[FieldValidationError] = []
    region = find_region(region_code)

    name = _check_text(errors, "name", data.get("name"), CONTRACTOR_NAME_MIN_LENGTH)
    email = _check_email(errors, data.get("email"))
    phone = _check_phone(errors, data.get("phone"), region)

    if errors:
        return SubmissionResult(accepted=False, errors=errors)
    return SubmissionResult(accepted=True, record={"name": name, "email": email, "phone": phone})
