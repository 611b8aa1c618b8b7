"""Per-row validation and normalization of registrant and transaction records."""

import re
from typing import Optional, Union

from vparecon.domain.entities import RegistrantRecord, RowRejection, Transaction
from vparecon.domain.errors import ValidationError
from vparecon.utils.amount_parser import parse_amount

PHONE_RE = re.compile(r"\d{10}", re.ASCII)
VPA_RE = re.compile(r"[A-Za-z0-9._-]+@[A-Za-z0-9.-]+")

IDENTIFYING_FIELDS = ("phone", "cc_no", "route_no")


def normalize_vpa(vpa: str) -> str:
    """Return the matching form of a VPA (trimmed, lowercased)."""
    return vpa.strip().lower()


def is_valid_phone(phone: str) -> bool:
    return PHONE_RE.fullmatch(phone) is not None


def is_valid_vpa(vpa: str) -> bool:
    return VPA_RE.fullmatch(vpa) is not None


def row_values(row: list[str], headers: list[str]) -> dict[str, Optional[str]]:
    """Pair a raw row with canonical headers.

    Values are trimmed and empty values become None. When two columns
    normalize to the same field the first one wins; short rows leave the
    trailing fields as None.
    """
    values: dict[str, Optional[str]] = {}
    for index, name in enumerate(headers):
        if name in values:
            continue
        raw = row[index] if index < len(row) else None
        value = raw.strip() if raw is not None else None
        values[name] = value or None
    return values


def _registrant_problem(values: dict[str, Optional[str]]) -> Optional[str]:
    """Return the first validation failure for registrant values, if any."""
    if not values.get("vpa"):
        return "Missing vpa"

    carried = [f for f in IDENTIFYING_FIELDS if f in values]
    if carried and not any(values.get(f) for f in carried):
        return f"Missing {' or '.join(carried)}"

    phone = values.get("phone")
    if phone and not is_valid_phone(phone):
        return f"Invalid phone number '{phone}': must be exactly 10 digits"

    vpa = values["vpa"]
    if not is_valid_vpa(vpa):
        return f"Invalid VPA format '{vpa}'"

    raw_id = values.get("id")
    if raw_id is not None and not (raw_id.isascii() and raw_id.isdigit()):
        return f"Invalid id '{raw_id}'"

    return None


def validate_registrant_row(
    row: list[str], headers: list[str], row_number: int
) -> Union[RegistrantRecord, RowRejection]:
    """Validate one registrant row.

    Args:
        row: Raw values of the data row
        headers: Canonical header names (see normalize_headers)
        row_number: 1-based source row number (header is row 1)

    Returns:
        A RegistrantRecord, or a RowRejection naming the first failed rule
    """
    values = row_values(row, headers)
    problem = _registrant_problem(values)
    if problem is not None:
        return RowRejection(row_number=row_number, reason=problem)

    raw_id = values.get("id")
    return RegistrantRecord(
        vpa=values["vpa"],
        phone=values.get("phone"),
        cc_no=values.get("cc_no"),
        route_no=values.get("route_no"),
        name=values.get("name"),
        id=int(raw_id) if raw_id is not None else None,
        row_number=row_number,
    )


def validate_registrant_fields(
    vpa: Optional[str],
    phone: Optional[str] = None,
    cc_no: Optional[str] = None,
    route_no: Optional[str] = None,
    name: Optional[str] = None,
) -> RegistrantRecord:
    """Validate a single registrant given as keyword fields.

    Raises:
        ValidationError: If the fields break a registrant rule
    """
    values = {
        "vpa": vpa,
        "phone": phone,
        "cc_no": cc_no,
        "route_no": route_no,
        "name": name,
    }
    values = {k: (v.strip() or None) if isinstance(v, str) else v for k, v in values.items()}
    problem = _registrant_problem(values)
    if problem is not None:
        raise ValidationError(problem)
    return RegistrantRecord(
        vpa=values["vpa"],
        phone=values["phone"],
        cc_no=values["cc_no"],
        route_no=values["route_no"],
        name=values["name"],
    )


def validate_transaction_row(
    row: list[str], headers: list[str], row_number: int
) -> Union[Transaction, RowRejection]:
    """Validate one statement row.

    The serial number defaults to the data-row ordinal when the file has no
    sno column. Dates and reference numbers are carried through as text.
    """
    values = row_values(row, headers)

    vpa = values.get("customer_vpa")
    if not vpa:
        return RowRejection(row_number, "Missing customer_vpa")
    amount_str = values.get("amount")
    if not amount_str:
        return RowRejection(row_number, "Missing amount")
    if not is_valid_vpa(vpa):
        return RowRejection(row_number, f"Invalid VPA format '{vpa}'")

    try:
        amount = parse_amount(amount_str)
    except ValueError as e:
        return RowRejection(row_number, str(e))
    if amount < 0:
        return RowRejection(row_number, f"Amount must be non-negative, got '{amount_str}'")

    return Transaction(
        sno=values.get("sno") or str(row_number - 1),
        transaction_date=values.get("transaction_date") or "",
        amount=amount,
        reference_number=values.get("reference_number") or "",
        customer_vpa=vpa,
    )
