"""Header normalization for delimited input files.

Input files arrive with inconsistent header spellings ("Customer VPA (UPI)",
"customer_vpas", "VPA", ...). Each record type has a synonym table keyed by a
folded spelling; unknown headers pass through so optional columns can be
added to files without breaking older readers.
"""

import re
from dataclasses import dataclass, field

from vparecon.domain.errors import StructuralError, missing_required_columns

_FOLD_RE = re.compile(r"[\s_\-().]+")


def fold_header(token: str) -> str:
    """Fold a header token for synonym lookup.

    Lowercases and drops whitespace, underscores, hyphens, dots and
    parentheses, so 'Route No', 'route_no' and 'ROUTE-NO' all fold to
    'routeno'.
    """
    return _FOLD_RE.sub("", token.strip().lower())


@dataclass(frozen=True)
class HeaderSchema:
    """Canonical field names and header synonyms for one record type."""

    record_type: str
    synonyms: dict[str, str]
    required: tuple[str, ...]
    # At least one of these must be present
    required_any: tuple[str, ...] = field(default_factory=tuple)

    def canonical(self, token: str) -> str:
        """Return the canonical field name for a raw header token."""
        return self.synonyms.get(fold_header(token), token.strip())

    def missing(self, canonical_headers: list[str]) -> list[str]:
        """Return the required fields absent from a normalized header list."""
        present = set(canonical_headers)
        missing = [name for name in self.required if name not in present]
        if self.required_any and not present.intersection(self.required_any):
            missing.append(" or ".join(self.required_any))
        return missing


def _table(mapping: dict[str, tuple[str, ...]]) -> dict[str, str]:
    table = {}
    for canonical, spellings in mapping.items():
        table[fold_header(canonical)] = canonical
        for spelling in spellings:
            table[fold_header(spelling)] = canonical
    return table


REGISTRANT_HEADERS = HeaderSchema(
    record_type="registrant",
    synonyms=_table(
        {
            "vpa": (
                "upi",
                "upi id",
                "customer vpa",
                "customer_vpas",
                "CustomerVPAs",
                "Customer VPA (UPI)",
                "payee vpa",
                "virtual payment address",
            ),
            "phone": ("phone no", "phone number", "mobile", "mobile no", "mobile number", "contact"),
            "cc_no": ("cc", "cc number"),
            "route_no": ("route", "route number"),
            "name": ("full name", "registrant name", "payee name", "customer name"),
            "id": ("registrant id",),
        }
    ),
    required=("vpa",),
    required_any=("phone", "cc_no", "route_no"),
)

TRANSACTION_HEADERS = HeaderSchema(
    record_type="transaction",
    synonyms=_table(
        {
            "sno": ("s.no", "s no", "sl no", "sr no", "serial no", "serial number"),
            "transaction_date": ("date", "txn date", "value date", "transactionDate"),
            "amount": ("transaction amount", "txn amount", "transactionAmount"),
            "reference_number": ("rrn", "reference no", "ref no", "reference", "utr"),
            "customer_vpa": (
                "customerVPA",
                "customer_vpas",
                "customer vpa (upi)",
                "payer vpa",
                "from vpa",
                "vpa",
                "upi",
                "upi id",
            ),
        }
    ),
    required=("customer_vpa", "amount"),
)


def normalize_headers(raw_headers: list[str], schema: HeaderSchema) -> list[str]:
    """Map raw header tokens to canonical names, keeping their positions.

    Args:
        raw_headers: Header tokens from the first line of the file
        schema: Header schema for the record type being read

    Returns:
        Canonical field names aligned positionally with raw_headers

    Raises:
        StructuralError: If a required canonical field is absent
    """
    canonical = [schema.canonical(token) for token in raw_headers]
    missing = schema.missing(canonical)
    if missing:
        raise StructuralError(missing_required_columns(missing))
    return canonical
