"""Statement ingestion: reading transaction files into a reconciliation working set."""

from typing import Optional

from vparecon.domain.delimited import read_delimited_file, read_delimited_text
from vparecon.domain.entities import RowRejection, StatementParseResult, Transaction
from vparecon.domain.headers import TRANSACTION_HEADERS, normalize_headers
from vparecon.domain.validation import validate_transaction_row
from vparecon.events import EventSink, NullEventSink, RowRejected


class StatementParser:
    """Parses payment statements into Transaction entities."""

    def __init__(self, events: Optional[EventSink] = None):
        self.events = events or NullEventSink()

    def parse_rows(
        self, raw_headers: list[str], rows: list[tuple[int, list[str]]]
    ) -> StatementParseResult:
        """Normalize headers and validate every statement row.

        Raises:
            StructuralError: If customer_vpa or amount columns are missing
        """
        headers = normalize_headers(raw_headers, TRANSACTION_HEADERS)
        transactions: list[Transaction] = []
        rejected: list[RowRejection] = []
        for row_number, values in rows:
            result = validate_transaction_row(values, headers, row_number)
            if isinstance(result, RowRejection):
                rejected.append(result)
                self.events.emit(RowRejected(result.row_number, result.reason))
            else:
                transactions.append(result)
        return StatementParseResult(transactions=tuple(transactions), rejected=tuple(rejected))

    def parse_text(self, text: str) -> StatementParseResult:
        raw_headers, rows = read_delimited_text(text)
        return self.parse_rows(raw_headers, rows)

    def parse_file(self, path: str) -> StatementParseResult:
        raw_headers, rows = read_delimited_file(path)
        return self.parse_rows(raw_headers, rows)
