"""
CSV interchange for card decks.

Fixed six-column schema: front word, front hint, front description,
back word, back hint, back description. The header labels and column
order are a versioned contract with spreadsheet users; changing them is a
breaking change of the import/export format.

encode_cards() and decode_cards() round-trip every CardDraft, including
commas, quotes and newlines inside any field.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Tuple

from pydantic import ValidationError as PydanticValidationError

from vocadeck.core.exceptions import EmptyInputError, MalformedRowError
from vocadeck.schemas.card import CardDraft

logger = logging.getLogger(__name__)

# Byte-order mark so spreadsheet tools detect UTF-8
BOM = "\ufeff"

CSV_HEADERS = [
    "表面の単語",
    "表面のヒント",
    "表面の説明",
    "裏面の単語",
    "裏面のヒント",
    "裏面の説明",
]

CARD_FIELDS = [
    "front_word",
    "front_hint",
    "front_description",
    "back_word",
    "back_hint",
    "back_description",
]

TEMPLATE_ROWS = [
    ["Hello", "/həˈloʊ/", "A greeting", "こんにちは", "挨拶", "人に会ったときの挨拶"],
    ["Thank you", "/θæŋk juː/", "Expression of gratitude", "ありがとう", "感謝", "感謝の気持ちを表す言葉"],
    ["Good morning", "/ɡʊd ˈmɔːrnɪŋ/", "Morning greeting", "おはよう", "朝の挨拶", "朝に使う挨拶"],
]


@dataclass
class CsvDecodeResult:
    """Drafts decoded from CSV text plus the rows that were skipped."""
    drafts: List[CardDraft] = field(default_factory=list)
    skipped: List[MalformedRowError] = field(default_factory=list)


def escape_field(value: str) -> str:
    """Quote a field only if it contains a comma, a double quote or a newline."""
    if "," in value or '"' in value or "\n" in value:
        return '"' + value.replace('"', '""') + '"'
    return value


def _join_row(values: Iterable[str]) -> str:
    return ",".join(escape_field(v) for v in values)


def encode_cards(cards: Iterable[Any]) -> str:
    """
    Encode cards as BOM-prefixed CSV text.

    Accepts anything with the six face attributes (CardDraft, Card rows).
    Absent optional fields are written as empty strings.
    """
    lines = [_join_row(CSV_HEADERS)]
    for card in cards:
        lines.append(_join_row(getattr(card, name) or "" for name in CARD_FIELDS))
    return BOM + "\n".join(lines)


def generate_template() -> str:
    """Sample CSV shown to users before their first import."""
    lines = [_join_row(CSV_HEADERS)]
    lines.extend(_join_row(row) for row in TEMPLATE_ROWS)
    return BOM + "\n".join(lines)


def split_records(text: str) -> List[Tuple[int, str]]:
    """
    Split CSV text into (line_number, record) pairs.

    A newline inside a quoted field belongs to the record. A quote only
    opens a quoted field at the start of a field; elsewhere it is literal,
    so a stray quote cannot swallow the rows that follow. A trailing
    carriage return is dropped so CRLF files decode like LF files.
    """
    records: List[Tuple[int, str]] = []
    current: List[str] = []
    in_quotes = False
    field_start = True
    line_number = 1
    start_line = 1
    i = 0

    while i < len(text):
        char = text[i]
        if in_quotes:
            current.append(char)
            if char == '"':
                if text[i + 1:i + 2] == '"':
                    # Escaped double quote
                    current.append('"')
                    i += 2
                    continue
                in_quotes = False
            elif char == "\n":
                line_number += 1
        elif char == "\n":
            line_number += 1
            records.append((start_line, "".join(current)))
            current = []
            start_line = line_number
            field_start = True
        else:
            current.append(char)
            in_quotes = char == '"' and field_start
            field_start = char == ","
        i += 1
    records.append((start_line, "".join(current)))

    return [
        (number, record[:-1] if record.endswith("\r") else record)
        for number, record in records
    ]


def parse_record(record: str) -> List[str]:
    """Split one record into fields, honouring quoted fields and doubled quotes."""
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    field_start = True
    i = 0

    while i < len(record):
        char = record[i]
        if in_quotes:
            if char == '"':
                if record[i + 1:i + 2] == '"':
                    current.append('"')
                    i += 2
                    continue
                in_quotes = False
            else:
                current.append(char)
        elif char == '"' and field_start:
            in_quotes = True
        elif char == ",":
            fields.append("".join(current))
            current = []
            field_start = True
            i += 1
            continue
        else:
            current.append(char)
        field_start = False
        i += 1

    fields.append("".join(current))
    return fields


def _row_to_draft(line_number: int, record: str) -> CardDraft:
    fields = parse_record(record)
    if len(fields) < len(CARD_FIELDS):
        raise MalformedRowError(line_number, f"expected {len(CARD_FIELDS)} fields, got {len(fields)}")
    if not fields[0].strip() or not fields[3].strip():
        raise MalformedRowError(line_number, "front or back word is empty")
    try:
        return CardDraft(**dict(zip(CARD_FIELDS, fields)))
    except PydanticValidationError as e:
        raise MalformedRowError(line_number, str(e)) from e


def decode_cards_with_report(text: str) -> CsvDecodeResult:
    """
    Decode CSV text, collecting rows that could not become cards.

    Blank lines are ignored and the first remaining record is the header.
    Raises EmptyInputError when there is no data row at all.
    """
    if text.startswith(BOM):
        text = text[len(BOM):]

    records = [(number, record) for number, record in split_records(text) if record.strip()]
    if len(records) < 2:
        raise EmptyInputError("CSV file is empty or has no data rows")

    result = CsvDecodeResult()
    for line_number, record in records[1:]:
        try:
            result.drafts.append(_row_to_draft(line_number, record))
        except MalformedRowError as e:
            logger.warning(f"Skipping CSV row: {e}")
            result.skipped.append(e)

    logger.info(f"Decoded {len(result.drafts)} card(s) from CSV, skipped {len(result.skipped)} row(s)")
    return result


def decode_cards(text: str) -> List[CardDraft]:
    """Decode CSV text into card drafts, skipping malformed rows."""
    return decode_cards_with_report(text).drafts
