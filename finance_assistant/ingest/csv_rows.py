"""Lazy CSV row stream with normalized headers."""

from collections.abc import Iterator
import csv
import io

from .exceptions import CsvDecodeFailure
from .tabular import normalize_header


def iter_csv_rows(data: bytes, encoding: str = "utf-8-sig") -> Iterator[dict[str, str]]:
    """Yield header-normalized rows from CSV bytes.

    Headers are trimmed and lower-cased. Blank lines and rows with only empty
    cells are skipped. Bytes that are not valid in the encoding are replaced
    with U+FFFD.

    Args:
        data: Raw CSV file content
        encoding: Text encoding; the default also strips a UTF-8 byte order mark

    Raises:
        CsvDecodeFailure: If the text cannot be tokenized as CSV
    """
    text = data.decode(encoding, errors="replace")

    reader = csv.DictReader(io.StringIO(text))
    try:
        if reader.fieldnames:
            reader.fieldnames = [normalize_header(name) for name in reader.fieldnames]
        for row in reader:
            if not any(value.strip() for value in row.values() if isinstance(value, str)):
                continue
            yield row
    except csv.Error as e:
        raise CsvDecodeFailure(str(e)) from e
