#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doc2conf/parsers/csv.py
"""Tabular data builder: delimited text to ADF tables.

Used for fenced ``csv`` code blocks, ``![csv](file.csv)`` imports and whole
CSV source files. Malformed input never raises; it becomes a two-row
diagnostic table so the rest of the document still converts.

"""

from __future__ import annotations

import csv
import io
import logging
from typing import Any

from doc2conf.adf.builder import error_table, text_row
from doc2conf.adf.nodes import Document, Table, TableRow
from doc2conf.constants import CSV_ERROR_HEADER, CSV_ERROR_PREFIX
from doc2conf.options.csv import CsvOptions
from doc2conf.parsers.base import BaseParser

logger = logging.getLogger(__name__)


def _make_csv_dialect(delimiter: str) -> type[csv.Dialect]:
    """Create a strict dialect based on csv.excel with the given delimiter.

    ``strict`` makes the reader raise on malformed quoting instead of
    silently guessing, which is what routes input to the diagnostic table.
    """
    attrs: dict[str, Any] = {"delimiter": delimiter, "strict": True, "skipinitialspace": False}
    return type("StrictDialect", (csv.excel,), attrs)


class CsvToAdfConverter(BaseParser):
    """Convert delimited text to ADF table nodes.

    Parameters
    ----------
    options : CsvOptions or None
        Delimiter, header and blank-line handling

    """

    def __init__(self, options: CsvOptions | None = None) -> None:
        BaseParser._validate_options_type(options, CsvOptions, "csv")
        options = options or CsvOptions()
        super().__init__(options)
        self.options: CsvOptions = options

    def parse(self, source: str) -> Document:
        """Parse a whole CSV source into a document holding one table."""
        return Document(content=[self.build_table(source)])

    def build_table(self, text: str) -> Table:
        """Parse delimited text into a table node.

        Parameters
        ----------
        text : str
            Raw delimited text

        Returns
        -------
        Table
            Header row plus data rows; an empty table for blank input; a
            diagnostic table when the text cannot be parsed

        """
        if not text or not text.strip():
            return Table(content=[])

        try:
            records = self._read_records(text)
        except csv.Error as e:
            logger.warning(f"Could not parse CSV: {e}")
            return self._diagnostic_table(str(e))

        if not records:
            return Table(content=[])

        rows = self._records_to_rows(records)
        logger.debug(f"Built table with {len(rows)} rows from CSV")
        return Table(content=rows, is_number_column_enabled=False, layout="default")

    def _read_records(self, text: str) -> list[list[str]]:
        reader = csv.reader(io.StringIO(text.strip("\r\n")), dialect=_make_csv_dialect(self.options.delimiter))
        records: list[list[str]] = []
        for record in reader:
            if self.options.trim:
                record = [field.strip() for field in record]
            if not any(record):
                if self.options.skip_empty_lines:
                    continue
                # A blank line is still a row, with one empty cell
                record = record or [""]
            records.append(record)
        return records

    def _records_to_rows(self, records: list[list[str]]) -> list[TableRow]:
        if self.options.has_header:
            header, data = records[0], records[1:]
        else:
            # Without a header the columns are keyed by position
            header, data = [str(index) for index in range(len(records[0]))], records

        rows = [text_row(header, header=True)]
        rows.extend(text_row(record) for record in data)
        return rows

    @staticmethod
    def _diagnostic_table(message: str) -> Table:
        return error_table(f"{CSV_ERROR_PREFIX}: {message}", CSV_ERROR_HEADER)


def csv_to_table(text: str, options: CsvOptions | None = None) -> Table:
    """Parse delimited text into a table node with the given options."""
    return CsvToAdfConverter(options).build_table(text)
