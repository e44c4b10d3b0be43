"""Reads numeric rows out of staged dataset files."""

import csv
import json
from typing import Any

from driftguard.analysis.models import MLModel
from driftguard.logging.logger import Log
from driftguard.parsing.models import ParsedDataset
from driftguard.parsing.sniffer import DATA_EXTENSIONS, extension_of
from driftguard.processor.exceptions import FormatUnrecognizedError, SchemaMismatchError
from driftguard.transfer.models import TransferHandle

_DELIMITERS = (",", ";", "\t", "|")


class DatasetParser:
    """Parses CSV, TXT and JSON datasets into float rows."""

    def parse(self, file_name: str, handle: TransferHandle) -> ParsedDataset:
        """Parse the staged file.

        Raises:
            FormatUnrecognizedError: on an unsupported extension, undecodable
                content, or a file without any numeric rows.
        """
        extension = extension_of(file_name)
        if extension not in DATA_EXTENSIONS:
            raise FormatUnrecognizedError(
                f"'{file_name}' is not a supported data format. "
                f"Supported: {', '.join(sorted(DATA_EXTENSIONS))}"
            )
        try:
            text = handle.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise FormatUnrecognizedError(f"'{file_name}' is not UTF-8 text") from exc

        if extension == ".json":
            dataset = self._parse_json(file_name, text)
        else:
            dataset = self._parse_delimited(file_name, extension.lstrip("."), text)

        if not dataset.rows:
            raise FormatUnrecognizedError(f"No numeric data found in '{file_name}'")
        if dataset.skipped_rows:
            Log.warning(f"Skipped {dataset.skipped_rows} invalid rows in '{file_name}'")
        return dataset

    def _parse_delimited(self, file_name: str, fmt: str, text: str) -> ParsedDataset:
        lines = [line for line in text.splitlines() if line.strip()]
        if not lines:
            raise FormatUnrecognizedError(f"'{file_name}' is empty")
        records = split_lines(lines, detect_delimiter(lines[0]))
        first = records[0]
        has_header = is_likely_header(first)
        columns = (
            tuple(c.strip() for c in first)
            if has_header
            else tuple(f"column_{i}" for i in range(len(first)))
        )
        rows: list[tuple[float, ...]] = []
        skipped = 0
        for record in records[1:] if has_header else records:
            row = _to_floats(record, len(columns))
            if row is None:
                skipped += 1
            else:
                rows.append(row)
        return ParsedDataset(
            name=file_name,
            format=fmt,
            columns=columns,
            rows=rows,
            has_header=has_header,
            skipped_rows=skipped,
        )

    def _parse_json(self, file_name: str, text: str) -> ParsedDataset:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise FormatUnrecognizedError(f"'{file_name}' is not valid JSON: {exc}") from exc
        if not isinstance(data, list) or not data:
            raise FormatUnrecognizedError(f"'{file_name}' must hold a non-empty JSON array")

        first = data[0]
        if isinstance(first, dict):
            columns = tuple(str(k) for k in first)
            raw_rows: list[Any] = [
                [item.get(c) for c in columns] if isinstance(item, dict) else None
                for item in data
            ]
            has_header = True
        elif isinstance(first, list):
            columns = tuple(f"column_{i}" for i in range(len(first)))
            raw_rows = data
            has_header = False
        else:
            raise FormatUnrecognizedError(
                f"'{file_name}' must be an array of objects or an array of arrays"
            )

        rows: list[tuple[float, ...]] = []
        skipped = 0
        for raw in raw_rows:
            row = _to_floats(raw, len(columns)) if isinstance(raw, list) else None
            if row is None:
                skipped += 1
            else:
                rows.append(row)
        return ParsedDataset(
            name=file_name,
            format="json",
            columns=columns,
            rows=rows,
            has_header=has_header,
            skipped_rows=skipped,
        )


def detect_delimiter(line: str) -> str | None:
    """Pick the most frequent known delimiter; None means split on whitespace."""
    counts = {d: line.count(d) for d in _DELIMITERS}
    best = max(_DELIMITERS, key=lambda d: counts[d])
    return best if counts[best] else None


def split_lines(lines: list[str], delimiter: str | None) -> list[list[str]]:
    """Split lines into cells. Quoted fields may contain the delimiter."""
    if delimiter is None:
        return [line.split() for line in lines]
    return list(csv.reader(lines, delimiter=delimiter))


def is_likely_header(cells: list[str]) -> bool:
    for cell in cells:
        try:
            float(cell.strip())
        except ValueError:
            return True
    return False


def _to_floats(cells: list[Any], expected: int) -> tuple[float, ...] | None:
    if len(cells) != expected:
        return None
    try:
        return tuple(
            float(c.strip()) if isinstance(c, str) else _number(c) for c in cells
        )
    except (TypeError, ValueError):
        return None


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"not a number: {value!r}")
    return float(value)


def conform_to_model(dataset: ParsedDataset, model: MLModel) -> ParsedDataset:
    """Check the dataset against the model's input features.

    A header naming exactly the model's features in a different order is
    reordered to the model's order.

    Raises:
        SchemaMismatchError: if the column count differs from the feature count.
    """
    expected = len(model.input_features)
    if dataset.column_count != expected:
        raise SchemaMismatchError(
            f"Model '{model.name}' expects {expected} features, "
            f"but '{dataset.name}' has {dataset.column_count} columns"
        )
    if (
        dataset.has_header
        and dataset.columns != model.input_features
        and sorted(dataset.columns) == sorted(model.input_features)
    ):
        order = [dataset.columns.index(name) for name in model.input_features]
        return ParsedDataset(
            name=dataset.name,
            format=dataset.format,
            columns=model.input_features,
            rows=[tuple(row[i] for i in order) for row in dataset.rows],
            has_header=True,
            skipped_rows=dataset.skipped_rows,
        )
    return dataset
