import json
from pathlib import Path

import pytest

from driftguard.analysis.models import MLModel
from driftguard.parsing.dataset_parser import (
    DatasetParser,
    conform_to_model,
    detect_delimiter,
    is_likely_header,
)
from driftguard.parsing.models import ParsedDataset
from driftguard.processor.exceptions import FormatUnrecognizedError, SchemaMismatchError
from driftguard.transfer.models import TransferHandle


def _staged(tmp_path: Path, name: str, text: str) -> TransferHandle:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return TransferHandle(path=path, size_bytes=len(text))


class TestDelimitedParsing:
    def test_csv_with_header(self, tmp_path: Path, csv_text: str) -> None:
        dataset = DatasetParser().parse("data.csv", _staged(tmp_path, "data.csv", csv_text))

        assert dataset.format == "csv"
        assert dataset.has_header is True
        assert dataset.columns == ("feature_0", "feature_1", "feature_2", "feature_3")
        assert len(dataset.rows) == 10
        assert dataset.rows[3] == (3.0, 6.0, 1.0, 0.5)

    def test_csv_without_header(self, tmp_path: Path) -> None:
        dataset = DatasetParser().parse("d.csv", _staged(tmp_path, "d.csv", "1,2\n3,4\n"))
        assert dataset.has_header is False
        assert dataset.columns == ("column_0", "column_1")
        assert dataset.rows == [(1.0, 2.0), (3.0, 4.0)]

    def test_txt_splits_on_whitespace(self, tmp_path: Path) -> None:
        dataset = DatasetParser().parse("d.txt", _staged(tmp_path, "d.txt", "1 2 3\n4\t5 6\n"))
        assert dataset.format == "txt"
        assert dataset.rows == [(1.0, 2.0, 3.0), (4.0, 5.0, 6.0)]

    def test_skips_invalid_rows(self, tmp_path: Path) -> None:
        text = "a;b\n1;2\nx;y\n3\n5;6\n"
        dataset = DatasetParser().parse("d.csv", _staged(tmp_path, "d.csv", text))
        assert dataset.rows == [(1.0, 2.0), (5.0, 6.0)]
        assert dataset.skipped_rows == 2

    def test_quoted_fields_keep_their_delimiters(self, tmp_path: Path) -> None:
        text = '"width, cm",height\n"1.5",2\n"3,5",4\n6,8\n'
        dataset = DatasetParser().parse("d.csv", _staged(tmp_path, "d.csv", text))

        assert dataset.columns == ("width, cm", "height")
        assert dataset.rows == [(1.5, 2.0), (6.0, 8.0)]
        assert dataset.skipped_rows == 1

    def test_no_numeric_rows_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FormatUnrecognizedError, match="No numeric data"):
            DatasetParser().parse("d.csv", _staged(tmp_path, "d.csv", "a,b\nx,y\n"))

    def test_empty_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FormatUnrecognizedError):
            DatasetParser().parse("d.csv", _staged(tmp_path, "d.csv", "\n\n"))


class TestJsonParsing:
    def test_array_of_objects(self, tmp_path: Path) -> None:
        text = json.dumps([{"x": 1, "y": 2.5}, {"x": 3, "y": 4}])
        dataset = DatasetParser().parse("d.json", _staged(tmp_path, "d.json", text))
        assert dataset.columns == ("x", "y")
        assert dataset.has_header is True
        assert dataset.rows == [(1.0, 2.5), (3.0, 4.0)]

    def test_array_of_arrays(self, tmp_path: Path) -> None:
        text = json.dumps([[1, 2], [3, "bad"], [5, 6]])
        dataset = DatasetParser().parse("d.json", _staged(tmp_path, "d.json", text))
        assert dataset.rows == [(1.0, 2.0), (5.0, 6.0)]
        assert dataset.skipped_rows == 1

    @pytest.mark.parametrize("text", ["{not json", "{}", "[]", "[1, 2]"])
    def test_rejects_bad_shapes(self, tmp_path: Path, text: str) -> None:
        with pytest.raises(FormatUnrecognizedError):
            DatasetParser().parse("d.json", _staged(tmp_path, "d.json", text))


class TestParserHelpers:
    def test_detect_delimiter(self) -> None:
        assert detect_delimiter("a;b;c") == ";"
        assert detect_delimiter("a\tb") == "\t"
        assert detect_delimiter("a b") is None

    def test_is_likely_header(self) -> None:
        assert is_likely_header(["age", "1.0"]) is True
        assert is_likely_header(["1", " 2.5 "]) is False

    def test_rejects_unsupported_extension(self, tmp_path: Path) -> None:
        with pytest.raises(FormatUnrecognizedError, match="not a supported data format"):
            DatasetParser().parse("d.parquet", _staged(tmp_path, "d.parquet", "1,2"))


class TestConformToModel:
    def test_column_count_mismatch(self, model: MLModel) -> None:
        dataset = ParsedDataset(name="d.csv", format="csv", columns=("a", "b"), rows=[(1.0, 2.0)])
        with pytest.raises(SchemaMismatchError, match="expects 4 features"):
            conform_to_model(dataset, model)

    def test_reorders_permuted_header(self, model: MLModel) -> None:
        dataset = ParsedDataset(
            name="d.csv",
            format="csv",
            columns=("feature_3", "feature_2", "feature_1", "feature_0"),
            rows=[(3.0, 2.0, 1.0, 0.0)],
            has_header=True,
        )

        conformed = conform_to_model(dataset, model)

        assert conformed.columns == model.input_features
        assert conformed.rows == [(0.0, 1.0, 2.0, 3.0)]

    def test_unnamed_columns_pass_through(self, model: MLModel) -> None:
        dataset = ParsedDataset(
            name="d.csv",
            format="csv",
            columns=("column_0", "column_1", "column_2", "column_3"),
            rows=[(1.0, 2.0, 3.0, 4.0)],
        )
        assert conform_to_model(dataset, model) is dataset
