"""Unit tests for branch ingestion and index bootstrap."""

from unittest.mock import MagicMock, patch

import pytest
from elasticsearch import ConnectionError as ESConnectionError
from elasticsearch import helpers

from bankr.core.exceptions import EngineError, StartupError
from bankr.schemas.bank import BankRecord
from bankr.services.indexing import ensure_index, index_records, iter_batches, load_records


def _bulk_ok(client, actions, chunk_size):
    return len(actions), []


class TestLoadRecords:
    """Tests for reading the branch CSV."""

    def test_reads_all_rows(self, fixtures_dir):
        records = load_records(fixtures_dir / "banks.csv")
        assert len(records) == 6
        first = records[0]
        assert first.name == "State Bank of India"
        assert first.ifsc == "SBIN0001234"
        assert first.micr == "560002011"
        assert first.address == "24th Main Road, JP Nagar 2nd Phase"
        assert first.abbreviation == "SBI"

    def test_empty_cells_are_empty_strings(self, fixtures_dir):
        records = load_records(fixtures_dir / "banks.csv")
        assert records[2].contact == ""
        assert records[5].micr == ""
        assert records[5].abbreviation == ""

    def test_missing_file(self, tmp_path):
        with pytest.raises(StartupError, match="doesn't exist"):
            load_records(tmp_path / "data.csv")

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("BANK,IFSC\nHDFC Bank,HDFC0000123\n")
        with pytest.raises(StartupError, match="missing columns"):
            load_records(path)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("")
        with pytest.raises(StartupError):
            load_records(path)

    def test_headers_case_insensitive(self, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text(
            "bank,ifsc,micr,branch,address,contact,city,district,state,abbreviation\n"
            "HDFC Bank,HDFC0000123,560240003,Koramangala,Addr,,Bangalore,Bangalore,Karnataka,HDFC\n"
        )
        assert load_records(path)[0].branch == "Koramangala"


class TestIterBatches:
    """Tests for fixed-size batching."""

    def test_batches(self):
        records = [BankRecord(name=str(i)) for i in range(5)]
        batches = list(iter_batches(records, 2))
        assert [len(b) for b in batches] == [2, 2, 1]
        assert [doc_id for b in batches for doc_id, _ in b] == [0, 1, 2, 3, 4]

    def test_empty(self):
        assert list(iter_batches([], 10)) == []

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            list(iter_batches([BankRecord()], 0))


class TestIndexRecords:
    """Tests for bulk ingestion."""

    def setup_method(self):
        self.client = MagicMock()
        self.records = [BankRecord(name=f"Bank {i}", IFSC=f"CODE000{i}") for i in range(5)]

    def test_batches_and_ids(self):
        with patch("bankr.services.indexing.helpers.bulk", side_effect=_bulk_ok) as bulk:
            count = index_records(self.client, "banks", self.records, batch_size=2)

        assert count == 5
        assert bulk.call_count == 3
        ids = [a["_id"] for call in bulk.call_args_list for a in call.args[1]]
        assert ids == ["0", "1", "2", "3", "4"]
        first_action = bulk.call_args_list[0].args[1][0]
        assert first_action["_index"] == "banks"
        assert first_action["_source"]["IFSC"] == "CODE0000"
        self.client.indices.refresh.assert_called_once_with(index="banks")

    def test_failed_batch_stops_without_retry(self):
        failure = helpers.BulkIndexError("1 document(s) failed to index.", [{"index": {}}])
        with patch(
            "bankr.services.indexing.helpers.bulk", side_effect=[(2, []), failure]
        ) as bulk:
            with pytest.raises(EngineError) as exc_info:
                index_records(self.client, "banks", self.records, batch_size=2)

        assert bulk.call_count == 2
        assert exc_info.value.operation == "index"
        assert exc_info.value.context == {"batch": 2, "indexed": 2}
        self.client.indices.refresh.assert_not_called()

    def test_transport_failure(self):
        with patch(
            "bankr.services.indexing.helpers.bulk",
            side_effect=ESConnectionError("connection refused"),
        ):
            with pytest.raises(EngineError):
                index_records(self.client, "banks", self.records, batch_size=10)


class TestEnsureIndex:
    """Tests for open / create / rebuild decisions."""

    def setup_method(self):
        self.client = MagicMock()
        self.loader = MagicMock(return_value=[BankRecord(name="HDFC Bank", abbreviation="HDFC")])

    def test_opens_existing_index(self, settings):
        self.client.indices.exists.return_value = True

        assert ensure_index(self.client, settings, self.loader) is False

        self.client.indices.create.assert_not_called()
        self.client.indices.delete.assert_not_called()
        self.loader.assert_not_called()

    def test_creates_missing_index(self, settings):
        self.client.indices.exists.return_value = False

        with patch("bankr.services.indexing.helpers.bulk", side_effect=_bulk_ok) as bulk:
            assert ensure_index(self.client, settings, self.loader) is True

        self.client.indices.create.assert_called_once()
        assert self.client.indices.create.call_args.kwargs["index"] == "banks"
        assert bulk.call_count == 1
        self.loader.assert_called_once()

    def test_rebuilds_when_requested(self, settings):
        self.client.indices.exists.return_value = True

        with patch("bankr.services.indexing.helpers.bulk", side_effect=_bulk_ok):
            assert ensure_index(self.client, settings, self.loader, re_index=True) is True

        self.client.indices.delete.assert_called_once_with(index="banks")
        self.client.indices.create.assert_called_once()

    def test_rebuild_from_settings(self, settings):
        settings = settings.model_copy(update={"re_index": True})
        self.client.indices.exists.return_value = True

        with patch("bankr.services.indexing.helpers.bulk", side_effect=_bulk_ok):
            assert ensure_index(self.client, settings, self.loader) is True

        self.client.indices.delete.assert_called_once()

    def test_missing_data_is_fatal(self, settings, tmp_path):
        settings = settings.model_copy(update={"data_path": tmp_path / "missing.csv"})
        self.client.indices.exists.return_value = False

        with pytest.raises(StartupError):
            ensure_index(self.client, settings, self.loader)
        self.client.indices.create.assert_not_called()

    def test_engine_unreachable(self, settings):
        self.client.indices.exists.side_effect = ESConnectionError("connection refused")
        with pytest.raises(EngineError) as exc_info:
            ensure_index(self.client, settings, self.loader)
        assert exc_info.value.operation == "open"

    def test_create_failure(self, settings):
        self.client.indices.exists.return_value = False
        self.client.indices.create.side_effect = ESConnectionError("connection refused")
        with pytest.raises(EngineError) as exc_info:
            ensure_index(self.client, settings, self.loader)
        assert exc_info.value.operation == "create"
