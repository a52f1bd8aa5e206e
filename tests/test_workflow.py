"""
Tests for the indexing workflow, validation and writers.
"""

import json

import pyarrow.parquet as pq
import pytest

from feeledger.parsers import RegistryParser, TreasuryEvent
from feeledger.enums import TableName, TreasuryEventType
from feeledger.validation import DataValidator, validate_indexing
from feeledger.workflow import (
    IndexingResult,
    TreasuryIndexer,
    apply_fees_distributed,
    apply_fees_received,
    index_from_files,
)
from feeledger.writers import (
    JSONWriter,
    ParquetWriter,
    get_schema_for_table,
    record_to_row,
    serialize_value,
    write_result_to_json,
    write_result_to_parquet,
)

MARKET = "0x8888888888888888888888888888888888888888"
TREASURY = "0x8888888888888888888888888888888888888888"
OTHER_MODULE = "0x9999999999999999999999999999999999999999"
USDC = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
SENDER = "0x1234567890123456789012345678901234567890"
RECIPIENT_1 = "0x1111111111111111111111111111111111111111"
RECIPIENT_2 = "0x2222222222222222222222222222222222222222"


def make_event(event_type, tx_hash, log_index, timestamp, src=TREASURY, **params):
    return TreasuryEvent(
        event_type=event_type,
        src_address=src,
        chain_id=31337,
        block_timestamp=timestamp,
        transaction_hash=tx_hash,
        log_index=log_index,
        params=params,
    )


@pytest.fixture
def registry():
    return RegistryParser().parse_dict(
        {
            "markets": {TREASURY: MARKET},
            "tokens": [{"address": USDC, "name": "Test USDC", "symbol": "TUSDC", "decimals": 6}],
        }
    )


@pytest.fixture
def multi_events():
    """One receipt and two recipient payments in the same transaction."""
    return [
        make_event(
            TreasuryEventType.FUNDS_RECEIVED, "0xmulti1", 0, 3000,
            token=USDC, sender=SENDER, amount=10_000_000,
        ),
        make_event(
            TreasuryEventType.RECIPIENT_PAYMENT, "0xmulti1", 1, 3000,
            token=USDC, recipient=RECIPIENT_1, amount=5_000_000,
        ),
        make_event(
            TreasuryEventType.RECIPIENT_PAYMENT, "0xmulti1", 2, 3000,
            token=USDC, recipient=RECIPIENT_2, amount=5_000_000,
        ),
    ]


class TestTreasuryTotals:
    """Tests for the treasury accumulator helpers."""

    def test_apply_fees_received(self):
        """Test the received total advances without touching the input."""
        treasury = {
            "id": "t1",
            "totalFeesReceivedRaw": 1_000_000,
            "totalFeesReceivedFormatted": "1",
            "totalFeesDistributedRaw": 0,
            "totalFeesDistributedFormatted": "0",
            "lastUpdatedAt": 1,
        }

        updated = apply_fees_received(treasury, 500_000, 6, 5)

        assert updated["totalFeesReceivedRaw"] == 1_500_000
        assert updated["totalFeesReceivedFormatted"] == "1.5"
        assert updated["lastUpdatedAt"] == 5
        assert treasury["totalFeesReceivedRaw"] == 1_000_000

    def test_apply_fees_distributed(self):
        """Test the distributed total advances."""
        treasury = {"totalFeesDistributedRaw": 0, "lastUpdatedAt": 1}
        updated = apply_fees_distributed(treasury, 250_000, 6, 9)

        assert updated["totalFeesDistributedRaw"] == 250_000
        assert updated["totalFeesDistributedFormatted"] == "0.25"
        assert updated["lastUpdatedAt"] == 9


class TestTreasuryIndexer:
    """Tests for the TreasuryIndexer workflow."""

    def test_funds_received_creates_receipt(self, registry):
        """Test that Treasury_FundsReceived creates a receipt and treasury."""
        event = make_event(
            TreasuryEventType.FUNDS_RECEIVED, "0xfees1", 0, 2000,
            token=USDC, sender=SENDER, amount=10_000_000,
        )

        result = TreasuryIndexer().index([event], registry)

        receipt = result.receipts["0xfees1-0"]
        assert receipt["market_id"] == MARKET
        assert receipt["treasury_id"] == TREASURY
        assert receipt["token_id"] == USDC
        assert receipt["sender"] == SENDER
        assert receipt["amountRaw"] == 10_000_000
        assert receipt["amountFormatted"] == "10"

        treasury = result.treasuries[TREASURY]
        assert treasury["createdAt"] == 2000
        assert treasury["totalFeesReceivedRaw"] == 10_000_000
        assert treasury["totalFeesReceivedFormatted"] == "10"
        assert treasury["totalFeesDistributedRaw"] == 0
        assert result.events_processed == 1

    def test_recipient_payment(self, registry):
        """Test that RecipientPayment creates a proportional payment."""
        event = make_event(
            TreasuryEventType.RECIPIENT_PAYMENT, "0xpay1", 0, 2100,
            token=USDC, recipient=RECIPIENT_1, amount=10_000_000,
        )

        result = TreasuryIndexer().index([event], registry)

        payment = result.payments["0xpay1-0"]
        assert payment["recipient"] == RECIPIENT_1
        assert payment["isFloorFee"] is False
        assert payment["amountFormatted"] == "10"
        assert result.treasuries[TREASURY]["totalFeesDistributedRaw"] == 10_000_000
        assert result.treasuries[TREASURY]["totalFeesReceivedRaw"] == 0

    def test_floor_fee_paid(self, registry):
        """Test that FloorFeePaid pays the treasury itself and counts as received."""
        event = make_event(
            TreasuryEventType.FLOOR_FEE_PAID, "0xfloor1", 0, 2200, token=USDC, amount=1_000_000
        )

        result = TreasuryIndexer().index([event], registry)

        payment = result.payments["0xfloor1-0"]
        assert payment["isFloorFee"] is True
        assert payment["recipient"] == TREASURY
        assert payment["amountFormatted"] == "1"
        assert result.treasuries[TREASURY]["totalFeesReceivedRaw"] == 1_000_000
        assert result.treasuries[TREASURY]["totalFeesDistributedRaw"] == 0

    def test_multiple_rows_same_transaction(self, registry, multi_events):
        """Test receipts and payments from one transaction are kept apart."""
        result = TreasuryIndexer().index(multi_events, registry)

        assert set(result.receipts) == {"0xmulti1-0"}
        assert set(result.payments) == {"0xmulti1-1", "0xmulti1-2"}
        assert result.payments["0xmulti1-2"]["recipient"] == RECIPIENT_2

        treasury = result.treasuries[TREASURY]
        assert treasury["totalFeesReceivedRaw"] == 10_000_000
        assert treasury["totalFeesDistributedRaw"] == 10_000_000
        assert treasury["totalFeesDistributedFormatted"] == "10"
        assert treasury["lastUpdatedAt"] == 3000

    def test_treasury_created_once(self, registry, multi_events):
        """Test the treasury keeps its first createdAt."""
        later = make_event(
            TreasuryEventType.FLOOR_FEE_PAID, "0xlater", 0, 9000, token=USDC, amount=1
        )
        result = TreasuryIndexer().index(multi_events + [later], registry)

        treasury = result.treasuries[TREASURY]
        assert treasury["createdAt"] == 3000
        assert treasury["lastUpdatedAt"] == 9000

    def test_unresolved_market_skipped(self, registry):
        """Test events from unknown modules are skipped with a warning."""
        event = make_event(
            TreasuryEventType.FLOOR_FEE_PAID, "0xfloor1", 0, 2200,
            src=OTHER_MODULE, token=USDC, amount=1,
        )

        result = TreasuryIndexer().index([event], registry)

        assert result.is_empty
        assert result.events_skipped == 1
        assert "Unable to resolve market" in result.warnings[0]

    def test_informational_events(self, registry):
        """Test configuration events are counted but produce no records."""
        events = [
            make_event(TreasuryEventType.RECIPIENT_ADDED, "0xa", 0, 1, account=RECIPIENT_1, shares=50),
            make_event(TreasuryEventType.FLOOR_FEE_PERCENTAGE_UPDATED, "0xb", 0, 2, oldFee=100, newFee=200),
            make_event(TreasuryEventType.RECIPIENTS_CLEARED, "0xc", 0, 3),
        ]

        result = TreasuryIndexer().index(events, registry)

        assert result.informational_events == 3
        assert result.events_processed == 3
        assert result.is_empty

    def test_replayed_event_not_double_counted(self, registry, multi_events):
        """Test that re-indexing the same event is skipped."""
        indexer = TreasuryIndexer()
        result = indexer.index(multi_events, registry)
        result = indexer.index(multi_events[:1], registry, result=result)

        assert result.treasuries[TREASURY]["totalFeesReceivedRaw"] == 10_000_000
        assert result.events_skipped == 1
        assert any("already indexed" in w for w in result.warnings)

    def test_unknown_token_uses_defaults(self, registry):
        """Test tokens missing from the registry default to 18 decimals."""
        token = "0x3333333333333333333333333333333333333333"
        event = make_event(
            TreasuryEventType.FUNDS_RECEIVED, "0xfees1", 0, 2000,
            token=token, sender=SENDER, amount=5 * 10**18,
        )

        result = TreasuryIndexer().index([event], registry)

        assert result.tokens[token]["symbol"] == "UNK"
        assert result.receipts["0xfees1-0"]["amountFormatted"] == "5"
        assert any(token in w for w in result.warnings)

    def test_failing_event_recorded_and_processing_continues(self, registry, multi_events):
        """Test that a broken event becomes an error without stopping the run."""
        broken = make_event(TreasuryEventType.FUNDS_RECEIVED, "0xbad", 0, 1, token=USDC)

        result = TreasuryIndexer().index([broken] + multi_events, registry)

        assert result.has_errors
        assert "0xbad-0" in result.errors[0]
        assert len(result.payments) == 2
        assert result.events_processed == 3


class TestValidation:
    """Tests for DataValidator."""

    def test_valid_ledger(self, registry, multi_events):
        """Test that an indexed ledger validates cleanly."""
        result = TreasuryIndexer().index(multi_events, registry)
        validation = DataValidator().validate(result)

        assert validation.is_valid
        assert validation.errors == []

    def test_total_mismatch_is_error(self, registry, multi_events):
        """Test that tampered totals are reported."""
        result = TreasuryIndexer().index(multi_events, registry)
        result.treasuries[TREASURY] = {
            **result.treasuries[TREASURY],
            "totalFeesReceivedRaw": 1,
        }

        validation = DataValidator().validate(result)

        assert not validation.is_valid
        assert any(i.field.endswith("totalFeesReceivedRaw") for i in validation.errors)

    def test_dangling_treasury_reference(self, registry, multi_events):
        """Test a ledger row pointing at no treasury is an error."""
        result = TreasuryIndexer().index(multi_events, registry)
        del result.treasuries[TREASURY]

        validation = DataValidator(check_quality=False).validate(result)

        assert any("unknown treasury" in i.message for i in validation.errors)

    def test_schema_error(self, registry, multi_events):
        """Test that a malformed record fails schema validation."""
        result = TreasuryIndexer().index(multi_events, registry)
        result.receipts["0xmulti1-0"] = {**result.receipts["0xmulti1-0"], "amountRaw": "ten"}

        validation = DataValidator(check_quality=False).validate(result)

        assert any(i.field.startswith("fee_splitter_receipt[0xmulti1-0]") for i in validation.errors)

    def test_formatted_mismatch_is_warning(self, registry, multi_events):
        """Test an amountFormatted inconsistent with decimals is flagged."""
        result = TreasuryIndexer().index(multi_events, registry)
        result.payments["0xmulti1-1"] = {**result.payments["0xmulti1-1"], "amountFormatted": "5000000"}

        validation = DataValidator().validate(result)

        assert validation.is_valid
        assert any(i.field.endswith("amountFormatted") for i in validation.warnings)

    def test_validate_indexing_without_quality_checks(self, registry, multi_events):
        """Test the convenience function can skip ledger consistency checks."""
        result = TreasuryIndexer().index(multi_events, registry)
        result.treasuries[TREASURY] = {**result.treasuries[TREASURY], "totalFeesReceivedRaw": 1}

        assert validate_indexing(result, check_quality=False).is_valid
        assert not validate_indexing(result).is_valid

    def test_indexing_errors_fail_validation(self):
        """Test that indexing errors are carried into validation."""
        validation = DataValidator().validate(IndexingResult(errors=["boom"]))
        assert not validation.is_valid


class TestWriters:
    """Tests for Parquet and JSON output."""

    def test_schema_lookup(self):
        """Test schema lookup by table name."""
        assert "isFloorFee" in get_schema_for_table("fee_splitter_payment").names
        with pytest.raises(ValueError):
            get_schema_for_table("unknown")

    def test_schema_lookup_by_enum(self):
        """Test schemas can be looked up with TableName members."""
        assert get_schema_for_table(TableName.TOKEN) is get_schema_for_table("token")

    def test_serialize_value(self):
        """Test only ints beyond int64 become strings."""
        assert serialize_value(2**63) == str(2**63)
        assert serialize_value(-(2**63)) == -(2**63)
        assert serialize_value(True) is True
        assert serialize_value(None) is None

    def test_record_to_row_stringifies_raw(self):
        """Test raw amounts become decimal strings for Parquet."""
        row = record_to_row(
            {
                "id": "t1",
                "market_id": "m1",
                "treasuryAddress": "0xabc",
                "totalFeesReceivedRaw": 2**256 - 1,
                "totalFeesReceivedFormatted": "x",
                "totalFeesDistributedRaw": 0,
                "totalFeesDistributedFormatted": "0",
                "createdAt": 1,
                "lastUpdatedAt": 2,
            },
            "treasury",
        )

        assert row["totalFeesReceivedRaw"] == str(2**256 - 1)
        assert row["totalFeesDistributedRaw"] == "0"
        assert row["createdAt"] == 1

    def test_write_parquet_partitioned(self, registry, multi_events, tmp_path):
        """Test Parquet output partitioned by market."""
        result = TreasuryIndexer().index(multi_events, registry)

        paths = write_result_to_parquet(result, tmp_path)

        assert set(paths) == {"treasury", "fee_splitter_receipt", "fee_splitter_payment", "token"}
        payment_path = paths["fee_splitter_payment"][0]
        assert payment_path.parent.name == f"market={MARKET}"

        table = pq.read_table(payment_path)
        assert table.num_rows == 2
        rows = sorted(table.to_pylist(), key=lambda r: r["id"])
        assert rows[0]["amountRaw"] == "5000000"
        assert rows[0]["isFloorFee"] is False

    def test_write_parquet_unpartitioned(self, registry, multi_events, tmp_path):
        """Test Parquet output without partitions."""
        result = TreasuryIndexer().index(multi_events, registry)

        paths = ParquetWriter(tmp_path, partition_by_market=False).write_result(result)

        treasury_path = paths["treasury"][0]
        assert treasury_path == tmp_path / "treasury" / "treasury.parquet"
        row = pq.read_table(treasury_path).to_pylist()[0]
        assert row["totalFeesReceivedRaw"] == "10000000"
        assert row["totalFeesReceivedFormatted"] == "10"

    def test_write_json(self, registry, multi_events, tmp_path):
        """Test JSON output keeps integer amounts."""
        result = TreasuryIndexer().index(multi_events, registry)

        paths = write_result_to_json(result, tmp_path)

        receipts = json.loads(paths["fee_splitter_receipt"].read_text())
        assert receipts[0]["amountRaw"] == 10_000_000
        assert receipts[0]["market_id"] == MARKET

    def test_empty_tables_skipped(self, tmp_path):
        """Test nothing is written for an empty result."""
        assert JSONWriter(tmp_path).write_result(IndexingResult()) == {}
        assert ParquetWriter(tmp_path).write_result(IndexingResult()) == {}

    def test_write_table_unknown_table(self, tmp_path):
        """Test writing an unknown table is rejected."""
        with pytest.raises(ValueError):
            ParquetWriter(tmp_path).write_table("market", [{"id": "m1"}])

    def test_write_table_with_enum_name(self, registry, multi_events, tmp_path):
        """Test table directories use the plain table name."""
        result = TreasuryIndexer().index(multi_events, registry)

        paths = ParquetWriter(tmp_path).write_table(TableName.TOKEN, list(result.tokens.values()))

        assert paths == [tmp_path / "token" / "token.parquet"]


class TestIndexFromFiles:
    """Tests for the file-level convenience function."""

    def test_index_from_files(self, tmp_path):
        """Test parsing and indexing from files in one step."""
        events_path = tmp_path / "events.jsonl"
        lines = [
            {
                "event": "Treasury_FundsReceived",
                "srcAddress": TREASURY,
                "chainId": 31337,
                "block": {"timestamp": 2000},
                "transaction": {"hash": "0xfees1"},
                "logIndex": 0,
                "params": {"token": USDC.lower(), "sender": SENDER, "amount": "10000000"},
            },
            {"event": "Approval"},
        ]
        events_path.write_text("\n".join(json.dumps(line) for line in lines))

        registry_path = tmp_path / "registry.json"
        registry_path.write_text(
            json.dumps({"markets": {TREASURY: MARKET}, "tokens": [{"address": USDC, "decimals": 6}]})
        )

        result = index_from_files(events_path, registry_path)

        assert result.source_file == str(events_path)
        assert result.receipts["0xfees1-0"]["token_id"] == USDC
        assert result.treasuries[TREASURY]["totalFeesReceivedFormatted"] == "10"
        assert any("Approval" in w for w in result.warnings)
        assert "Treasuries: 1" in result.summary()
