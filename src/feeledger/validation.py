"""
Validation utilities for indexed ledger data.

Provides schema validation, cross-reference checks, and ledger consistency
validation.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import ValidationError

from feeledger.enums import TableName
from feeledger.models import FeeSplitterPayment, FeeSplitterReceipt, LedgerModel, Token, Treasury
from feeledger.tools import format_amount
from feeledger.workflow import IndexingResult

logger = logging.getLogger(__name__)


@dataclass
class ValidationIssue:
    """A single validation issue."""

    field: str
    message: str
    severity: str  # "error", "warning", "info"
    value: Optional[Any] = None


@dataclass
class ValidationResult:
    """Result of validating indexed data."""

    is_valid: bool
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        """Get only error-level issues."""
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[ValidationIssue]:
        """Get only warning-level issues."""
        return [i for i in self.issues if i.severity == "warning"]

    def add_error(self, field: str, message: str, value: Any = None) -> None:
        """Add an error issue."""
        self.issues.append(
            ValidationIssue(field=field, message=message, severity="error", value=value)
        )
        self.is_valid = False

    def add_warning(self, field: str, message: str, value: Any = None) -> None:
        """Add a warning issue."""
        self.issues.append(
            ValidationIssue(field=field, message=message, severity="warning", value=value)
        )

    def add_info(self, field: str, message: str, value: Any = None) -> None:
        """Add an info issue."""
        self.issues.append(
            ValidationIssue(field=field, message=message, severity="info", value=value)
        )


class DataValidator:
    """
    Validates indexed ledger data against schema and consistency rules.

    Validation levels:
    1. Schema validation - Pydantic model validation of every record
    2. Cross-reference validation - Ledger rows point at known treasuries/tokens
    3. Ledger quality validation - Treasury totals match their ledger rows

    Usage:
        validator = DataValidator()
        result = validator.validate(indexing_result)

        if result.is_valid:
            print("Validation passed!")
        else:
            for issue in result.errors:
                print(f"ERROR: {issue.field}: {issue.message}")
    """

    def __init__(self, check_quality: bool = True):
        """
        Initialize the validator.

        Args:
            check_quality: Whether to run ledger consistency checks
        """
        self.check_quality = check_quality

    def validate(self, indexed: IndexingResult) -> ValidationResult:
        """
        Validate an indexing result.

        Args:
            indexed: The indexing result to validate

        Returns:
            ValidationResult with issues found
        """
        result = ValidationResult(is_valid=True)

        # Check for indexing errors first
        for error in indexed.errors:
            result.add_error("indexing", error)

        for warning in indexed.warnings:
            result.add_warning("indexing", warning)

        # Schema validation
        for table_name, records, model in (
            (TableName.TREASURY, indexed.treasuries, Treasury),
            (TableName.FEE_SPLITTER_RECEIPT, indexed.receipts, FeeSplitterReceipt),
            (TableName.FEE_SPLITTER_PAYMENT, indexed.payments, FeeSplitterPayment),
            (TableName.TOKEN, indexed.tokens, Token),
        ):
            self._validate_schema(table_name.value, records, model, result)

        # Cross-reference validation
        self._validate_cross_references(indexed, result)

        # Ledger quality checks
        if self.check_quality:
            self._validate_totals(indexed, result)
            self._validate_amounts(indexed, result)

        if indexed.is_empty:
            result.add_info("indexing", "No ledger records were produced")

        return result

    def _validate_schema(
        self,
        table_name: str,
        records: dict[str, dict[str, Any]],
        model: type[LedgerModel],
        result: ValidationResult,
    ) -> None:
        """Validate every record of a table against its model."""
        for record_id, record in records.items():
            try:
                model.model_validate(record)
            except ValidationError as e:
                for err in e.errors():
                    location = ".".join(str(part) for part in err["loc"])
                    result.add_error(
                        f"{table_name}[{record_id}].{location}",
                        err["msg"],
                        err.get("input"),
                    )

    def _validate_cross_references(
        self, indexed: IndexingResult, result: ValidationResult
    ) -> None:
        """Validate references from ledger rows to treasuries and tokens."""
        for table_name, rows in (
            (TableName.FEE_SPLITTER_RECEIPT.value, indexed.receipts),
            (TableName.FEE_SPLITTER_PAYMENT.value, indexed.payments),
        ):
            for row_id, row in rows.items():
                treasury = indexed.treasuries.get(row.get("treasury_id"))
                if treasury is None:
                    result.add_error(
                        f"{table_name}[{row_id}].treasury_id",
                        "References an unknown treasury",
                        row.get("treasury_id"),
                    )
                elif treasury["market_id"] != row.get("market_id"):
                    result.add_error(
                        f"{table_name}[{row_id}].market_id",
                        f"Market differs from treasury market {treasury['market_id']}",
                        row.get("market_id"),
                    )

                if row.get("token_id") not in indexed.tokens:
                    result.add_warning(
                        f"{table_name}[{row_id}].token_id",
                        "References an unknown token",
                        row.get("token_id"),
                    )

    def _validate_totals(self, indexed: IndexingResult, result: ValidationResult) -> None:
        """Check treasury totals against the sums of their ledger rows."""
        received: dict[str, int] = defaultdict(int)
        distributed: dict[str, int] = defaultdict(int)

        for receipt in indexed.receipts.values():
            received[receipt["treasury_id"]] += receipt["amountRaw"]

        for payment in indexed.payments.values():
            # Floor fees are paid into the treasury itself
            if payment["isFloorFee"]:
                received[payment["treasury_id"]] += payment["amountRaw"]
            else:
                distributed[payment["treasury_id"]] += payment["amountRaw"]

        for treasury_id, treasury in indexed.treasuries.items():
            if treasury["totalFeesReceivedRaw"] != received[treasury_id]:
                result.add_error(
                    f"treasury[{treasury_id}].totalFeesReceivedRaw",
                    f"Total {treasury['totalFeesReceivedRaw']} does not match "
                    f"ledger sum {received[treasury_id]}",
                )

            if treasury["totalFeesDistributedRaw"] != distributed[treasury_id]:
                result.add_error(
                    f"treasury[{treasury_id}].totalFeesDistributedRaw",
                    f"Total {treasury['totalFeesDistributedRaw']} does not match "
                    f"ledger sum {distributed[treasury_id]}",
                )

            if treasury["totalFeesDistributedRaw"] > treasury["totalFeesReceivedRaw"]:
                result.add_warning(
                    f"treasury[{treasury_id}]",
                    "Distributed more fees than received (events before indexing start?)",
                )

    def _validate_amounts(self, indexed: IndexingResult, result: ValidationResult) -> None:
        """Check amount rendering and flag zero-value rows."""
        for table_name, rows in (
            (TableName.FEE_SPLITTER_RECEIPT.value, indexed.receipts),
            (TableName.FEE_SPLITTER_PAYMENT.value, indexed.payments),
        ):
            for row_id, row in rows.items():
                if row.get("amountRaw") == 0:
                    result.add_warning(f"{table_name}[{row_id}].amountRaw", "Zero amount")

                token = indexed.tokens.get(row.get("token_id"))
                if token is None or not isinstance(row.get("amountRaw"), int):
                    continue

                expected = format_amount(row["amountRaw"], token["decimals"]).formatted
                if row.get("amountFormatted") != expected:
                    result.add_warning(
                        f"{table_name}[{row_id}].amountFormatted",
                        f"Expected '{expected}' for {token['decimals']} decimals",
                        row.get("amountFormatted"),
                    )


def validate_indexing(indexed: IndexingResult, check_quality: bool = True) -> ValidationResult:
    """
    Convenience function to validate an indexing result.

    Args:
        indexed: The indexing result to validate
        check_quality: Whether to run ledger consistency checks

    Returns:
        ValidationResult with issues found
    """
    validator = DataValidator(check_quality=check_quality)
    return validator.validate(indexed)
