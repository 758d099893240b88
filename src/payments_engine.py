import logging
import sys
from typing import Dict, Iterable, Optional, Union

from config import EngineSettings
from csv_io import Row, parse_row, read_rows
from errors import RowFormatError, TransactionError, TransactionErrorKind
from ledger import Ledger
from models import ClientAccount, ProcessingStats, Transaction
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)
# Per-row rejections get their own logger so their level can follow report_errors.
REJECTIONS_LOGGER = "payments_engine.rejections"
rejections_logger = logging.getLogger(REJECTIONS_LOGGER)


class PaymentsEngine:
    """
    Drives a transaction feed through the processor, strictly in input order.
    Rejected rows are counted and, if enabled, reported; they never stop the run.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self._settings = settings if settings is not None else EngineSettings()
        self._ledger = Ledger()
        self._processor = TransactionProcessor(self._ledger)
        self._stats = ProcessingStats()

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """
        Process CSV file and return final account states.
        Raises InputReadError if the file can't be read; rows already applied stay applied.
        """
        logger.info(f"Processing {filepath}")
        return self.process_rows(read_rows(filepath))

    def process_rows(self, rows: Iterable[Union[Row, RowFormatError]]) -> Dict[int, ClientAccount]:
        for row_number, row in enumerate(rows, start=1):
            self.process_row(row, row_number)

        if self._stats.processed == 0 and self._settings.report_errors:
            rejections_logger.warning("csv error: table is empty, all rows had errors or columns don't match")

        logger.info(f"Processing complete: {len(self._ledger)} accounts")
        if self._settings.report_summary:
            print(self._stats.summary(), file=sys.stderr)

        return self._ledger.get_all_accounts()

    def process_row(
        self, row: Union[Row, RowFormatError], row_number: Optional[int] = None
    ) -> Optional[TransactionError]:
        """
        Decode and apply one raw row. Returns the rejection, if any.
        `row` may already be a RowFormatError when the reader couldn't split the line.
        """
        try:
            if isinstance(row, RowFormatError):
                raise row
            transaction = parse_row(row)
        except RowFormatError as e:
            context = f"row {row_number}" if row_number else "row"
            if e.row is not None:
                context = f"{context}: {dict(e.row)!r}"
            error = TransactionError(
                TransactionErrorKind.INVALID_TRANSACTION,
                client_id=e.client_id,
                transaction_id=e.transaction_id,
                detail=f"{e} ({context})",
            )
            self._reject(error)
            return error
        return self.process_transaction(transaction)

    def process_transaction(self, transaction: Transaction) -> Optional[TransactionError]:
        error = self._processor.process_transaction(transaction)
        if error is None:
            self._stats.record_success()
        else:
            self._reject(error)
        return error

    def _reject(self, error: TransactionError) -> None:
        self._stats.record_rejection(error.kind.value)
        if self._settings.report_errors:
            rejections_logger.warning(str(error))
