"""
Request Router

Entry point for the transport layer. Raw request parameters are parsed
into a typed command, dispatched to the ledger core, and the outcome is
rendered as a payload with `status: "success" | "error"`.

Every ledger error stops here: callers only ever see a message string.
"""

from typing import Any, Mapping, Optional

from monthly_ledger.config import get_settings
from monthly_ledger.ledger import (
    AggregateEngine,
    BatchQueryService,
    InvalidParameters,
    LedgerError,
    OperationFailed,
    PartitionNotFound,
    PartitionStore,
    TimestampNormalizer,
    TransactionRepository,
)
from monthly_ledger.log import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    create_correlation_id,
    get_logger,
)
from monthly_ledger.models import (
    AddEntryCommand,
    CommandError,
    DeleteCommand,
    GetAllDataCommand,
    GetStatsCommand,
    GetTotalsCommand,
    GetTransactionsCommand,
    LedgerResponse,
    MessageResponse,
    PartitionLayout,
    UpdateBudgetCommand,
    UpdateCommand,
    as_number,
    parse_command,
    parse_entry_body,
)
from monthly_ledger.services.storage import (
    GoogleSheetsLedgerBackend,
    InMemoryLedgerBackend,
    LedgerBackend,
    PartitionHandle,
    StorageError,
)


class RequestRouter:
    """
    Maps commands onto ledger operations.
    
    All collaborators are passed in; the router holds no global store
    handle.
    """
    
    def __init__(
        self,
        partitions: PartitionStore,
        repository: TransactionRepository,
        queries: BatchQueryService,
    ):
        self._partitions = partitions
        self._repository = repository
        self._queries = queries
        self._logger = get_logger(__name__)
    
    def handle(self, params: Mapping[str, Any]) -> dict:
        """Handle an action request (query-string style parameters)."""
        action = str(params.get("action") or "default")
        return self._run(action, lambda: parse_command(params))
    
    def handle_entry(self, body: Mapping[str, Any]) -> dict:
        """Handle the JSON write path; always appends."""
        return self._run("addEntry", lambda: parse_entry_body(body))
    
    def _run(self, action: str, parse) -> dict:
        bind_request_context(create_correlation_id(), action)
        try:
            try:
                command = parse()
            except CommandError as e:
                raise InvalidParameters(str(e))
            return self.dispatch(command).to_payload()
        except LedgerError as e:
            self._logger.warning("request_failed", error_type=type(e).__name__, error=e.message)
            return MessageResponse.error(e.message).to_payload()
        except StorageError as e:
            self._logger.error("storage_failed", error=str(e))
            return MessageResponse.error(f"Operation failed: {e}").to_payload()
        except Exception as e:
            self._logger.exception("unexpected_failure")
            return MessageResponse.error(f"Operation failed: {e}").to_payload()
        finally:
            clear_request_context()
    
    def dispatch(self, command) -> LedgerResponse:
        """
        Execute a parsed command.
        
        Raises:
            LedgerError: any ledger failure, for the caller to render
        """
        if isinstance(command, GetAllDataCommand):
            return self._queries.get_all_data(command.key)
        if isinstance(command, GetTransactionsCommand):
            return self._queries.get_transactions(command.key)
        if isinstance(command, GetStatsCommand):
            return self._queries.get_stats(command.key)
        if isinstance(command, GetTotalsCommand):
            return self._queries.get_totals(command.key)
        
        if isinstance(command, AddEntryCommand):
            result = self._repository.add(command.fields)
            return MessageResponse(message=result.message)
        
        if isinstance(command, UpdateCommand):
            partition = self._require_partition(command.sheet_name)
            result = self._repository.update_at(partition, command.row, command.fields)
            return MessageResponse(message=result.message)
        
        if isinstance(command, DeleteCommand):
            partition = self._require_partition(command.sheet_name)
            result = self._repository.delete_at(partition, command.row)
            return MessageResponse(message=result.message)
        
        if isinstance(command, UpdateBudgetCommand):
            self._partitions.set_budget(command.key, command.budget)
            return MessageResponse(
                message=f"Budget updated to {as_number(command.budget)}"
            )
        
        raise InvalidParameters(f"Unsupported command: {type(command).__name__}")
    
    def _require_partition(self, name: str) -> PartitionHandle:
        partition = self._partitions.get_by_name(name)
        if partition is None:
            raise PartitionNotFound(name)
        return partition


def create_app_components(
    backend: Optional[LedgerBackend] = None,
) -> RequestRouter:
    """
    Factory function to wire the ledger together.
    
    Args:
        backend: Backing store to use. When None, the backend named in
                 LEDGER_BACKEND is built (Google Sheets by default).
    
    Returns:
        A ready RequestRouter
    """
    ledger_settings = get_settings().ledger
    configure_logging(ledger_settings.log_level)
    
    if backend is None:
        if ledger_settings.backend == "memory":
            backend = InMemoryLedgerBackend()
        else:
            try:
                backend = GoogleSheetsLedgerBackend()
            except Exception as e:
                raise OperationFailed(f"Storage not configured: {e}")
    
    layout = PartitionLayout(default_budget=ledger_settings.default_budget)
    normalizer = TimestampNormalizer()
    partitions = PartitionStore(backend, layout)
    repository = TransactionRepository(partitions, normalizer)
    queries = BatchQueryService(partitions, repository, AggregateEngine(layout.categories))
    
    return RequestRouter(partitions, repository, queries)
