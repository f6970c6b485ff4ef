"""Unified error codes and custom exceptions.

Error code ranges:
  6xxx: Indexing (correlation, references, collaborators)
  9xxx: System

Every indexing error is fatal to the event being processed: it propagates to
the driver, which rolls back the batch.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 6xxx: Indexing ---

class MissingCorrelationError(AppError):
    def __init__(self, correlation_key: str, position: str, detail: str) -> None:
        self.correlation_key = correlation_key
        self.position = position
        super().__init__(
            6001,
            f"{detail}: correlation key {correlation_key} (intent at {position})",
            422,
        )


class MissingReferenceError(AppError):
    def __init__(self, kind: str, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(6002, f"{kind} not found: {entity_id}", 500)


class DuplicateCorrelationKeyError(AppError):
    def __init__(self, correlation_key: str, open_order_id: str) -> None:
        super().__init__(
            6003,
            f"Correlation key {correlation_key} already used by open order {open_order_id}",
            409,
        )


class InvalidOrderTransitionError(AppError):
    def __init__(self, correlation_key: str, status: str, action: str) -> None:
        super().__init__(
            6004,
            f"Auction order {correlation_key} in status {status} cannot be {action}",
            422,
        )


class UnsupportedEventError(AppError):
    def __init__(self, event_type: str) -> None:
        super().__init__(6005, f"No handler for event type: {event_type}", 422)


class ContractReadError(AppError):
    def __init__(self, address: str, detail: str) -> None:
        super().__init__(6006, f"Contract read failed for {address}: {detail}", 502)


class LedgerMismatchError(AppError):
    def __init__(self, user_id: str, portfolio_id: str) -> None:
        super().__init__(
            6007, f"Portfolio {portfolio_id} does not belong to user {user_id}", 500
        )


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
