from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class PoolNotFoundError(DomainError):
    """Requested pool is not registered."""


class PoolMetricsNotFoundError(DomainError):
    """Pool exists but has no metrics."""


class PoolInputError(DomainError):
    """Invalid parameters for a pool operation."""


class ReserveInputError(DomainError):
    """Reserve values could not be parsed."""


class RebalanceInputError(DomainError):
    """Invalid parameters for a rebalance estimate or execution."""


class RebalancePreconditionError(DomainError):
    """Rebalance cannot run right now (gas limit, cooldown, already balanced)."""


class RebalanceExecutionError(DomainError):
    """The rebalance transaction was rejected by the node or the contract."""


class TransactionNotFoundError(DomainError):
    """Transaction is unknown locally or on chain."""


class SwapInputError(DomainError):
    """Invalid parameters for swap quote or execution."""


class TokenInputError(DomainError):
    """Invalid parameters for token lookup or search."""


class TokenNotFoundError(DomainError):
    """No token contract at the given address."""


class ContractCallError(DomainError):
    """RPC or contract read failed."""


class ContractNotDeployedError(DomainError):
    """Address has no bytecode."""


class InvalidAddressError(DomainError):
    """Value is not a valid hex account or contract address."""


class AggregatorError(DomainError):
    """External swap aggregator is unavailable or returned an error."""


class SnapshotUnavailableError(DomainError):
    """Registry snapshot persistence is not configured."""
