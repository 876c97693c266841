# schednet_core/exceptions.py

class DomainError(Exception):
    """Base class for domain-level errors."""
    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when data is invalid or violates constraints."""


class NotFoundError(DomainError):
    """Raised when an entity is not found."""


class BusinessRuleError(DomainError):
    """Raised when business rules are violated (e.g., circular dependencies)."""


class ConcurrencyError(DomainError):
    """Raised when optimistic locking detects a stale update."""


class SchedulingTimeoutError(DomainError):
    """Raised when a propagation or critical-path pass exceeds its wall-clock budget."""


# ---------- Task dates ----------

class InvalidDateRangeError(ValidationError):
    """End before start, or a milestone whose start and end differ."""


# ---------- Hierarchy ----------

class CircularHierarchyError(BusinessRuleError):
    """Reparenting would make a task its own ancestor."""


# ---------- Dependency graph ----------

class SelfDependencyError(ValidationError):
    """A task cannot depend on itself."""


class DuplicateDependencyError(ValidationError):
    """The ordered (predecessor, successor) pair already has an edge."""


class CyclicDependencyError(BusinessRuleError):
    """Adding the edge would close a cycle in the precedence graph."""


class ScheduleIntegrityError(BusinessRuleError):
    """Persisted data is corrupted (pre-existing cycle or broken parent chain)."""


# ---------- Lookups ----------

class UnknownScheduleError(NotFoundError):
    """Schedule id not found."""


class UnknownTaskError(NotFoundError):
    """Task id not found in the current schedule scope."""


class UnknownDependencyError(NotFoundError):
    """Dependency id not found in the current schedule scope."""
