"""Domain-layer error definitions."""

# ============================================================================
#                           General domain errors
# ============================================================================


class DomainError(Exception):
    """Base class for domain-layer errors."""


class MalformedRecordError(DomainError):
    """Raised when a stored element record cannot be interpreted."""

    def __init__(self, reason: str, record: object | None = None) -> None:
        super().__init__(f"Malformed element record: {reason}")
        self.reason = reason
        self.record = record


# ============================================================================
#                        Group/block classification errors
# ============================================================================


class GroupBlockError(DomainError, ValueError):
    """Base class for errors raised while parsing a group/block string."""

    def __init__(self, raw: object, reason: str) -> None:
        super().__init__(f"Invalid group block {raw!r}: {reason}")
        self.raw = raw
        self.reason = reason


class MalformedGroupBlockError(GroupBlockError):
    """Raised when the string does not have the `group <N>, <x>-block` shape."""


class InvalidGroupNumberError(GroupBlockError):
    """Raised when the group is neither `n/a` nor a number in 1..18."""


class InvalidBlockError(GroupBlockError):
    """Raised when the block clause is not one of s/p/d/f/g-block."""


class UnknownGroupSelectorError(DomainError, ValueError):
    """Raised when a listing filter is neither a group label nor a block label."""

    def __init__(self, selector: object) -> None:
        super().__init__(
            f"Invalid group selector {selector!r}: "
            "expected 1..18, 'n/a' or one of s/p/d/f/g-block"
        )
        self.selector = selector


# ============================================================================
#                              Patch errors
# ============================================================================


class InvalidPatchError(DomainError, ValueError):
    """Raised when an element patch violates its invariants."""

    def __init__(self, atomic_number: object, reason: str) -> None:
        super().__init__(f"Invalid patch for element ({atomic_number}): {reason}")
        self.atomic_number = atomic_number
        self.reason = reason
