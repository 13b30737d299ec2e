"""OAuth scopes understood by the Rides API."""

from enum import Enum
from typing import FrozenSet, Iterable


class ScopeType(str, Enum):
    """Level of access a scope grants."""

    # Usable without review
    GENERAL = "general"
    # Requires approval before opening to users in production
    PRIVILEGED = "privileged"


class Scope(Enum):
    """A Rides API scope, carrying its access level and bit value."""

    HISTORY = (ScopeType.GENERAL, 1)
    HISTORY_LITE = (ScopeType.GENERAL, 2)
    PAYMENT_METHODS = (ScopeType.GENERAL, 4)
    PLACES = (ScopeType.GENERAL, 8)
    PROFILE = (ScopeType.GENERAL, 16)
    RIDE_WIDGETS = (ScopeType.GENERAL, 32)
    REQUEST = (ScopeType.PRIVILEGED, 64)
    REQUEST_RECEIPT = (ScopeType.PRIVILEGED, 128)
    ALL_TRIPS = (ScopeType.PRIVILEGED, 256)

    def __init__(self, scope_type: ScopeType, bit_value: int) -> None:
        self.scope_type = scope_type
        self.bit_value = bit_value

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, concatenated: str) -> FrozenSet["Scope"]:
        """
        Parse a space-delimited scope string such as ``"profile history"``.

        Names that do not match a documented scope are ignored.
        """
        scopes = set()
        for name in concatenated.split():
            try:
                scopes.add(cls[name.upper()])
            except KeyError:
                continue
        return frozenset(scopes)

    @classmethod
    def from_bits(cls, bits: int) -> FrozenSet["Scope"]:
        """Decode a bit mask built from ``Scope.bit_value``."""
        if bits <= 0:
            return frozenset()
        return frozenset(s for s in cls if bits & s.bit_value == s.bit_value)

    @staticmethod
    def to_standard_string(scopes: Iterable["Scope"]) -> str:
        """Format scopes as the lower-case, space-separated OAuth string."""
        ordered = sorted(set(scopes), key=lambda s: s.bit_value)
        return " ".join(str(s) for s in ordered)
