"""Exceptions raised when a caller breaks the rulebook contract.

User-facing problems (an overspent point buy, an unmet feat prerequisite)
are reported as violations in a result model instead.
"""


class RulesError(Exception):
    """Base class for rule engine errors."""


class UnknownReferenceError(RulesError, KeyError):
    """A race, class, feat, skill, item, spell or monster key is not in the rulebook."""

    def __init__(self, kind: str, key: str) -> None:
        super().__init__(f"Unknown {kind}: '{key}'")
        self.kind = kind
        self.key = key

    def __str__(self) -> str:
        return self.args[0]


class OutOfRangeError(RulesError, ValueError):
    """A value falls outside the domain of the table it is looked up in."""


class InsufficientPointsError(RulesError):
    """Not enough skill points to buy the requested ranks."""


class RankCapExceededError(RulesError):
    """Requested ranks exceed the per-level maximum for the skill."""
