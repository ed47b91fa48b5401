"""
Constraints - Restrictions on manual edits, enforced only when a rule needs them.

Each constraint lists the automation rules that depend on it. A constraint
is required iff its list is non-empty and at least one listed rule is
enabled. Both lists are currently empty, so every manual edit is allowed;
new rule ids only need to be added to CONSTRAINT_DEPENDENCIES.

Validation here is advisory: callers get an EditValidation with a reason
to show the user, never an exception.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, TYPE_CHECKING

from .marks import CellMark, SETTLED_PRIMARIES

if TYPE_CHECKING:
    from ..config.settings import AutoRulesConfig


class AutoRuleId(Enum):
    """Toggleable automation rules."""
    ROW_ELIMINATION = "rowElimination"
    LAST_MAYBE_DEDUCTION = "lastMaybeDeduction"


class ConstraintId(Enum):
    """Restrictions that may apply to manual edits."""
    NUMBERS_ONLY_ON_EMPTY_OR_BARS = "numbersOnlyOnEmptyOrBars"
    NUMBER_TOGGLE_REMOVES_FROM_COLUMN = "numberToggleRemovesFromColumn"


ConstraintDependencies = Mapping[ConstraintId, tuple[AutoRuleId, ...]]

CONSTRAINT_DEPENDENCIES: ConstraintDependencies = {
    ConstraintId.NUMBERS_ONLY_ON_EMPTY_OR_BARS: (),
    ConstraintId.NUMBER_TOGGLE_REMOVES_FROM_COLUMN: (),
}

NUMBERS_ONLY_ON_EMPTY_OR_BARS_REASON = (
    "Maybe markers can only be added to empty or colored bar cells. "
    "Clear this cell first, or mark it with color bars."
)


def is_constraint_required(
    constraint_id: ConstraintId,
    rules: AutoRulesConfig,
    dependencies: ConstraintDependencies = CONSTRAINT_DEPENDENCIES,
) -> bool:
    dependents = dependencies.get(constraint_id, ())
    return any(rules.is_enabled(rule_id) for rule_id in dependents)


@dataclass(frozen=True)
class EditValidation:
    """Allow/deny decision for a proposed manual edit."""
    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> EditValidation:
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> EditValidation:
        return cls(allowed=False, reason=reason)


@dataclass
class EditValidator:
    """
    Validates manual edits against the currently required constraints.

    HAS, NOT and bar toggles are always allowed (numbers are preserved).
    Number toggles depend on the constraint graph.
    """
    rules: AutoRulesConfig
    dependencies: ConstraintDependencies = field(
        default_factory=lambda: dict(CONSTRAINT_DEPENDENCIES)
    )

    def requires(self, constraint_id: ConstraintId) -> bool:
        return is_constraint_required(constraint_id, self.rules, self.dependencies)

    def can_mark_has(self, mark: CellMark) -> EditValidation:
        return EditValidation.allow()

    def can_mark_not(self, mark: CellMark) -> EditValidation:
        return EditValidation.allow()

    def can_toggle_bar(self, mark: CellMark, color: int) -> EditValidation:
        return EditValidation.allow()

    def can_toggle_number(self, mark: CellMark, num: int) -> EditValidation:
        is_adding = num not in mark.numbers
        if (
            is_adding
            and mark.primary in SETTLED_PRIMARIES
            and self.requires(ConstraintId.NUMBERS_ONLY_ON_EMPTY_OR_BARS)
        ):
            return EditValidation.deny(NUMBERS_ONLY_ON_EMPTY_OR_BARS_REASON)
        # Removal is always allowed
        return EditValidation.allow()

    def number_removal_clears_column(self) -> bool:
        """Whether removing a number strips it from the whole column."""
        return self.requires(ConstraintId.NUMBER_TOGGLE_REMOVES_FROM_COLUMN)
