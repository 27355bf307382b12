"""Modal context of a statement builder."""

from dataclasses import dataclass, replace
from typing import Optional

from sqlbits.constants import DEFAULT_PARAM_OPERATOR, DEFAULT_PARAM_PREFIX, OPERATOR_NOT_EQUAL

__all__ = ("BuilderState", "membership_operator", "normalize_operator")


@dataclass
class BuilderState:
    """Context consulted by the next parameter-binding call.

    Attributes:
        prefix: "Glue" written before the next bound fragment, e.g. ``" WHERE "`` or ``" AND "``.
        operator: Comparison used by the next binding, e.g. ``"="``, ``" LIKE "``.
        null_mode: True while appending filter predicates; an absent value then
            renders ``IS [NOT] NULL`` instead of a placeholder.
    """

    prefix: str = DEFAULT_PARAM_PREFIX
    operator: str = DEFAULT_PARAM_OPERATOR
    null_mode: bool = False

    def copy(self) -> "BuilderState":
        return replace(self)


def normalize_operator(operator: str) -> str:
    """Replace the non-standard ``!=`` with ``<>``."""
    return operator.replace("!=", OPERATOR_NOT_EQUAL)


def membership_operator(operator: str) -> Optional[str]:
    """Map an equality operator to its set-membership form.

    Returns:
        ``" IN "`` for ``=``, ``" NOT IN "`` for ``<>``, None for anything else.
    """
    stripped = operator.strip()
    if stripped == "=":
        return " IN "
    if stripped == OPERATOR_NOT_EQUAL:
        return " NOT IN "
    return None
