"""Deduplication rules as a tagged variant over the target entity type."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.rule import DeduplicationRule

logger = logging.getLogger(__name__)

ORGANISATION = "organisation"
ACCOUNT = "account"


@dataclass(frozen=True)
class OrganisationRule:
    source_field: str
    target_field: str


@dataclass(frozen=True)
class AccountRule:
    source_field: str
    target_field: str


Rule = Union[OrganisationRule, AccountRule]


@dataclass(frozen=True)
class RuleSet:
    """Rules for one user, partitioned by entity type."""

    organisation: tuple[OrganisationRule, ...] = ()
    account: tuple[AccountRule, ...] = ()

    def __len__(self) -> int:
        return len(self.organisation) + len(self.account)

    @classmethod
    def from_rules(cls, rules: Iterable[Rule]) -> "RuleSet":
        organisation: list[OrganisationRule] = []
        account: list[AccountRule] = []
        for rule in rules:
            if isinstance(rule, OrganisationRule):
                organisation.append(rule)
            elif isinstance(rule, AccountRule):
                account.append(rule)
            else:
                raise TypeError(f"Unsupported rule: {rule!r}")
        return cls(organisation=tuple(organisation), account=tuple(account))


def to_rule(row: DeduplicationRule) -> Rule | None:
    """Convert a stored rule; ``None`` for unknown entity types."""
    entity_type = (row.entity_type or "").strip().lower()
    if entity_type == ORGANISATION:
        return OrganisationRule(source_field=row.gong_field, target_field=row.velaris_field)
    if entity_type == ACCOUNT:
        return AccountRule(source_field=row.gong_field, target_field=row.velaris_field)
    logger.warning("Ignoring deduplication rule %s with unknown entity type %r", row.id, row.entity_type)
    return None


async def rules_for(db: AsyncSession, user_id: str) -> RuleSet:
    """Load a user's rules. Identical rules are kept; each runs its own search."""
    stmt = (
        select(DeduplicationRule)
        .where(DeduplicationRule.user_id == user_id)
        .order_by(DeduplicationRule.created_at.asc())
    )
    rows = (await db.execute(stmt)).scalars().all()
    return RuleSet.from_rules(r for r in (to_rule(row) for row in rows) if r is not None)
