"""Resolve Velaris organisations, accounts, contacts and users for a call.

Every lookup is read-only, so all of them run concurrently. A failed lookup
degrades to "no matches" for that lookup; it never fails the call.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Mapping

import httpx

from ..api.velaris import VelarisClient
from ..config import settings
from .field_extractor import extract, participant_emails
from .rules import AccountRule, OrganisationRule, RuleSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedLinks:
    organisation_ids: frozenset[str] = frozenset()
    account_ids: frozenset[str] = frozenset()
    contact_ids: frozenset[str] = frozenset()
    user_ids: frozenset[str] = frozenset()


def entity_ids(entities: Iterable[Any]) -> set[str]:
    """Collect non-blank ``id`` values as strings."""
    ids: set[str] = set()
    for entity in entities:
        if not isinstance(entity, Mapping):
            continue
        raw = entity.get("id")
        if raw is None or isinstance(raw, bool):
            continue
        value = str(raw).strip()
        if value:
            ids.add(value)
    return ids


class EntityResolver:
    """Runs the per-rule searches and email batch reads for one call."""

    def __init__(
        self,
        velaris: VelarisClient,
        rules: RuleSet,
        max_concurrency: int | None = None,
    ):
        self._velaris = velaris
        self._rules = rules
        self._semaphore = asyncio.Semaphore(max(1, max_concurrency or settings.resolver_max_concurrency))

    async def _lookup(
        self,
        label: str,
        fetch: Callable[[], Awaitable[list[dict[str, Any]]]],
    ) -> set[str]:
        async with self._semaphore:
            try:
                return entity_ids(await fetch())
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning("Velaris %s lookup failed, treating as no matches: %s", label, exc)
                return set()

    def _rule_lookup(self, rule: OrganisationRule | AccountRule, call: Mapping[str, Any]):
        value = extract(call, rule.source_field)
        if value is None:
            return None

        if isinstance(rule, OrganisationRule):
            search = self._velaris.search_organisations
            label = f"organisation search ({rule.target_field})"
        else:
            search = self._velaris.search_accounts
            label = f"account search ({rule.target_field})"
        return self._lookup(label, lambda: search(rule.target_field, value))

    async def resolve(self, call: Mapping[str, Any]) -> ResolvedLinks:
        org_lookups = [
            lookup
            for lookup in (self._rule_lookup(rule, call) for rule in self._rules.organisation)
            if lookup is not None
        ]
        account_lookups = [
            lookup
            for lookup in (self._rule_lookup(rule, call) for rule in self._rules.account)
            if lookup is not None
        ]

        emails = participant_emails(call)
        email_lookups = []
        if emails:
            email_lookups = [
                self._lookup("contact batch read", lambda: self._velaris.read_contacts_by_email(emails)),
                self._lookup("user batch read", lambda: self._velaris.read_users_by_email(emails)),
            ]

        results = await asyncio.gather(*org_lookups, *account_lookups, *email_lookups)

        org_results = results[: len(org_lookups)]
        account_results = results[len(org_lookups) : len(org_lookups) + len(account_lookups)]
        email_results = results[len(org_lookups) + len(account_lookups) :]
        contact_ids, user_ids = email_results if email_results else (set(), set())

        return ResolvedLinks(
            organisation_ids=frozenset().union(*org_results),
            account_ids=frozenset().union(*account_results),
            contact_ids=frozenset(contact_ids),
            user_ids=frozenset(user_ids),
        )
