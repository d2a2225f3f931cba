"""
Asset ID issuance.

A company's ``asset_id_pattern`` holds a run of ``#`` characters that is
replaced by the company's asset counter, zero-padded to the run's length:

    render_asset_id("A-####", 7)      -> "A-0007"
    render_asset_id("A-####", 12345)  -> "A-12345"   (never truncated)
    render_asset_id("ITEM", 3)        -> "ITEM"      (no placeholder run)

Only the first run is substituted; any later run stays literal.
"""
from __future__ import annotations

import logging
import re

from assetdesk.core.exceptions import NotFoundError
from assetdesk.store.base import EntityStore

logger = logging.getLogger(__name__)

PLACEHOLDER = "#"
_PLACEHOLDER_RUN = re.compile(re.escape(PLACEHOLDER) + "+")


def has_placeholder(pattern: str) -> bool:
    return _PLACEHOLDER_RUN.search(pattern) is not None


def render_asset_id(pattern: str, counter: int) -> str:
    match = _PLACEHOLDER_RUN.search(pattern)
    if match is None:
        return pattern
    width = match.end() - match.start()
    return f"{pattern[:match.start()]}{counter:0{width}d}{pattern[match.end():]}"


class AssetIdIssuer:
    """Turns a company's counter into the next asset id and advances the counter.

    Call ``issue`` inside the same store transaction that inserts the item, so
    a rolled-back creation never commits a consumed counter value.
    """

    def __init__(self, store: EntityStore):
        self._store = store

    def issue(self, company_id: int) -> str:
        company = self._store.get_company(company_id)
        if not company:
            raise NotFoundError("Company", company_id)
        counter = self._store.increment_asset_counter(company_id)
        asset_id = render_asset_id(company.asset_id_pattern, counter)
        if not has_placeholder(company.asset_id_pattern):
            logger.warning(
                "Company %s asset pattern '%s' has no placeholder; issuing literal id",
                company_id,
                company.asset_id_pattern,
            )
        logger.debug("Issued asset id %s for company %s (counter=%s)", asset_id, company_id, counter)
        return asset_id
