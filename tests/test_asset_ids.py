"""Tests for asset id rendering and issuance."""
import pytest

from assetdesk.core.exceptions import NotFoundError
from assetdesk.services.inventory.asset_ids import AssetIdIssuer, has_placeholder, render_asset_id


def test_render_pads_counter_to_run_width():
    assert render_asset_id("A-####", 1) == "A-0001"
    assert render_asset_id("A-####", 42) == "A-0042"


def test_render_never_truncates_wide_counter():
    assert render_asset_id("A-####", 12345) == "A-12345"


def test_render_keeps_prefix_and_suffix():
    assert render_asset_id("IT-##-2024", 7) == "IT-07-2024"


def test_render_without_placeholder_returns_pattern():
    assert render_asset_id("ITEM", 3) == "ITEM"
    assert not has_placeholder("ITEM")


def test_render_substitutes_first_run_only():
    assert render_asset_id("##-##", 5) == "05-##"


def test_issue_advances_counter(store, company):
    issuer = AssetIdIssuer(store)

    first = issuer.issue(company.company.id)
    second = issuer.issue(company.company.id)

    assert first == "A-0001"
    assert second == "A-0002"
    assert store.get_company(company.company.id).current_asset_id == 3


def test_issue_uses_company_pattern(store, company, other_company):
    issuer = AssetIdIssuer(store)

    assert issuer.issue(other_company.company.id) == "GX-001"
    # Counters are per company
    assert issuer.issue(company.company.id) == "A-0001"


def test_issue_unknown_company_raises(store):
    with pytest.raises(NotFoundError):
        AssetIdIssuer(store).issue(9999)


def test_issue_inside_rolled_back_transaction_does_not_consume_counter(store, company):
    issuer = AssetIdIssuer(store)

    with pytest.raises(RuntimeError):
        with store.transaction():
            issuer.issue(company.company.id)
            raise RuntimeError("abort")

    assert issuer.issue(company.company.id) == "A-0001"
