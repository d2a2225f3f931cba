"""Tests for the activity recorder and feed."""
import pytest

from assetdesk.core.exceptions import ValidationError
from assetdesk.models.models import ActivityAction
from assetdesk.services.inventory import UNKNOWN, ActivityRecorder, build_inventory_service


def test_create_records_added_snapshot(store, company, admin):
    service = build_inventory_service(store, admin)
    dept = company.departments[0]

    item = service.create_item({"department_id": dept.id, "name": "Projector"})

    [entry] = service.list_activity()
    assert entry.action == ActivityAction.ADDED
    assert entry.item_id == item.id
    assert entry.asset_id == item.asset_id
    assert entry.item_name == "Projector"
    assert entry.department_name == "General"
    assert entry.user_id == admin.user_id
    assert entry.user_name == "Acme Corp Admin"


def test_snapshot_survives_rename(store, company, admin):
    service = build_inventory_service(store, admin)
    dept = company.departments[0]
    item = service.create_item({"department_id": dept.id, "name": "Projector"})

    service.rename_department(dept.id, "Facilities")
    service.update_item(item.id, {"name": "Old Projector"})

    entries = service.list_activity()
    assert [e.action for e in entries] == [ActivityAction.UPDATED, ActivityAction.ADDED]
    assert entries[0].department_name == "Facilities"
    assert entries[0].item_name == "Old Projector"
    assert entries[1].department_name == "General"
    assert entries[1].item_name == "Projector"


def test_removed_entry_keeps_item_details(store, company, admin):
    service = build_inventory_service(store, admin)
    item = service.create_item({"department_id": company.departments[0].id, "name": "Desk"})

    service.delete_item(item.id)

    latest = service.list_activity()[0]
    assert latest.action == ActivityAction.REMOVED
    assert latest.asset_id == item.asset_id
    assert latest.item_name == "Desk"
    assert latest.department_name == "General"


def test_unknown_names_fall_back(store, company):
    recorder = ActivityRecorder(store)

    assert recorder.department_name(9999) == UNKNOWN
    assert recorder.user_name(9999) == UNKNOWN


def test_lookup_errors_fall_back(store, company, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("lookup failed")

    monkeypatch.setattr(store, "get_department", boom)

    assert ActivityRecorder(store).department_name(1) == UNKNOWN


def test_feed_is_newest_first_and_limited(store, company, admin):
    service = build_inventory_service(store, admin)
    dept = company.departments[0]
    for i in range(12):
        service.create_item({"department_id": dept.id, "name": f"Chair {i}"})

    default_feed = service.list_activity()
    short_feed = service.list_activity(3)

    assert len(default_feed) == 10
    assert [e.item_name for e in short_feed] == ["Chair 11", "Chair 10", "Chair 9"]


def test_feed_rejects_non_positive_limit(store, company, admin):
    with pytest.raises(ValidationError):
        build_inventory_service(store, admin).list_activity(0)


def test_feed_is_tenant_scoped(store, company, other_company, admin):
    build_inventory_service(store, admin).create_item({"department_id": company.departments[0].id, "name": "Lamp"})

    other_admin_feed = store.list_activity_logs(other_company.company.id)

    assert other_admin_feed == []
