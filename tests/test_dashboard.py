"""Tests for dashboard figures."""
import datetime as dt

from assetdesk.models.models import ItemStatus
from assetdesk.services.inventory import build_inventory_service
from assetdesk.services.inventory.dashboard_service import month_start


def test_month_start_is_utc_midnight_on_the_first():
    now = dt.datetime(2024, 3, 17, 15, 30, tzinfo=dt.timezone(dt.timedelta(hours=-5)))

    assert month_start(now) == dt.datetime(2024, 3, 1, tzinfo=dt.timezone.utc)


def test_month_start_treats_naive_as_utc():
    assert month_start(dt.datetime(2024, 12, 31, 23, 59)) == dt.datetime(2024, 12, 1, tzinfo=dt.timezone.utc)


def test_summary_for_admin(store, company, admin):
    service = build_inventory_service(store, admin)
    general = company.departments[0]
    lab = service.create_department({"name": "Lab"})
    service.create_item({"department_id": general.id, "name": "Toner", "status": ItemStatus.LOW})
    service.create_item({"department_id": general.id, "name": "Paper"})
    service.create_item({"department_id": lab.id, "name": "Beaker"})

    summary = service.get_dashboard_summary()

    assert summary.total_items == 3
    assert summary.items_added_this_month == 3
    assert summary.low_stock_items == 1
    assert summary.department_count == 2
    assert len(summary.recent_activity) == 3
    stats = {s.name: (s.item_count, s.capacity_used) for s in summary.department_stats}
    assert stats == {"General": (2, 20), "Lab": (1, 10)}


def test_items_added_this_month_uses_month_boundary(store, company, admin):
    service = build_inventory_service(store, admin)
    service.create_item({"department_id": company.departments[0].id, "name": "Chair"})
    next_year = dt.datetime.now(dt.timezone.utc) + dt.timedelta(days=400)

    summary = service.get_dashboard_summary(now=next_year)

    assert summary.total_items == 1
    assert summary.items_added_this_month == 0


def test_recent_activity_is_capped(store, company, admin):
    service = build_inventory_service(store, admin)
    for i in range(8):
        service.create_item({"department_id": company.departments[0].id, "name": f"Box {i}"})

    assert len(service.get_dashboard_summary().recent_activity) == 5


def test_employee_summary_is_scoped(store, company, admin, make_employee):
    admin_service = build_inventory_service(store, admin)
    general = company.departments[0]
    lab = admin_service.create_department({"name": "Lab"})
    admin_service.create_item({"department_id": general.id, "name": "Pen"})
    admin_service.create_item({"department_id": lab.id, "name": "Flask"})
    employee = make_employee(company.company.id, [general.id])

    summary = build_inventory_service(store, employee).get_dashboard_summary()

    assert summary.total_items == 1
    assert summary.department_count == 1
    assert [s.name for s in summary.department_stats] == ["General"]
    # The activity feed is company-wide
    assert len(summary.recent_activity) == 2
