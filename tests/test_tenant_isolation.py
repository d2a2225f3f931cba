"""Cross-tenant access is indistinguishable from a missing row."""
import pytest

from assetdesk.core.exceptions import NotFoundError
from assetdesk.core.rbac import resolve_identity
from assetdesk.services.company_service import CompanyService
from assetdesk.services.inventory import build_inventory_service


@pytest.fixture
def foreign_item(store, other_company):
    identity = resolve_identity(store, other_company.admin.id)
    service = build_inventory_service(store, identity)
    return service.create_item({"department_id": other_company.departments[0].id, "name": "Globex Secret"})


def test_get_foreign_item(store, admin, foreign_item):
    with pytest.raises(NotFoundError) as exc:
        build_inventory_service(store, admin).get_item(foreign_item.id)

    assert exc.value.message == "Item not found"


def test_update_foreign_item_leaves_it_untouched(store, admin, foreign_item):
    with pytest.raises(NotFoundError):
        build_inventory_service(store, admin).update_item(foreign_item.id, {"name": "Pwned"})

    assert store.get_item(foreign_item.id).name == "Globex Secret"


def test_delete_foreign_item(store, admin, foreign_item):
    with pytest.raises(NotFoundError):
        build_inventory_service(store, admin).delete_item(foreign_item.id)

    assert store.get_item(foreign_item.id) is not None


def test_create_in_foreign_department(store, admin, other_company):
    with pytest.raises(NotFoundError):
        build_inventory_service(store, admin).create_item(
            {"department_id": other_company.departments[0].id, "name": "Trojan"}
        )

    assert store.list_items(admin.company_id) == []


def test_transfer_into_foreign_department(store, company, admin, other_company):
    service = build_inventory_service(store, admin)
    item = service.create_item({"department_id": company.departments[0].id, "name": "Laptop"})

    with pytest.raises(NotFoundError):
        service.update_item(item.id, {"department_id": other_company.departments[0].id})

    assert store.get_department(other_company.departments[0].id).item_count == 0


def test_foreign_department_reads(store, admin, other_company):
    service = build_inventory_service(store, admin)
    foreign = other_company.departments[0].id

    with pytest.raises(NotFoundError):
        service.get_department(foreign)
    with pytest.raises(NotFoundError):
        service.rename_department(foreign, "Mine now")
    with pytest.raises(NotFoundError):
        service.list_items(foreign)


def test_listings_never_include_foreign_rows(store, admin, foreign_item):
    service = build_inventory_service(store, admin)

    assert foreign_item.id not in {i.id for i in service.list_items()}
    assert all(d.company_id == admin.company_id for d in service.list_departments())
    assert service.list_activity() == []
    assert service.get_dashboard_summary().total_items == 0


def test_assign_foreign_user(store, admin, other_company):
    with pytest.raises(NotFoundError):
        CompanyService(store, admin).assign_user_to_department(other_company.admin.id, 1)
