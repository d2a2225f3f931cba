"""Common dependencies for inventory routes."""
from typing import Annotated, TypeAlias

from fastapi import Depends

from assetdesk.api.dependencies import IdentityDep, StoreDep
from assetdesk.services.inventory import InventoryService, build_inventory_service


def get_inventory_service(store: StoreDep, identity: IdentityDep) -> InventoryService:
    """Get InventoryService bound to the caller; role checks happen per operation."""
    return build_inventory_service(store, identity)


InventoryServiceDep: TypeAlias = Annotated[InventoryService, Depends(get_inventory_service)]
