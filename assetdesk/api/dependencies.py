"""Common dependencies: entity store and caller identity."""
from typing import Annotated, TypeAlias

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from assetdesk.core.exceptions import NotFoundError
from assetdesk.core.rbac import Identity, resolve_identity
from assetdesk.db.session import get_db
from assetdesk.services.company_service import CompanyService
from assetdesk.store import EntityStore, build_entity_store

DbDep: TypeAlias = Annotated[Session, Depends(get_db)]


def get_store(db: DbDep) -> EntityStore:
    """Entity store for this request; SQL stores share the request session."""
    return build_entity_store(db)


StoreDep: TypeAlias = Annotated[EntityStore, Depends(get_store)]


def get_identity(
    store: StoreDep,
    x_user_id: Annotated[int | None, Header()] = None,
) -> Identity:
    """
    Resolve the caller from the ``X-User-Id`` header.

    Authentication itself happens upstream; an unknown user id is treated as
    unauthenticated rather than missing.
    """
    if x_user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        return resolve_identity(store, x_user_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated") from exc


IdentityDep: TypeAlias = Annotated[Identity, Depends(get_identity)]


def get_company_service(store: StoreDep, identity: IdentityDep) -> CompanyService:
    return CompanyService(store, identity)


CompanyServiceDep: TypeAlias = Annotated[CompanyService, Depends(get_company_service)]
