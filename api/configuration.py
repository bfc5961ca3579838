from fastapi import APIRouter, Depends

from api.dependencies import get_store, to_http_exception
from constants import BANK_NAME, TEAM_MEMBER
from schemas.configuration import ConfigurationResponse, ConfigValueIn
from services.case_store import CaseStore
from services.errors import CaseStoreError

router = APIRouter(prefix="/api/config", tags=["configuration"])
officers_router = APIRouter(prefix="/api/officers", tags=["configuration"])
banks_router = APIRouter(prefix="/api/banks", tags=["configuration"])


@router.get("", response_model=ConfigurationResponse)
async def get_configuration(store: CaseStore = Depends(get_store)):
    return ConfigurationResponse(
        options=store.options,
        officers=store.officers,
        banks=store.banks,
        error=store.error,
    )


@router.post("/seed", status_code=201)
async def seed_configuration(store: CaseStore = Depends(get_store)):
    """Fill an empty configuration table with the built-in options; 409 if already seeded."""
    try:
        count = await store.seed_configuration()
    except CaseStoreError as e:
        raise to_http_exception(e) from e
    return {"inserted": count}


@router.post("/{category}", status_code=201)
async def add_config_item(category: str, body: ConfigValueIn, store: CaseStore = Depends(get_store)):
    try:
        item = await store.add_config_item(category, body.value)
    except CaseStoreError as e:
        raise to_http_exception(e) from e
    return item.model_dump(by_alias=True)


@router.delete("/{category}/{value}", status_code=204)
async def delete_config_item(category: str, value: str, store: CaseStore = Depends(get_store)):
    try:
        await store.delete_config_item(category, value)
    except CaseStoreError as e:
        raise to_http_exception(e) from e
    return None


@officers_router.get("")
async def list_officers(store: CaseStore = Depends(get_store)):
    return store.officers


@officers_router.post("", status_code=201)
async def add_officer(body: ConfigValueIn, store: CaseStore = Depends(get_store)):
    try:
        await store.add_officer(body.value)
    except CaseStoreError as e:
        raise to_http_exception(e) from e
    return store.officers


@officers_router.patch("/{name}")
async def update_officer(name: str, body: ConfigValueIn, store: CaseStore = Depends(get_store)):
    """Rename an officer; every case assigned to the old name follows."""
    try:
        changed = await store.update_officer(name, body.value)
    except CaseStoreError as e:
        raise to_http_exception(e) from e
    return {"officers": store.officers, "casesUpdated": changed}


@officers_router.delete("/{name}", status_code=204)
async def remove_officer(name: str, store: CaseStore = Depends(get_store)):
    try:
        await store.remove_officer(name)
    except CaseStoreError as e:
        raise to_http_exception(e) from e
    return None


@banks_router.get("")
async def list_banks(store: CaseStore = Depends(get_store)):
    return store.banks


@banks_router.post("", status_code=201)
async def add_bank(body: ConfigValueIn, store: CaseStore = Depends(get_store)):
    try:
        await store.add_bank(body.value)
    except CaseStoreError as e:
        raise to_http_exception(e) from e
    return store.banks


@banks_router.patch("/{name}")
async def update_bank(name: str, body: ConfigValueIn, store: CaseStore = Depends(get_store)):
    try:
        changed = await store.update_bank(name, body.value)
    except CaseStoreError as e:
        raise to_http_exception(e) from e
    return {"banks": store.banks, "casesUpdated": changed}


@banks_router.delete("/{name}", status_code=204)
async def remove_bank(name: str, store: CaseStore = Depends(get_store)):
    try:
        await store.remove_bank(name)
    except CaseStoreError as e:
        raise to_http_exception(e) from e
    return None
