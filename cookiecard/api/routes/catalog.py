from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from cookiecard.api.dependencies import get_notion_client, get_vault, require_api_user
from cookiecard.models import User
from cookiecard.modules.notion.catalog import list_databases, list_property_names
from cookiecard.modules.notion.client import NotionClient
from cookiecard.modules.security import SecretsVaultPort
from cookiecard.schemas import DatabaseSummary

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/databases", response_model=list[DatabaseSummary])
async def get_databases(
    current_user: User = Depends(require_api_user),
    client: NotionClient = Depends(get_notion_client),
    vault: SecretsVaultPort = Depends(get_vault),
) -> list[DatabaseSummary]:
    return await list_databases(client, token=vault.decrypt(current_user.access_token))


@router.get("/properties", response_model=list[str])
async def get_properties(
    db_id: str = Query(alias="dbId", min_length=1),
    current_user: User = Depends(require_api_user),
    client: NotionClient = Depends(get_notion_client),
    vault: SecretsVaultPort = Depends(get_vault),
) -> list[str]:
    return await list_property_names(client, token=vault.decrypt(current_user.access_token), database_id=db_id)
