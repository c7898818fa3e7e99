"""Shared query parameter parsing for routers."""
from typing import Annotated

from fastapi import Depends, HTTPException, Query

from portfolio_tracker.db.models import AssetType


def asset_type_param(
    asset_type: Annotated[
        str | None,
        Query(alias="type", description="Cripto, Acción or CEDEAR (case and accents ignored)"),
    ] = None,
) -> AssetType | None:
    if asset_type is None or not asset_type.strip():
        return None
    try:
        return AssetType.parse(asset_type)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


AssetTypeParam = Annotated[AssetType | None, Depends(asset_type_param)]
