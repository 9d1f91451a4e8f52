"""Menu item endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from localgourmet.dependencies import get_engine
from localgourmet.schemas import PopularMenuItem
from localgourmet.services.aggregation import AggregationEngine

router = APIRouter(prefix="/menu-items", tags=["menu-items"])


@router.get("/popular", response_model=list[PopularMenuItem])
async def popular_menu_items(
    engine: AggregationEngine = Depends(get_engine),
) -> list[PopularMenuItem]:
    """Popular items across all restaurants, with restaurantName resolved."""
    return await engine.get_popular_menu_items()
