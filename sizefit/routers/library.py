from typing import Any, Dict, List
from fastapi import APIRouter, Depends

from ..dependencies import ensure_saved, get_storage
from ..schemas.recommend import StorageResult
from ..schemas.user import FavoriteInput, OutfitInput
from ..security import verify_api_key
from ..services.storage_manager import StorageManager


router = APIRouter(tags=["library"], dependencies=[Depends(verify_api_key)])


@router.get("/history")
async def get_history(storage: StorageManager = Depends(get_storage)) -> List[Dict[str, Any]]:
    return await storage.get_size_history()


@router.delete("/history")
async def clear_history(storage: StorageManager = Depends(get_storage)) -> StorageResult:
    return StorageResult(**ensure_saved(await storage.clear_size_history()))


@router.get("/favorites")
async def get_favorites(storage: StorageManager = Depends(get_storage)) -> List[Dict[str, Any]]:
    return await storage.get_favorites()


@router.post("/favorites")
async def add_favorite(body: FavoriteInput, storage: StorageManager = Depends(get_storage)) -> StorageResult:
    return StorageResult(**ensure_saved(await storage.save_favorite(body.model_dump())))


@router.delete("/favorites/{item_id}")
async def remove_favorite(item_id: str, storage: StorageManager = Depends(get_storage)) -> StorageResult:
    return StorageResult(**ensure_saved(await storage.remove_favorite(item_id)))


@router.get("/outfits")
async def get_outfits(storage: StorageManager = Depends(get_storage)) -> List[Dict[str, Any]]:
    return await storage.get_outfits()


@router.post("/outfits")
async def add_outfit(body: OutfitInput, storage: StorageManager = Depends(get_storage)) -> StorageResult:
    return StorageResult(**ensure_saved(await storage.save_outfit(body.model_dump())))


@router.delete("/outfits/{outfit_id}")
async def delete_outfit(outfit_id: str, storage: StorageManager = Depends(get_storage)) -> StorageResult:
    return StorageResult(**ensure_saved(await storage.delete_outfit(outfit_id)))
