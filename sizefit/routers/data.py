from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, HTTPException

from ..dependencies import ensure_saved, get_storage
from ..schemas.recommend import StorageResult
from ..security import verify_api_key
from ..services.storage_manager import StorageManager


router = APIRouter(prefix="/data", tags=["data"], dependencies=[Depends(verify_api_key)])


@router.get("/export")
async def export_data(storage: StorageManager = Depends(get_storage)) -> Dict[str, Any]:
    return await storage.export_all_data()


@router.post("/import")
async def import_data(payload: Dict[str, Any] = Body(...), storage: StorageManager = Depends(get_storage)) -> StorageResult:
    result = await storage.import_all_data(payload)
    if not result["success"]:
        if "error" in result:
            raise HTTPException(status_code=400, detail=result["error"])
        raise HTTPException(status_code=500, detail="One or more keys failed to import")
    return StorageResult(**result)


@router.get("/info")
async def storage_info(storage: StorageManager = Depends(get_storage)) -> Dict[str, Any]:
    info = await storage.get_storage_info()
    if "error" in info:
        raise HTTPException(status_code=500, detail=info["error"])
    return info


@router.delete("")
async def clear_all(storage: StorageManager = Depends(get_storage)) -> StorageResult:
    return StorageResult(**ensure_saved(await storage.clear_all()))
