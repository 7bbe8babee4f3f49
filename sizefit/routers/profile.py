from typing import Any, Dict
from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import ensure_saved, get_storage
from ..schemas.recommend import StorageResult
from ..schemas.user import (
    AvatarInput,
    MeasurementsInput,
    MeasurementUpdate,
    PreferencesInput,
    ProfileInput,
    ProfileUpdate,
    ScanImageInput,
    SubscriptionInput,
)
from ..security import verify_api_key
from ..services.storage_manager import SCAN_IMAGE_TYPES, StorageManager


router = APIRouter(tags=["profile"], dependencies=[Depends(verify_api_key)])

MEASUREMENT_FIELDS = set(MeasurementsInput.model_fields) - {"unit"}


def _found(data: Any, what: str) -> Any:
    if data is None:
        raise HTTPException(status_code=404, detail=f"No {what} saved")
    return data


@router.get("/profile")
async def get_profile(storage: StorageManager = Depends(get_storage)) -> Dict[str, Any]:
    return _found(await storage.get_user_profile(), "profile")


@router.put("/profile")
async def save_profile(body: ProfileInput, storage: StorageManager = Depends(get_storage)) -> StorageResult:
    return StorageResult(**ensure_saved(await storage.save_user_profile(body.model_dump())))


@router.patch("/profile")
async def update_profile(body: ProfileUpdate, storage: StorageManager = Depends(get_storage)) -> StorageResult:
    return StorageResult(**ensure_saved(await storage.update_user_profile(body.model_dump(exclude_none=True))))


@router.get("/measurements")
async def get_measurements(storage: StorageManager = Depends(get_storage)) -> Dict[str, Any]:
    return _found(await storage.get_measurements(), "measurements")


@router.put("/measurements")
async def save_measurements(body: MeasurementsInput, storage: StorageManager = Depends(get_storage)) -> StorageResult:
    return StorageResult(**ensure_saved(await storage.save_measurements(body.model_dump())))


@router.patch("/measurements/{field}")
async def update_measurement(field: str, body: MeasurementUpdate, storage: StorageManager = Depends(get_storage)) -> StorageResult:
    if field not in MEASUREMENT_FIELDS:
        raise HTTPException(status_code=400, detail=f"Unknown measurement: {field}")
    return StorageResult(**ensure_saved(await storage.update_measurement(field, body.value)))


@router.get("/avatar")
async def get_avatar(storage: StorageManager = Depends(get_storage)) -> Dict[str, Any]:
    return _found(await storage.get_avatar_data(), "avatar")


@router.put("/avatar")
async def save_avatar(body: AvatarInput, storage: StorageManager = Depends(get_storage)) -> StorageResult:
    return StorageResult(**ensure_saved(await storage.save_avatar_data(body.model_dump())))


@router.get("/scans")
async def get_scans(storage: StorageManager = Depends(get_storage)) -> Dict[str, Any]:
    return await storage.get_all_scan_images()


@router.get("/scans/{image_type}")
async def get_scan(image_type: str, storage: StorageManager = Depends(get_storage)) -> Dict[str, Any]:
    return _found(await storage.get_scan_image(image_type), f"{image_type} scan")


@router.put("/scans/{image_type}")
async def save_scan(image_type: str, body: ScanImageInput, storage: StorageManager = Depends(get_storage)) -> StorageResult:
    if image_type not in SCAN_IMAGE_TYPES:
        raise HTTPException(status_code=400, detail=f"image_type must be one of {', '.join(SCAN_IMAGE_TYPES)}")
    return StorageResult(**ensure_saved(await storage.save_scan_image(image_type, body.image_data)))


@router.get("/preferences")
async def get_preferences(storage: StorageManager = Depends(get_storage)) -> Dict[str, Any]:
    return await storage.get_preferences()


@router.put("/preferences")
async def save_preferences(body: PreferencesInput, storage: StorageManager = Depends(get_storage)) -> StorageResult:
    return StorageResult(**ensure_saved(await storage.save_preferences(body.model_dump())))


@router.get("/subscription")
async def get_subscription(storage: StorageManager = Depends(get_storage)) -> Dict[str, Any]:
    subscription = await storage.get_subscription()
    return {**subscription, "is_premium": await storage.is_premium()}


@router.put("/subscription")
async def save_subscription(body: SubscriptionInput, storage: StorageManager = Depends(get_storage)) -> StorageResult:
    return StorageResult(**ensure_saved(await storage.save_subscription(body.model_dump())))
