from fastapi import HTTPException, Request

from .services.recommender import Recommender
from .services.storage_manager import StorageManager


def get_recommender(request: Request) -> Recommender:
    return request.app.state.recommender


def get_storage(request: Request) -> StorageManager:
    return request.app.state.storage


def ensure_saved(result: dict) -> dict:
    """Turn a failed storage write into an HTTP error."""
    if not result.get("success"):
        raise HTTPException(status_code=500, detail=result.get("error") or "Storage write failed")
    return result
