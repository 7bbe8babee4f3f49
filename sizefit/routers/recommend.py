from typing import List
from fastapi import APIRouter, Depends, HTTPException
import structlog

from ..dependencies import get_recommender, get_storage
from ..schemas.recommend import BrandInfo, RecommendRequest, RecommendResponse
from ..security import verify_api_key
from ..services.recommender import Recommender
from ..services.storage_manager import StorageManager


logger = structlog.get_logger("sizefit")

router = APIRouter(tags=["recommend"], dependencies=[Depends(verify_api_key)])


@router.post("/recommend")
async def recommend(
    body: RecommendRequest,
    recommender: Recommender = Depends(get_recommender),
    storage: StorageManager = Depends(get_storage),
) -> RecommendResponse:
    product_type = body.product_type or recommender.default_product_type
    result = recommender.recommend(
        measurements=body.measurements.model_dump(exclude_none=True),
        brand_name=body.brand,
        product_type=product_type,
    )

    if "error" in result:
        status_code = 404 if recommender.get_brand(body.brand) is None else 422
        raise HTTPException(status_code=status_code, detail=result["error"])

    history_saved = None
    if body.save_history:
        saved = await storage.save_size_recommendation(body.brand, product_type, result)
        history_saved = saved["success"]
        if not history_saved:
            logger.warning("history_save_failed", brand=body.brand, error=saved.get("error"))

    logger.info(
        "recommendation_served",
        brand=body.brand,
        product_type=product_type,
        size=result["recommended_size"],
        confidence=result["confidence"],
        body_type=result["body_type"],
    )
    return RecommendResponse(**result, history_saved=history_saved)


@router.get("/brands")
async def list_brands(recommender: Recommender = Depends(get_recommender)) -> List[str]:
    return recommender.supported_brands()


@router.get("/brands/{name}")
async def get_brand(name: str, recommender: Recommender = Depends(get_recommender)) -> BrandInfo:
    brand = recommender.get_brand(name)
    if brand is None:
        raise HTTPException(status_code=404, detail=f'Brand "{name}" not found in database')
    return BrandInfo(**brand.to_dict())
