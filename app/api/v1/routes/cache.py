"""Cache administration endpoints. Require the admin API key."""
from fastapi import APIRouter, Depends
from app.core.logging_config import logger
from app.core.security import verify_admin_key
from app.services.cache import POLICY_CACHE

router = APIRouter(prefix="/cache")


@router.get("/stats")
def cache_stats_api(verified: bool = Depends(verify_admin_key)):
    """Size, hit, miss and eviction counters for each cache region."""
    return POLICY_CACHE.stats()


@router.delete("/filtered")
def clear_filtered_cache_api(verified: bool = Depends(verify_admin_key)):
    """Drop every cached filter result."""
    dropped = POLICY_CACHE.clear_filtered()
    logger.info(f"Filtered policy cache cleared: {dropped} entries")
    return {"cleared": {"filtered_policies": dropped}}


@router.delete("")
def clear_cache_api(verified: bool = Depends(verify_admin_key)):
    """Drop every entry in every cache region."""
    dropped = POLICY_CACHE.invalidate_all()
    logger.info(f"All policy cache regions cleared: {dropped}")
    return {"cleared": dropped}
