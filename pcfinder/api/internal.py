"""Internal API gateway for the PC Finder storefront.

Routes under /internal/* — no API key required.
Called by the storefront backend (service-to-service, behind a firewall).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import JSONResponse

from pcfinder.cache.redis_cache import RecommendationCache, build_cache_key
from pcfinder.catalog.repository import CatalogProvider
from pcfinder.errors import CatalogUnavailable
from pcfinder.models.build import CandidateBuild, RecommendationResult
from pcfinder.models.profile import BuildProfile, parse_profile
from pcfinder.orchestrator.facade import RecommendationFacade

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/internal", tags=["Internal"])

# Set by app lifespan
_catalog_provider: Optional[CatalogProvider] = None
_cache: Optional[RecommendationCache] = None


def set_catalog_provider(provider: Optional[CatalogProvider]) -> None:
    """Called during app startup to inject the catalog provider."""
    global _catalog_provider
    _catalog_provider = provider


def set_cache(cache: Optional[RecommendationCache]) -> None:
    """Called during app startup to inject the cache."""
    global _cache
    _cache = cache


def _facade() -> RecommendationFacade:
    if _catalog_provider is None:
        raise CatalogUnavailable("Component catalog has not been initialised")
    return RecommendationFacade(_catalog_provider.get())


async def _recommend(profile: BuildProfile) -> Dict[str, Any]:
    """Run (or reuse) a recommendation and return its JSON contract."""
    facade = _facade()
    # Market-timing advice changes with the month
    cache_key = build_cache_key(
        profile, facade.catalog.fingerprint(), facade.clock().strftime("%Y-%m")
    )

    if _cache:
        cached = await _cache.get(cache_key)
        if cached:
            logger.info("Cache HIT for recommendation")
            return RecommendationResult.model_validate_json(cached).to_dict()

    result = facade.recommend(profile)

    if _cache:
        await _cache.set(cache_key, result.model_dump_json(by_alias=True))

    return result.to_dict()


# ──────────────────────────────────────────────
# Routes
# ──────────────────────────────────────────────


@router.get("/health")
async def health():
    """Health check for storefront monitoring."""
    catalog_loaded = _catalog_provider is not None and _catalog_provider.loaded
    return {
        "status": "healthy" if catalog_loaded else "degraded",
        "gateway": "internal",
        "catalog_loaded": catalog_loaded,
        "catalog_entries": len(_catalog_provider.get().components()) if catalog_loaded else 0,
        "cache_available": _cache is not None and _cache.available,
    }


@router.post("/recommend")
async def recommend(answers: Dict[str, Any] = Body(...)):
    """Turn questionnaire answers into a build recommendation.

    Invalid answers → 422 with per-field errors; catalog problems → 503.
    """
    profile = parse_profile(answers)
    logger.info(
        "Internal recommend request: %s, budget £%.2f",
        profile.purpose.value, profile.budget,
    )
    return JSONResponse(await _recommend(profile))


@router.post("/compatibility/check")
async def check_build_compatibility(build: CandidateBuild):
    """Validate and score a caller-assembled build.

    Used by the interactive builder to show compatibility and insights
    as users pick parts.
    """
    result = _facade().evaluate_build(build)
    return {
        "compatible": result.valid,
        "issues": [i.model_dump(by_alias=True) for i in result.issues],
        "score": result.score,
        "grade": result.grade.value,
        "profile": result.profile,
        "feedback": result.feedback,
        "ctas": list(result.ctas),
        "triggeredRules": list(result.triggered_rules),
    }


@router.put("/sessions/{session_id}")
async def save_session(session_id: str, answers: Dict[str, Any] = Body(...)):
    """Recommend for a session and persist the answers/recommendation pair."""
    profile = parse_profile(answers)
    payload = {
        "answers": profile.model_dump(mode="json", by_alias=True),
        "recommendation": await _recommend(profile),
        "savedAt": datetime.now(timezone.utc).isoformat(),
    }
    persisted = bool(_cache) and await _cache.save_session(session_id, payload)
    if not persisted:
        logger.warning("Session %s not persisted, cache unavailable", session_id)
    return {"sessionId": session_id, "persisted": persisted, **payload}


@router.get("/sessions/{session_id}")
async def load_session(session_id: str):
    """Return a previously persisted session."""
    if not _cache:
        raise HTTPException(status_code=503, detail="Session store unavailable")
    payload = await _cache.load_session(session_id)
    if payload is None:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return {"sessionId": session_id, **payload}
