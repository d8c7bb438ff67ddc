"""FastAPI server exposing compatibility scoring and scan history endpoints."""

from dataclasses import asdict
from functools import lru_cache
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool

from agents.shopping_assistant import ScanNotFoundError
from logic.scan_record import build_result
from logic.validation import (
    AnalyzeUrlRequest,
    CandidateProductInput,
    CompatibilityRequest,
    CompatibilityResponse,
    ConfirmScanRequest,
    RatingRequest,
    ScanOut,
    StatisticsOut,
    WardrobeItemInput,
    WishlistRequest,
)
from models.scan import filter_scans
from models.taxonomy import is_premium_brand
from scanner_app.app import ShoppingScannerApp
from tools.product_analyzer import ProductAnalysisError
from tools.product_page_fetcher import InvalidProductURLError, ProductPageFetchError

app = FastAPI(title="Wardrobe Compatibility Scanner", version="0.1.0")


@lru_cache(maxsize=1)
def get_scanner_app() -> ShoppingScannerApp:
    """Build the scanner app on first use so importing this module stays side-effect free."""

    return ShoppingScannerApp()


def _candidate_out(candidate) -> dict:
    payload = CandidateProductInput(
        product_name=candidate.name,
        product_brand=candidate.brand,
        category=candidate.category,
        color=candidate.primary_color,
        secondary_colors=list(candidate.secondary_colors),
        style=candidate.style,
        material=candidate.material,
        pattern=candidate.pattern,
        season=list(candidate.seasons),
        formality=candidate.formality,
        confidence=candidate.confidence,
    ).model_dump()
    payload["premium_brand"] = is_premium_brand(candidate.brand)
    return payload


@app.get("/healthz")
async def healthcheck(scanner: ShoppingScannerApp = Depends(get_scanner_app)) -> dict:
    """Lightweight readiness probe."""

    return {
        "status": "ok",
        "service": "wardrobe-compatibility",
        "environment": scanner.config.environment or "local",
        "model": scanner.config.model,
    }


@app.post("/compatibility", response_model=CompatibilityResponse)
async def score_compatibility(request: CompatibilityRequest) -> CompatibilityResponse:
    """Score a candidate against an inline wardrobe without touching storage."""

    result = build_result(request.candidate.to_candidate(), [item.to_item() for item in request.wardrobe])
    return CompatibilityResponse.from_result(result)


@app.post("/analyze/url")
def analyze_url(
    request: AnalyzeUrlRequest, scanner: ShoppingScannerApp = Depends(get_scanner_app)
) -> dict:
    """Scrape and analyse a product page; the client confirms the fields before scoring."""

    try:
        product, candidate = scanner.assistant.analyze_url(request.url)
    except InvalidProductURLError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ProductPageFetchError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return {
        "product": {
            "url": product.url,
            "image_url": product.image_url,
            "name": product.name,
            "brand": product.brand,
            "price_amount": product.price_amount,
            "price_currency": product.price_currency,
            "color": product.color,
        },
        "candidate": _candidate_out(candidate),
    }


@app.post("/analyze/image")
async def analyze_image(request: Request, scanner: ShoppingScannerApp = Depends(get_scanner_app)) -> dict:
    """Analyse a raw image body (``Content-Type: image/*``)."""

    image_bytes = await request.body()
    if not image_bytes:
        raise HTTPException(status_code=400, detail="Empty image body")
    mime_type = request.headers.get("content-type", "image/jpeg").split(";")[0].strip()
    try:
        candidate = await run_in_threadpool(scanner.assistant.analyze_image, image_bytes, mime_type)
    except ProductAnalysisError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return {"candidate": _candidate_out(candidate)}


@app.post("/users/{user_id}/scans")
def create_scan(
    user_id: str, request: ConfirmScanRequest, scanner: ShoppingScannerApp = Depends(get_scanner_app)
) -> dict:
    """Score the confirmed product against the stored wardrobe and save the scan."""

    outcome = scanner.assistant.confirm_and_score(
        user_id=user_id,
        candidate=request.candidate.to_candidate(),
        scan_method=request.scan_method,
        product_url=request.product_url,
        product_image_url=request.product_image_url,
        price_amount=request.price_amount,
        price_currency=request.price_currency,
    )
    return {
        "scan": ScanOut.from_scan(outcome.scan).model_dump(),
        "result": CompatibilityResponse.from_result(outcome.result).model_dump(),
        "matching_items": [
            {
                "id": item.id,
                "name": item.name,
                "category": item.category,
                "colors": list(item.colors),
                "reason": outcome.match_reasons.get(item.id),
            }
            for item in outcome.matching_items
        ],
    }


@app.get("/users/{user_id}/scans", response_model=List[ScanOut])
def list_scans(
    user_id: str,
    limit: Optional[int] = None,
    min_score: Optional[int] = None,
    wishlisted: bool = False,
    scanner: ShoppingScannerApp = Depends(get_scanner_app),
) -> List[ScanOut]:
    scans = scanner.assistant.history(user_id, limit=limit)
    return [ScanOut.from_scan(scan) for scan in filter_scans(scans, min_score=min_score, wishlisted_only=wishlisted)]


@app.get("/users/{user_id}/scans/stats", response_model=StatisticsOut)
def scan_statistics(user_id: str, scanner: ShoppingScannerApp = Depends(get_scanner_app)) -> StatisticsOut:
    return StatisticsOut.from_statistics(scanner.assistant.statistics(user_id))


@app.get("/users/{user_id}/wishlist", response_model=List[ScanOut])
def list_wishlist(user_id: str, scanner: ShoppingScannerApp = Depends(get_scanner_app)) -> List[ScanOut]:
    return [ScanOut.from_scan(scan) for scan in scanner.assistant.wishlist(user_id)]


@app.post("/users/{user_id}/scans/{scan_id}/reanalyze", response_model=ScanOut)
def reanalyze_scan(
    user_id: str, scan_id: str, scanner: ShoppingScannerApp = Depends(get_scanner_app)
) -> ScanOut:
    """Refresh a stored scan's score, insights and matches against the current wardrobe."""

    try:
        return ScanOut.from_scan(scanner.assistant.reanalyze(user_id, scan_id))
    except ScanNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.post("/users/{user_id}/scans/{scan_id}/wishlist", response_model=ScanOut)
def set_wishlist(
    user_id: str, scan_id: str, request: WishlistRequest, scanner: ShoppingScannerApp = Depends(get_scanner_app)
) -> ScanOut:
    try:
        return ScanOut.from_scan(scanner.assistant.set_wishlisted(user_id, scan_id, request.is_wishlisted))
    except ScanNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.post("/users/{user_id}/scans/{scan_id}/rating", response_model=ScanOut)
def rate_scan(
    user_id: str, scan_id: str, request: RatingRequest, scanner: ShoppingScannerApp = Depends(get_scanner_app)
) -> ScanOut:
    try:
        return ScanOut.from_scan(scanner.assistant.rate_scan(user_id, scan_id, request.rating))
    except ScanNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.delete("/users/{user_id}/scans/{scan_id}")
def delete_scan(user_id: str, scan_id: str, scanner: ShoppingScannerApp = Depends(get_scanner_app)) -> dict:
    try:
        scanner.assistant.delete_scan(user_id, scan_id)
    except ScanNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return {"deleted": scan_id}


@app.post("/users/{user_id}/scans/{scan_id}/wishlist/toggle", response_model=ScanOut)
def toggle_wishlist(
    user_id: str, scan_id: str, scanner: ShoppingScannerApp = Depends(get_scanner_app)
) -> ScanOut:
    try:
        return ScanOut.from_scan(scanner.assistant.toggle_wishlist(user_id, scan_id))
    except ScanNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.post("/users/{user_id}/wardrobe")
def add_wardrobe_item(
    user_id: str, request: WardrobeItemInput, scanner: ShoppingScannerApp = Depends(get_scanner_app)
) -> dict:
    """Register an already-catalogued wardrobe item for scoring."""

    item = scanner.wardrobe_store.create_item(user_id, request.to_item())
    return {"id": item.id, "status": item.status}


@app.get("/users/{user_id}/wardrobe", response_model=List[WardrobeItemInput])
def list_wardrobe(user_id: str, scanner: ShoppingScannerApp = Depends(get_scanner_app)) -> List[WardrobeItemInput]:
    return [WardrobeItemInput(**asdict(item)) for item in scanner.wardrobe_store.list_items_for_user(user_id)]


def get_app() -> FastAPI:
    """Expose the FastAPI instance for ASGI servers."""

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:app", host="0.0.0.0", port=int("8080"), reload=False)
