"""FastAPI server exposing the fitting room proxy endpoints."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from fitroom_app.app import FitRoomApp
from fitroom_app.logging_config import configure_logging, get_logger, log_event, operation_context
from logic.validation import (
    AnalyzeFitRequest,
    CreateAnalysisRequest,
    MagicLinkRequest,
    ProfilePhotoRequest,
    ScrapeRequest,
    WardrobeRequest,
)

LOGGER = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "GET, POST, PUT, OPTIONS",
}


def _error_response(exc: Exception) -> JSONResponse:
    return JSONResponse({"success": False, "error": str(exc)}, status_code=500)


def _run(operation: str, handler: Callable[[], Dict[str, Any]]) -> JSONResponse:
    """Execute one endpoint body, rendering any failure as the error envelope."""

    with operation_context(f"http:{operation}") as correlation_id:
        try:
            return JSONResponse(handler())
        except Exception as exc:  # endpoint boundary: every failure becomes a 500 envelope
            log_event(
                LOGGER,
                logging.ERROR,
                "request_failed",
                operation=operation,
                correlation_id=correlation_id,
                error=str(exc),
                exc_info=True,
            )
            return _error_response(exc)


def create_app(fitroom: Optional[FitRoomApp] = None) -> FastAPI:
    """Build the ASGI app; pass a preconfigured :class:`FitRoomApp` in tests."""

    configure_logging()
    fitroom = fitroom or FitRoomApp()
    app = FastAPI(title="Virtual Fitting Room", version="0.1.0")

    @app.middleware("http")
    async def cors(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    @app.exception_handler(RequestValidationError)
    async def invalid_body(_: Request, exc: RequestValidationError) -> JSONResponse:
        messages = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'][1:]) or 'body'}: {err['msg']}"
            for err in exc.errors()
        )
        return JSONResponse({"success": False, "error": messages}, status_code=500)

    @app.get("/healthz")
    async def healthcheck() -> dict:
        """Lightweight readiness probe."""

        return {
            "status": "ok",
            "service": "virtual-fitting-room",
            "environment": fitroom.config.environment or "local",
            "store_backend": fitroom.config.store_backend,
            "fit_model": fitroom.config.fit_model.model,
        }

    @app.post("/scrape-clothing")
    def scrape_clothing(request: ScrapeRequest) -> JSONResponse:
        return _run("scrape_clothing", lambda: fitroom.scrape_clothing(request.url))

    @app.post("/analyze-fit")
    def analyze_fit(request: AnalyzeFitRequest) -> JSONResponse:
        return _run("analyze_fit", lambda: fitroom.analyze_fit(request))

    @app.post("/wardrobe-management")
    def wardrobe_management(
        request: WardrobeRequest, authorization: Optional[str] = Header(None)
    ) -> JSONResponse:
        return _run("wardrobe_management", lambda: fitroom.manage_wardrobe(authorization, request))

    @app.get("/profile")
    def get_profile(authorization: Optional[str] = Header(None)) -> JSONResponse:
        def handler() -> Dict[str, Any]:
            user = fitroom.authenticate(authorization)
            profile = fitroom.dashboard.get_profile(user.id)
            return {"success": True, "profile": profile.to_row() if profile else None}

        return _run("get_profile", handler)

    @app.put("/profile")
    def put_profile(
        request: ProfilePhotoRequest, authorization: Optional[str] = Header(None)
    ) -> JSONResponse:
        def handler() -> Dict[str, Any]:
            user = fitroom.authenticate(authorization)
            profile = fitroom.dashboard.save_photo(user.id, request.photo_url)
            return {"success": True, "profile": profile.to_row()}

        return _run("put_profile", handler)

    @app.get("/fit-analyses")
    def list_analyses(authorization: Optional[str] = Header(None)) -> JSONResponse:
        def handler() -> Dict[str, Any]:
            user = fitroom.authenticate(authorization)
            records = fitroom.dashboard.list_analyses(user.id)
            return {"success": True, "analyses": [record.to_row() for record in records]}

        return _run("list_analyses", handler)

    @app.post("/fit-analyses")
    def create_analysis(
        request: CreateAnalysisRequest, authorization: Optional[str] = Header(None)
    ) -> JSONResponse:
        def handler() -> Dict[str, Any]:
            user = fitroom.authenticate(authorization)
            record = fitroom.dashboard.create_analysis(
                user.id,
                request.clothing_url,
                preferred_size=request.preferred_size,
                clothing_name=request.clothing_name,
            )
            return {"success": True, "analysis": record.to_row()}

        return _run("create_analysis", handler)

    @app.post("/auth/magic-link")
    def magic_link(request: MagicLinkRequest) -> JSONResponse:
        def handler() -> Dict[str, Any]:
            fitroom.identity.send_magic_link(request.email, redirect_to=request.redirect_to)
            return {"success": True, "message": "Check your email for the sign-in link"}

        return _run("magic_link", handler)

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:create_app", factory=True, host="0.0.0.0", port=8080, reload=False)
