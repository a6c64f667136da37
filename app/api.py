from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from aiview.clipboard import ClipboardError
from aiview.config import load_app_config, messages
from aiview.controller import RequestController
from aiview.logger import setup_logging
from aiview.notify import RecordingNotifier
from aiview.render import build_view, render_html, render_page
from aiview.types import AskRequest, AskResponse, ResponseView

logger = logging.getLogger(__name__)

UI_DIRECTORY = Path(__file__).resolve().parent / "ui"


def create_app(
    controller: Optional[RequestController] = None,
    notifier: Optional[RecordingNotifier] = None,
    config: Optional[Dict[str, Any]] = None,
) -> FastAPI:
    config = load_app_config() if config is None else config
    notifier = notifier or RecordingNotifier()
    controller = controller or RequestController.from_config(config, notifier=notifier)
    trust_markup = bool((config.get("render") or {}).get("trust_markup", False))
    placeholder = messages(config)["loading"]

    app = FastAPI(title="AI Assistance View", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.controller = controller
    app.state.notifier = notifier
    app.mount("/ui", StaticFiles(directory=str(UI_DIRECTORY)), name="ui")

    def current_view() -> ResponseView:
        return build_view(controller.state, trust_markup=trust_markup, placeholder=placeholder)

    def snapshot() -> AskResponse:
        return AskResponse(
            state=controller.state,
            view=current_view(),
            notifications=notifier.drain(),
        )

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.post("/ask", response_model=AskResponse)
    async def ask(request: AskRequest) -> AskResponse:
        await controller.submit(request.query)
        return snapshot()

    @app.get("/view", response_model=AskResponse)
    async def view() -> AskResponse:
        return snapshot()

    @app.post("/copy/{index}", response_model=AskResponse)
    async def copy(index: int) -> AskResponse:
        try:
            controller.copy_block(index)
        except IndexError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ClipboardError as exc:
            logger.warning("Copy requested without a clipboard: %s", exc)
            raise HTTPException(status_code=503, detail=str(exc)) from exc
        return snapshot()

    @app.get("/fragment", response_class=HTMLResponse)
    async def fragment() -> str:
        return render_html(current_view())

    @app.get("/", response_class=HTMLResponse)
    async def page() -> str:
        return render_page(current_view())

    return app


def _default_app() -> FastAPI:
    setup_logging()
    return create_app()


app = _default_app()
