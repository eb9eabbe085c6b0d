from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, FastAPI, Form, HTTPException, Request, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from .config import POLL_INTERVAL_MS, STATIC_DIR, TEMPLATES_DIR
from .errors import NotFound, ValidationError
from .models import (
    EntriesOut,
    EntryIn,
    EntryInsertRequest,
    ImageCreateRequest,
    ImageDeleteRequest,
    ImageModifyRequest,
    Listing,
    ReorderRequest,
    ReplaceAllRequest,
    Snapshot,
)
from .service import SlideshowService
from .storage import ConfigStore

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
router = APIRouter()


def get_slideshow(request: Request) -> SlideshowService:
    return request.app.state.slideshow


def create_app(slideshow: SlideshowService | None = None) -> FastAPI:
    """Build the web app around a slideshow.

    Without an explicit slideshow one is created from the configured store;
    a corrupt config file aborts startup here.
    """
    if slideshow is None:
        slideshow = SlideshowService(ConfigStore())

    app = FastAPI(title="Smart Display")
    app.state.slideshow = slideshow
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR), check_dir=False), name="static")
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(NotFound, _not_found)
    app.include_router(router)

    logger.info("serving %d slides from %s", len(slideshow.entries()), slideshow.store.path)
    return app


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": "validation", "field": exc.field, "message": exc.message},
    )


async def _not_found(request: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"error": "not_found", "imageUrl": exc.image_url, "message": str(exc)},
    )


def _no_content() -> Response:
    return Response(status_code=204)


# Display


@router.get("/")
async def index(request: Request):
    return templates.TemplateResponse(
        request,
        "index.html",
        {"poll_interval_ms": POLL_INTERVAL_MS},
    )


@router.get("/polling", response_model=Snapshot)
def polling(slideshow: SlideshowService = Depends(get_slideshow)):
    return slideshow.poll()


@router.websocket("/polling/ws")
async def polling_socket(websocket: WebSocket):
    slideshow: SlideshowService = websocket.app.state.slideshow
    await websocket.accept()
    try:
        while True:
            await websocket.receive_text()
            # poll() can block on the slideshow lock
            snapshot = await run_in_threadpool(slideshow.poll)
            await websocket.send_json(snapshot.model_dump(by_alias=True))
    except WebSocketDisconnect:
        logger.debug("polling socket closed")


@router.get("/health")
async def health():
    return {"status": "ok"}


# Config API


@router.get("/config", response_model=Listing)
def list_config(slideshow: SlideshowService = Depends(get_slideshow)):
    return slideshow.listing()


@router.post("/config")
def create_image(body: ImageCreateRequest, slideshow: SlideshowService = Depends(get_slideshow)):
    slideshow.create(body.image_url)
    return _no_content()


@router.delete("/config")
def delete_image(body: ImageDeleteRequest, slideshow: SlideshowService = Depends(get_slideshow)):
    slideshow.delete(body.image_url)
    return _no_content()


@router.patch("/config")
def modify_config(body: ImageModifyRequest, slideshow: SlideshowService = Depends(get_slideshow)):
    slideshow.update(image_url=body.image_url, duration_secs=body.duration_secs)
    return _no_content()


@router.put("/config")
def replace_config(body: ReplaceAllRequest, slideshow: SlideshowService = Depends(get_slideshow)):
    slideshow.replace_all(body.image_urls, body.duration_secs)
    return _no_content()


@router.get("/config/entries", response_model=EntriesOut)
def list_entries(slideshow: SlideshowService = Depends(get_slideshow)):
    view = slideshow.view()
    return EntriesOut(entries=list(view.slides), current_index=view.current_index)


@router.post("/config/entries")
def insert_entry(body: EntryInsertRequest, slideshow: SlideshowService = Depends(get_slideshow)):
    slideshow.insert_at(body.index, body.image_url)
    return _no_content()


@router.put("/config/entries/{index}")
def replace_entry(index: int, body: EntryIn, slideshow: SlideshowService = Depends(get_slideshow)):
    slideshow.replace_at(index, body.image_url)
    return _no_content()


@router.delete("/config/entries/{index}")
def remove_entry(index: int, slideshow: SlideshowService = Depends(get_slideshow)):
    slideshow.remove_at(index)
    return _no_content()


@router.post("/config/reorder")
def reorder_entries(body: ReorderRequest, slideshow: SlideshowService = Depends(get_slideshow)):
    slideshow.reorder(body.image_urls)
    return _no_content()


# Settings page


@router.get("/settings")
def settings_page(request: Request, slideshow: SlideshowService = Depends(get_slideshow)):
    view = slideshow.view()
    return templates.TemplateResponse(
        request,
        "settings.html",
        {
            "entries": view.slides,
            "current_index": view.current_index,
            "duration_secs": view.duration_secs,
        },
    )


@router.post("/settings/add")
def settings_add(
    image_url: str = Form(...),
    slideshow: SlideshowService = Depends(get_slideshow),
):
    slideshow.create(image_url)
    return RedirectResponse(url="/settings", status_code=303)


@router.post("/settings/duration")
def settings_duration(
    duration_secs: float = Form(...),
    slideshow: SlideshowService = Depends(get_slideshow),
):
    slideshow.update(duration_secs=duration_secs)
    return RedirectResponse(url="/settings", status_code=303)


@router.post("/settings/show")
def settings_show(
    image_url: str = Form(...),
    slideshow: SlideshowService = Depends(get_slideshow),
):
    slideshow.update(image_url=image_url)
    return RedirectResponse(url="/settings", status_code=303)


@router.post("/settings/delete/{index}")
def settings_delete(index: int, slideshow: SlideshowService = Depends(get_slideshow)):
    try:
        slideshow.remove_at(index)
    except ValidationError:
        raise HTTPException(status_code=404, detail="Slide not found") from None
    return RedirectResponse(url="/settings", status_code=303)
