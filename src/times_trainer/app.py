from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Literal

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

from . import storage
from .facts import MAX_OPERAND, MIN_OPERAND, canonical
from .selector import ALL, parse_filter_tag
from .template_helpers import popover_text, register_template_filters
from .trainer import Trainer

PACKAGE_ROOT = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_ROOT.parent.parent
TEMPLATES_DIR = PROJECT_ROOT / "templates"

ADVANCE_DELAY_MS = 500
POPOVER_DISMISS_MS = 2000
LONG_PRESS_MS = 400

FILTER_TAGS: tuple[Any, ...] = (ALL, *range(MIN_OPERAND, MAX_OPERAND + 1))

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
register_template_filters(templates.env)


def build_trainer() -> Trainer:
    backend = storage.SqliteKeyValueStore(storage.DB_PATH)
    logger.info("Loading progress from %s", backend.path)
    return Trainer.load(backend)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if getattr(app.state, "trainer", None) is None:
        app.state.trainer = build_trainer()
    yield


app = FastAPI(title="Times Trainer", lifespan=lifespan)


def _get_trainer(request: Request) -> Trainer:
    # Lifespan hooks do not run for a bare TestClient, so build lazily too.
    trainer = getattr(request.app.state, "trainer", None)
    if trainer is None:
        trainer = build_trainer()
        request.app.state.trainer = trainer
    return trainer


def _is_hx(request: Request) -> bool:
    return request.headers.get("HX-Request", "false").lower() == "true"


def _context(trainer: Trainer, *, flash: str | None = None) -> dict[str, Any]:
    return {
        "page_title": "Times Trainer",
        "question": trainer.current,
        "filters": trainer.filters,
        "filter_tags": FILTER_TAGS,
        "matrix": trainer.matrix(),
        "summary": trainer.summary(),
        "flash": flash,
        "advance_delay_ms": ADVANCE_DELAY_MS,
        "popover_dismiss_ms": POPOVER_DISMISS_MS,
        "long_press_ms": LONG_PRESS_MS,
    }


def _render_trainer(request: Request, trainer: Trainer, *, flash: str | None = None) -> Response:
    if not _is_hx(request):
        return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    return templates.TemplateResponse(request, "partials/trainer.html", _context(trainer, flash=flash))


def _check_operands(a: int, b: int) -> None:
    try:
        canonical(a, b)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@app.get("/", response_class=HTMLResponse)
async def index(request: Request) -> Response:
    trainer = _get_trainer(request)
    return templates.TemplateResponse(request, "index.html", _context(trainer))


@app.post("/reveal", response_class=HTMLResponse)
async def reveal(request: Request) -> Response:
    trainer = _get_trainer(request)
    trainer.show_answer()
    return _render_trainer(request, trainer)


@app.post("/answer/{verdict}", response_class=HTMLResponse)
async def answer(request: Request, verdict: Literal["correct", "wrong"]) -> Response:
    trainer = _get_trainer(request)
    record = trainer.record_answer(verdict == "correct")
    flash = verdict if record is not None else None
    return _render_trainer(request, trainer, flash=flash)


@app.post("/next", response_class=HTMLResponse)
async def next_question(request: Request) -> Response:
    trainer = _get_trainer(request)
    trainer.load_next_question()
    return _render_trainer(request, trainer)


@app.post("/filter/{tag}", response_class=HTMLResponse)
async def toggle_filter(request: Request, tag: str) -> Response:
    try:
        parsed = parse_filter_tag(tag)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    trainer = _get_trainer(request)
    trainer.toggle_filter(parsed)
    return _render_trainer(request, trainer)


@app.post("/jump/{a}/{b}", response_class=HTMLResponse)
async def jump(request: Request, a: int, b: int) -> Response:
    _check_operands(a, b)
    trainer = _get_trainer(request)
    trainer.jump_to_question(a, b)
    return _render_trainer(request, trainer)


@app.post("/reset", response_class=HTMLResponse)
async def reset(request: Request) -> Response:
    trainer = _get_trainer(request)
    trainer.reset()
    logger.info("Progress reset")
    return _render_trainer(request, trainer)


@app.get("/cell/{a}/{b}", response_class=HTMLResponse)
async def cell_popover(request: Request, a: int, b: int) -> Response:
    _check_operands(a, b)
    trainer = _get_trainer(request)
    record = trainer.store.get(a, b)
    return templates.TemplateResponse(request, "partials/popover.html", {"text": popover_text(a, b, record)})


def main() -> None:
    import uvicorn

    uvicorn.run("times_trainer.app:app", host="127.0.0.1", port=8000, reload=True)


if __name__ == "__main__":
    main()
