import logging
import time
from contextlib import asynccontextmanager

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from wordgrid.settings import settings

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger("wordgrid")

# Populated at startup
_dictionary = None
_oracles: dict = {}


class SolveRequest(BaseModel):
    letters: str
    min_length: int | None = None


def _get_oracle(kind: str):
    """Oracles are built lazily per kind and reused across requests."""
    from wordgrid.dictionary import make_oracle

    if kind not in _oracles:
        logger.info("Building %s oracle over %d words", kind, len(_dictionary))
        _oracles[kind] = make_oracle(_dictionary, kind)
    return _oracles[kind]


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(application: FastAPI):
        global _dictionary

        from wordgrid.dictionary import load_dictionary

        dict_path = settings.DICTIONARY_PATH
        logger.info("Loading dictionary from %s (oracle=%s)", dict_path, settings.ORACLE)
        try:
            _dictionary = load_dictionary(dict_path)
        except OSError as e:
            logger.error("Could not load dictionary: %s", e)
            _dictionary = None
        _oracles.clear()

        yield

    application = FastAPI(title="Word Grid Solver", lifespan=lifespan)

    @application.get("/health")
    async def health():
        return {
            "status": "ok",
            "dictionary_loaded": _dictionary is not None,
            "word_count": len(_dictionary) if _dictionary is not None else 0,
        }

    @application.post("/solve")
    async def solve(body: SolveRequest, background_tasks: BackgroundTasks):
        from wordgrid.grid import Grid, GridConfigError
        from wordgrid.metrics import StageTimer
        from wordgrid.notifier import send_notification
        from wordgrid.solver import Solver

        if _dictionary is None:
            raise HTTPException(503, "Dictionary not loaded")

        letters = "".join(body.letters.split())
        if not letters:
            raise HTTPException(400, "No letters received")
        if len(letters) > settings.MAX_LETTERS:
            raise HTTPException(413, f"Grid too large (max {settings.MAX_LETTERS} letters)")

        min_length = body.min_length if body.min_length is not None else settings.MIN_WORD_LENGTH
        if min_length < 1:
            raise HTTPException(400, "min_length must be at least 1")

        timer = StageTimer()

        with timer.stage("grid"):
            try:
                grid = Grid(letters)
            except GridConfigError as e:
                raise HTTPException(400, str(e)) from None

        with timer.stage("oracle"):
            oracle = _get_oracle(settings.ORACLE)

        with timer.stage("solve"):
            deadline = None
            if settings.SEARCH_DEADLINE_SECONDS > 0:
                deadline = time.monotonic() + settings.SEARCH_DEADLINE_SECONDS
            result = Solver(grid, oracle, min_length).solve(settings.WORKERS, deadline)
        timer.record_search(result.stats)

        logger.info("Grid %dx%d: %s", grid.side, grid.side, " / ".join(grid.rows()))

        # Longest first, then alphabetical
        all_words = sorted(result.words, key=lambda w: (-len(w), w))
        words = all_words[:settings.MAX_RESULTS] if settings.MAX_RESULTS > 0 else all_words
        logger.info("Found %d words (returning %d)", len(all_words), len(words))

        if settings.NOTIFY_ENABLED:
            background_tasks.add_task(
                send_notification, all_words, grid.side,
                settings.NTFY_TOPIC, settings.NTFY_URL, settings.NOTIFY_WORDS_PER_GROUP,
            )

        return JSONResponse({
            "grid_size": grid.side,
            "board": grid.rows(),
            "words": words,
            "word_count": len(all_words),
            "starts": {w: list(grid.position(result.paths[w][0])) for w in words},
            "complete": result.complete,
            "processing_time": timer.total_ms,
            "stage_timings": timer.summary(),
            "search_stats": timer.search.as_dict(),
        })

    @application.get("/api/settings")
    async def api_get_settings():
        from wordgrid.settings import EDITABLE_FIELDS, get_editable_settings
        values = get_editable_settings(settings)
        field_types = {k: v.__name__ for k, v in EDITABLE_FIELDS.items()}
        return JSONResponse({"settings": values, "field_types": field_types})

    @application.post("/api/settings")
    async def api_post_settings(request: Request):
        from wordgrid.settings import get_editable_settings, update_settings
        body = await request.json()
        if not isinstance(body, dict):
            raise HTTPException(400, "Expected a JSON object")
        errors = update_settings(settings, **body)
        if errors:
            return JSONResponse({"updated": get_editable_settings(settings), "errors": errors}, status_code=400)
        logger.info("Settings updated: %s", body)
        return JSONResponse({"updated": get_editable_settings(settings)})

    return application


app = create_app()


def main():
    import uvicorn

    uvicorn.run("wordgrid.server:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()
