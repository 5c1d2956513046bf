import logging

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse

from wordfinder.settings import effective_log_level, settings

logging.basicConfig(level=effective_log_level(settings), format="%(asctime)s %(name)s %(levelname)s %(message)s")
logger = logging.getLogger("wordfinder")


def create_app() -> FastAPI:
    application = FastAPI(title="Word Finder")

    @application.get("/health")
    async def health():
        return {"status": "ok"}

    @application.post("/find")
    async def find(request: Request):
        from wordfinder.engine import SearchEngine
        from wordfinder.errors import WordFinderError

        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(400, "Request body must be JSON")
        if not isinstance(body, dict):
            raise HTTPException(400, "Request body must be a JSON object")

        words = body.get("words")
        if not isinstance(words, list) or not all(isinstance(w, str) for w in words):
            raise HTTPException(400, "'words' must be a list of strings")

        grid = body.get("grid")
        if grid is not None and not isinstance(grid, list):
            raise HTTPException(400, "'grid' must be a list of row strings")

        mode = body.get("mode", settings.DEFAULT_EXECUTION_MODE)
        workers = body.get("workers", settings.DEFAULT_WORKERS)
        logger.info("POST /find words=%d mode=%s workers=%s", len(words), mode, workers)

        # A fresh engine per request keeps rankings from leaking between callers
        try:
            engine = SearchEngine(grid)
            ranking = engine.find_with_counts(words, mode, workers)
        except WordFinderError as e:
            logger.info("Rejected /find request: %s", e)
            raise HTTPException(400, str(e))

        return JSONResponse({
            "words": [word for word, _ in ranking],
            "counts": dict(ranking),
            "shape": list(engine.shape),
            "stage_timings": {"build": engine.build_timings, "find": engine.last_timings},
        })

    @application.get("/api/settings")
    async def api_get_settings():
        from wordfinder.settings import get_editable_settings, EDITABLE_FIELDS
        values = get_editable_settings(settings)
        field_types = {k: v.__name__ for k, v in EDITABLE_FIELDS.items()}
        return JSONResponse({"settings": values, "field_types": field_types})

    @application.post("/api/settings")
    async def api_post_settings(request: Request):
        from wordfinder.settings import update_settings, get_editable_settings
        try:
            body = await request.json()
        except ValueError:
            raise HTTPException(400, "Request body must be JSON")
        if not isinstance(body, dict):
            raise HTTPException(400, "Request body must be a JSON object")
        errors = update_settings(settings, body)
        # Valid fields are applied even when others are rejected
        logging.getLogger("wordfinder").setLevel(effective_log_level(settings))
        if errors:
            return JSONResponse({"updated": get_editable_settings(settings), "errors": errors}, status_code=400)
        logger.info("Settings updated: %s", body)
        return JSONResponse({"updated": get_editable_settings(settings)})

    return application


app = create_app()


def main():
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()
