import sys
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse

sys.path.append(str(Path(__file__).parent.parent))

from api.logging_config import configure_logging
from storage.course_store import InMemoryCourseStore


API_VERSION = "0.3.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.logger = configure_logging()
    app.state.store = InMemoryCourseStore()
    yield
    app.state.logger.info("backend_stop courses_dropped=%d", len(app.state.store.list_courses()))
    app.state.store.clear()


app = FastAPI(
    title="CoursePace API",
    description="Prediction des temps de passage sur un parcours GPX",
    version=API_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Un X-Request-ID par requete, repris dans les logs et les erreurs 500."""
    logger = request.app.state.logger
    request_id = request.state.request_id = uuid.uuid4().hex
    extra = {"request_id": request_id, "method": request.method, "path": request.url.path}

    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("request_unhandled_exception", extra=extra)
        response = JSONResponse(
            status_code=500,
            content={"detail": "Internal Server Error", "request_id": request_id},
        )

    response.headers["X-Request-ID"] = request_id
    logger.info(
        "%s %s -> %s (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - start) * 1000,
        extra=extra,
    )
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from api.routes.courses import router as courses_router

app.include_router(courses_router)
# memes routes sous /api/*
app.include_router(courses_router, prefix="/api", include_in_schema=False)


@app.get("/")
async def root():
    return {"message": "CoursePace API", "version": API_VERSION, "docs": "/docs"}


@app.get("/health")
async def health_check(request: Request):
    return {
        "status": "healthy",
        "version": API_VERSION,
        "courses": len(request.app.state.store.list_courses()),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
