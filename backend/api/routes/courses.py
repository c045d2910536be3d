import logging
from typing import Optional

from fastapi import APIRouter, File, Form, Header, HTTPException, Request, UploadFile
from fastapi.responses import PlainTextResponse

from api.schemas import (
    ArrivalRow,
    CheckpointInfo,
    CourseLoadResponse,
    CourseMetadata,
    CourseStats,
    EffectivePaces,
    PredictionResponse,
    PredictionSummary,
    StrategyRequest,
)
from core.formatting import format_elapsed, format_time_of_day
from core.models import Strategy
from core.utils import pace_to_mmss, parse_clock_time
from services import prediction_service
from services.course_service import ALLOWED_EXTENSIONS, compute_course_stats, load_course_from_bytes
from services.models import LoadedCourse
from services.serialization import to_jsonable
from storage.course_store import InMemoryCourseStore, StoredCourse


router = APIRouter()


def _get_logger(request: Request) -> logging.Logger:
    return request.app.state.logger


def _get_request_id(request: Request) -> str:
    return getattr(getattr(request, "state", None), "request_id", "-")


def get_course_store(request: Request) -> InMemoryCourseStore:
    return request.app.state.store


def _model_to_dict(model):
    if hasattr(model, "model_dump"):
        return model.model_dump()
    return model.dict()


def _get_stored(request: Request, course_id: str) -> StoredCourse:
    try:
        return get_course_store(request).get(course_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Course {course_id} not found")


def _stats_model(loaded: LoadedCourse) -> CourseStats:
    return CourseStats(**to_jsonable(compute_course_stats(loaded.course)))


def strategy_from_request(payload: StrategyRequest) -> Strategy:
    return Strategy(
        mode=payload.mode,
        flat_pace=payload.flat_pace,
        climb_pace=payload.climb_pace,
        descent_pace=payload.descent_pace,
        climb_gradient_threshold=payload.climb_gradient_threshold,
        dwell_time_per_checkpoint=payload.dwell_time_per_checkpoint,
        start_clock_time=parse_clock_time(payload.start_time),
        pace_distribution_ratio=payload.pace_distribution_ratio,
        target_hours=payload.target_hours,
        target_minutes=payload.target_minutes,
    )


def _optional_float(value: float) -> Optional[float]:
    return value if value == value else None


@router.post("/course/load", response_model=CourseLoadResponse)
async def load_course_endpoint(
    request: Request,
    file: UploadFile = File(...),
    name: Optional[str] = Form(None),
    max_size: int = Header(50_000_000),
):
    """Charge un parcours GPX et retourne son ID"""
    logger = _get_logger(request)
    request_id = _get_request_id(request)

    logger.info(
        "upload_request_received",
        extra={"request_id": request_id, "upload_filename": file.filename, "upload_name": name},
    )
    if not file.filename:
        raise HTTPException(status_code=400, detail="Missing filename")
    if not any(file.filename.lower().endswith(ext) for ext in ALLOWED_EXTENSIONS):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid file extension. Allowed: {', '.join(sorted(ALLOWED_EXTENSIONS))}",
        )

    file_bytes = await file.read()
    if len(file_bytes) > max_size:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Max size: {max_size / (1024 * 1024):.1f}MB",
        )

    try:
        display_name = name or file.filename
        loaded = load_course_from_bytes(file_bytes, file.filename)
        loaded = LoadedCourse(name=display_name, course=loaded.course, track_count=loaded.track_count)
        course_id = get_course_store(request).store(loaded, file.filename, file_bytes)
    except ValueError as e:
        logger.warning(
            "upload_validation_failed",
            extra={"request_id": request_id, "error": str(e), "upload_filename": file.filename},
        )
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception("upload_failed", extra={"request_id": request_id, "upload_filename": file.filename})
        raise HTTPException(status_code=500, detail=f"Failed to load course (request_id={request_id})")

    logger.info("upload_success", extra={"request_id": request_id, "course_id": course_id})
    return CourseLoadResponse(
        id=course_id,
        name=display_name,
        track_count=loaded.track_count,
        stats=_stats_model(loaded),
        checkpoints=[
            CheckpointInfo(
                name=cp.name,
                lat=cp.latitude,
                lon=cp.longitude,
                elevation_m=cp.elevation,
                distance_km=cp.distance_from_start / 1000.0,
            )
            for cp in loaded.course.checkpoints
        ],
    )


@router.get("/courses")
async def list_courses(request: Request):
    """Liste les parcours charges"""
    entries = get_course_store(request).list_courses()
    return {
        "courses": [
            _model_to_dict(
                CourseMetadata(
                    id=entry.id,
                    filename=entry.filename,
                    name=entry.loaded.name,
                    created_at=entry.created_at,
                    file_hash=entry.file_hash,
                    stats=_stats_model(entry.loaded),
                )
            )
            for entry in entries
        ]
    }


@router.get("/course/{course_id}", response_model=CourseMetadata)
async def get_course(request: Request, course_id: str):
    entry = _get_stored(request, course_id)
    return CourseMetadata(
        id=entry.id,
        filename=entry.filename,
        name=entry.loaded.name,
        created_at=entry.created_at,
        file_hash=entry.file_hash,
        stats=_stats_model(entry.loaded),
    )


@router.post("/course/{course_id}/predict", response_model=PredictionResponse)
async def predict_course(request: Request, course_id: str, payload: StrategyRequest):
    """Temps de passage predits pour une strategie"""
    logger = _get_logger(request)
    request_id = _get_request_id(request)
    entry = _get_stored(request, course_id)

    try:
        strategy = strategy_from_request(payload)
        result = prediction_service.predict(entry.loaded.course, strategy)
    except ValueError as e:
        logger.warning("predict_validation_failed", extra={"request_id": request_id, "error": str(e)})
        raise HTTPException(status_code=400, detail=str(e))

    paces = result.paces
    summary = result.summary
    return PredictionResponse(
        course_id=course_id,
        mode=strategy.mode,
        paces=EffectivePaces(
            flat_pace=paces.flat_pace,
            climb_pace=paces.climb_pace,
            descent_pace=paces.descent_pace,
            flat_pace_mmss=pace_to_mmss(paces.flat_pace),
            climb_pace_mmss=pace_to_mmss(paces.climb_pace),
            descent_pace_mmss=pace_to_mmss(paces.descent_pace),
            solved=paces.solved,
        ),
        summary=PredictionSummary(
            total_run_time_s=summary.total_run_time_s,
            total_dwell_s=summary.total_dwell_s,
            total_elapsed_s=summary.total_elapsed_s,
            total_elapsed=format_elapsed(summary.total_elapsed_s),
            finish_clock=format_time_of_day(summary.finish_clock_s),
            average_pace_min_per_km=_optional_float(summary.average_pace_min_per_km),
            average_speed_kmh=_optional_float(summary.average_speed_kmh),
        ),
        arrivals=[
            ArrivalRow(
                name=row.name,
                kind=row.kind,
                distance_km=row.distance_m / 1000.0,
                section_distance_km=(
                    row.section_distance_m / 1000.0 if row.section_distance_m is not None else None
                ),
                run_time_s=row.run_time_s,
                dwell_s=row.dwell_s,
                elapsed_s=row.elapsed_s,
                elapsed=format_elapsed(row.elapsed_s),
                arrival_clock=format_time_of_day(row.clock_s),
            )
            for row in result.arrivals
        ],
    )


@router.post("/course/{course_id}/profile")
async def course_profile(request: Request, course_id: str, payload: Optional[StrategyRequest] = None):
    """Figure plotly du profil altimetrique (avec temps predits si une strategie est fournie)"""
    entry = _get_stored(request, course_id)
    course = entry.loaded.course
    try:
        result = prediction_service.predict(course, strategy_from_request(payload)) if payload else None
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return to_jsonable(prediction_service.build_profile_figure(course, result))


@router.post("/course/{course_id}/track.csv", response_class=PlainTextResponse)
async def course_track_csv(request: Request, course_id: str, payload: StrategyRequest):
    """Export CSV des temps predits point par point"""
    entry = _get_stored(request, course_id)
    try:
        result = prediction_service.predict(entry.loaded.course, strategy_from_request(payload))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PlainTextResponse(prediction_service.export_track_csv(result), media_type="text/csv")


@router.delete("/course/{course_id}")
async def delete_course(request: Request, course_id: str):
    """Supprime un parcours"""
    if not get_course_store(request).delete(course_id):
        raise HTTPException(status_code=404, detail=f"Course {course_id} not found")
    return {"message": f"Course {course_id} deleted successfully"}
