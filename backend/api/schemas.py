from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


# 1. POST /course/load - Response
class CourseStats(BaseModel):
    distance_km: float
    elevation_gain_m: float
    elevation_loss_m: float
    sample_count: int
    checkpoint_count: int


class CheckpointInfo(BaseModel):
    name: str
    lat: float
    lon: float
    elevation_m: float
    distance_km: float


class CourseLoadResponse(BaseModel):
    id: str = Field(..., description="UUID unique du parcours")
    name: str
    track_count: int
    stats: CourseStats
    checkpoints: List[CheckpointInfo]


class CourseMetadata(BaseModel):
    id: str
    filename: str
    name: str
    created_at: datetime
    file_hash: str
    stats: CourseStats


# 2. POST /course/{id}/predict - Request
class StrategyRequest(BaseModel):
    mode: Literal["pace", "target_time"] = "pace"
    flat_pace: float = Field(6.0, gt=0, description="min/km")
    climb_pace: float = Field(12.0, gt=0, description="min/km")
    descent_pace: float = Field(5.5, gt=0, description="min/km")
    climb_gradient_threshold: float = Field(10.0, description="%")
    dwell_time_per_checkpoint: float = Field(5.0, ge=0, description="minutes")
    start_time: str = Field("07:00", description="HH:MM")
    pace_distribution_ratio: float = Field(1.0, gt=0, le=1)
    target_hours: int = Field(10, ge=0)
    target_minutes: int = Field(0, ge=0, lt=60)


# 3. POST /course/{id}/predict - Response
class EffectivePaces(BaseModel):
    flat_pace: float
    climb_pace: float
    descent_pace: float
    flat_pace_mmss: str
    climb_pace_mmss: str
    descent_pace_mmss: str
    solved: bool


class ArrivalRow(BaseModel):
    name: str
    kind: Literal["start", "checkpoint", "goal"]
    distance_km: float
    section_distance_km: Optional[float] = None
    run_time_s: float
    dwell_s: float
    elapsed_s: float
    elapsed: str
    arrival_clock: str


class PredictionSummary(BaseModel):
    total_run_time_s: float
    total_dwell_s: float
    total_elapsed_s: float
    total_elapsed: str
    finish_clock: str
    average_pace_min_per_km: Optional[float] = None
    average_speed_kmh: Optional[float] = None


class PredictionResponse(BaseModel):
    course_id: str
    mode: Literal["pace", "target_time"]
    paces: EffectivePaces
    summary: PredictionSummary
    arrivals: List[ArrivalRow]
