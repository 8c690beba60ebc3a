from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field


class FeatureStatOut(BaseModel):
    min: float
    max: float
    mean: float


class DatasetSummaryResponse(BaseModel):
    headers: List[str]
    rows: int
    has_label: bool
    feature_stats: Dict[str, Optional[FeatureStatOut]]
    preview: List[Dict[str, str]]


class ExampleRequest(BaseModel):
    rows: int = Field(1000, ge=1, le=100000)
    seed: Optional[int] = None


class PrepareResponse(BaseModel):
    features: List[str]
    label: str
    rows: int
    dropped_rows: int
    mins: List[float]
    maxs: List[float]


class TrainRequest(BaseModel):
    epochs: int = Field(20, ge=1, le=1000)
    batch_size: int = Field(32, ge=1)
    learning_rate: float = Field(0.01, gt=0)
    seed: Optional[int] = None


class EpochOut(BaseModel):
    epoch: int
    loss: float
    accuracy: float


class TrainResponse(BaseModel):
    epochs: List[EpochOut]


class PredictRequest(BaseModel):
    # mapping feature -> value, or values in feature order
    features: Union[Dict[str, Optional[Union[float, str]]], List[Optional[Union[float, str]]]]


class PredictionResponse(BaseModel):
    probability: float
    percent: str


class ModelStatusResponse(BaseModel):
    status: str
    key: Optional[str] = None
