import logging
from typing import Optional

from fastapi import Depends, FastAPI, File, HTTPException, UploadFile

from api.dependencies import get_model_key, get_session, get_settings, get_store, session_lock
from api.schemas import (
    DatasetSummaryResponse,
    EpochOut,
    ExampleRequest,
    FeatureStatOut,
    ModelStatusResponse,
    PredictionResponse,
    PredictRequest,
    PrepareResponse,
    TrainRequest,
    TrainResponse,
)
from pipeline.errors import (
    EmptyDatasetError,
    FailurePredictorError,
    InvalidPredictionInputError,
    MalformedInputError,
    ModelUnavailableError,
    PersistenceError,
)
from preprocessor.helpers import configure_logging

configure_logging(get_settings()["log_level"])
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Pipeline Failure Predictor",
    version="1.0.0"
)


def to_http_error(e: FailurePredictorError) -> HTTPException:
    if isinstance(e, (MalformedInputError, EmptyDatasetError, InvalidPredictionInputError)):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, ModelUnavailableError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, PersistenceError):
        return HTTPException(status_code=404 if e.missing else 500, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


def summary_response(session) -> DatasetSummaryResponse:
    s = session.summary(get_settings()["preview_rows"])
    return DatasetSummaryResponse(
        headers=s.headers,
        rows=s.n_rows,
        has_label=s.has_label,
        feature_stats={
            k: (FeatureStatOut(min=v.min, max=v.max, mean=v.mean) if v else None)
            for k, v in s.feature_stats.items()
        },
        preview=s.preview,
    )


@app.get("/")
def root():
    return {"status": "Failure predictor API running"}


@app.get("/health")
def health(session=Depends(get_session), store=Depends(get_store), key=Depends(get_model_key)):
    return {
        "status": "healthy",
        "service": "failure-predictor-api",
        "dataset_loaded": session.table is not None,
        "data_prepared": session.prepared is not None,
        "model_loaded": session.model is not None,
        "model_saved": store.exists(key),
    }


# ---------------- Dataset ----------------
@app.post("/dataset/csv", response_model=DatasetSummaryResponse)
def upload_csv(file: UploadFile = File(...), session=Depends(get_session)):
    raw = file.file.read()
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV must be UTF-8 text")

    with session_lock:
        session.load_csv_text(text)
        return summary_response(session)


@app.post("/dataset/example", response_model=DatasetSummaryResponse)
def load_example(req: Optional[ExampleRequest] = None, session=Depends(get_session)):
    req = req or ExampleRequest(rows=get_settings()["example_rows"], seed=get_settings()["example_seed"])
    with session_lock:
        session.load_example(req.rows, seed=req.seed)
        return summary_response(session)


@app.get("/dataset", response_model=DatasetSummaryResponse)
def dataset_summary(session=Depends(get_session)):
    try:
        with session_lock:
            return summary_response(session)
    except FailurePredictorError as e:
        raise to_http_error(e)


@app.post("/dataset/prepare", response_model=PrepareResponse)
def prepare(session=Depends(get_session)):
    try:
        with session_lock:
            data = session.prepare()
    except FailurePredictorError as e:
        raise to_http_error(e)

    return PrepareResponse(
        features=list(data.feature_names),
        label=data.label_name,
        rows=data.n_rows,
        dropped_rows=data.dropped_rows,
        mins=list(data.params.mins),
        maxs=list(data.params.maxs),
    )


# ---------------- Model ----------------
@app.post("/train", response_model=TrainResponse)
def train(req: TrainRequest, session=Depends(get_session)):
    try:
        with session_lock:
            history = session.train(
                epochs=req.epochs,
                batch_size=req.batch_size,
                learning_rate=req.learning_rate,
                seed=req.seed,
            )
    except FailurePredictorError as e:
        raise to_http_error(e)

    return TrainResponse(
        epochs=[EpochOut(epoch=r.epoch, loss=r.loss, accuracy=r.accuracy) for r in history]
    )


@app.post("/predict", response_model=PredictionResponse)
def predict(req: PredictRequest, session=Depends(get_session)):
    try:
        with session_lock:
            p = session.predict(req.features)
    except FailurePredictorError as e:
        raise to_http_error(e)

    return PredictionResponse(probability=p, percent=f"{p * 100:.2f}%")


@app.post("/model/save", response_model=ModelStatusResponse)
def save_model(session=Depends(get_session), store=Depends(get_store), key=Depends(get_model_key)):
    try:
        with session_lock:
            session.save_model(store, key)
    except FailurePredictorError as e:
        logger.warning("Save failed: %s", e)
        raise to_http_error(e)
    return ModelStatusResponse(status="saved", key=key)


@app.post("/model/load", response_model=ModelStatusResponse)
def load_model(session=Depends(get_session), store=Depends(get_store), key=Depends(get_model_key)):
    try:
        with session_lock:
            session.load_model(store, key)
    except FailurePredictorError as e:
        logger.warning("Load failed: %s", e)
        raise to_http_error(e)
    return ModelStatusResponse(status="loaded", key=key)


@app.post("/model/reset", response_model=ModelStatusResponse)
def reset_model(session=Depends(get_session)):
    with session_lock:
        session.reset_model()
    return ModelStatusResponse(status="reset")


@app.delete("/model", response_model=ModelStatusResponse)
def delete_model(store=Depends(get_store), key=Depends(get_model_key)):
    try:
        store.delete(key)
    except PersistenceError as e:
        logger.warning("Delete failed: %s", e)
        raise to_http_error(e)
    return ModelStatusResponse(status="deleted", key=key)
