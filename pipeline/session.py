# pipeline/session.py
"""
Per-user working state: the parsed table, the prepared training snapshot,
and the current model.

    load CSV / example -> prepare -> train -> predict / save
                                      load ----^

A new table or snapshot replaces the previous one wholesale.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from api.failure_model import (
    EpochResult,
    create_model,
    deserialize_model,
    predict_one,
    predict_proba,
    serialize_model,
    train_model,
)
from pipeline.csv_preprocessor import LABEL_COLUMN, PreparedData, parse_prediction_input, prepare_dataset
from pipeline.errors import (
    EmptyDatasetError,
    MalformedInputError,
    ModelUnavailableError,
    PersistenceError,
)
from preprocessor.csv_parser import ParsedTable, parse_csv_text
from preprocessor.example_data import generate_example_csv
from preprocessor.normalizer import scale_one
from preprocessor.stats import FeatureStat, compute_feature_stats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatasetSummary:
    headers: List[str]
    n_rows: int
    feature_stats: Dict[str, Optional[FeatureStat]]
    preview: List[Dict[str, str]]
    has_label: bool


class Session:
    def __init__(self, label_name=LABEL_COLUMN):
        self.label_name = label_name
        self.table: Optional[ParsedTable] = None
        self.prepared: Optional[PreparedData] = None
        self.model = None
        self.history: List[EpochResult] = []

    # ---------------- Data ----------------
    def load_csv_text(self, text) -> ParsedTable:
        self.table = parse_csv_text(text)
        logger.info("CSV loaded, headers: %s", ", ".join(self.table.headers))
        return self.table

    def load_example(self, n_rows=1000, seed=None) -> ParsedTable:
        self.table = parse_csv_text(generate_example_csv(n_rows, seed=seed))
        logger.info("Example CSV generated (%d rows)", len(self.table))
        return self.table

    def summary(self, preview_rows=8) -> DatasetSummary:
        if self.table is None:
            raise MalformedInputError("No CSV loaded")
        features = [h for h in self.table.headers if h != self.label_name]
        return DatasetSummary(
            headers=list(self.table.headers),
            n_rows=len(self.table),
            feature_stats=compute_feature_stats(self.table.rows, features),
            preview=self.table.head(preview_rows),
            has_label=self.label_name in self.table.headers,
        )

    def prepare(self) -> PreparedData:
        if self.table is None:
            raise MalformedInputError("No CSV loaded")
        self.prepared = prepare_dataset(self.table, self.label_name)
        return self.prepared

    # ---------------- Model ----------------
    def train(self, epochs=20, batch_size=32, learning_rate=0.01, on_epoch_end=None, seed=None):
        data = self.prepared
        if data is None:
            raise EmptyDatasetError("No training data, parse CSV first")

        labels = np.unique(data.y)
        if labels.min() < 0 or labels.max() > 1:
            raise MalformedInputError(
                f'Label "{data.label_name}" must be 0/1 (found values outside [0, 1])'
            )

        model = create_model(len(data.feature_names), learning_rate, seed=seed)
        model.feature_names = data.feature_names
        model.normalization = data.params

        logger.info("Training started: epochs=%d batch_size=%d lr=%g", epochs, batch_size, learning_rate)
        history = train_model(model, data.X, data.y, epochs, batch_size, on_epoch_end=on_epoch_end, seed=seed)
        logger.info("Training complete.")

        self.model = model
        self.history = history
        return history

    def _require_model(self):
        if self.model is None:
            raise ModelUnavailableError("No model loaded. Train or load a model first")
        return self.model

    @property
    def feature_names(self):
        if self.model is not None and self.model.feature_names:
            return list(self.model.feature_names)
        if self.prepared is not None:
            return list(self.prepared.feature_names)
        return []

    def predict(self, values) -> float:
        model = self._require_model()

        params = model.normalization
        if params is None and self.prepared is not None:
            params = self.prepared.params
        if params is None:
            raise ModelUnavailableError("Model has no normalization parameters, prepare data first")

        sample = parse_prediction_input(values, self.feature_names)
        p = predict_one(model, scale_one(sample, params))
        logger.info("Predicted probability: %.4f", p)
        return p

    def predict_training_set(self) -> np.ndarray:
        """Probabilities for every prepared row (metrics page)."""
        model = self._require_model()
        if self.prepared is None:
            raise EmptyDatasetError("No training data, parse CSV first")
        return predict_proba(model, self.prepared.X)

    def reset_model(self):
        self.model = None
        self.history = []
        logger.info("Model reset")

    # ---------------- Persistence ----------------
    def save_model(self, store, key):
        blob = serialize_model(self._require_model())
        store.save(key, blob)
        logger.info("Model saved under '%s'", key)

    def load_model(self, store, key):
        blob = store.load(key)
        try:
            self.model = deserialize_model(blob)
        except Exception as e:
            raise PersistenceError(f"Stored model '{key}' could not be read: {e}", key=key) from e
        logger.info("Model loaded from '%s'", key)
        return self.model
