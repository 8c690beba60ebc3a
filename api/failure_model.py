# api/failure_model.py
"""
Small binary classifier predicting pipeline failure.

    Dense(32, relu) -> Dense(16, relu) -> Dense(1, sigmoid)
    Adam + binary cross-entropy, shuffled mini-batches.
"""

import io
import logging
from dataclasses import dataclass

import numpy as np
import torch
import torch.nn as nn
from torch.utils.data import DataLoader, TensorDataset

from pipeline.errors import ModelUnavailableError
from preprocessor.normalizer import NormalizationParams

logger = logging.getLogger(__name__)


# ---------------- NETWORK ----------------
class FailureClassifier(nn.Module):
    def __init__(self, input_dim):
        super().__init__()
        self.net = nn.Sequential(
            nn.Linear(input_dim, 32),
            nn.ReLU(),
            nn.Linear(32, 16),
            nn.ReLU(),
            nn.Linear(16, 1),
            nn.Sigmoid(),
        )

    def forward(self, x):
        return self.net(x)


@dataclass(frozen=True)
class EpochResult:
    epoch: int
    loss: float
    accuracy: float


class FailureModel:
    """
    Model handle: network + optimizer, plus the feature names and
    normalization params it was trained with.
    """

    def __init__(self, input_dim, learning_rate=0.01):
        self.input_dim = int(input_dim)
        self.learning_rate = float(learning_rate)
        self.network = FailureClassifier(self.input_dim)
        self.optimizer = torch.optim.Adam(self.network.parameters(), lr=self.learning_rate)
        self.feature_names = None
        self.normalization = None

    @property
    def is_trained(self):
        return self.normalization is not None


def create_model(input_dim, learning_rate=0.01, seed=None) -> FailureModel:
    if seed is not None:
        torch.manual_seed(seed)
    model = FailureModel(input_dim, learning_rate)
    logger.info("Created model: input_dim=%d lr=%g", model.input_dim, model.learning_rate)
    return model


# ---------------- TRAINING ----------------
def train_model(model, X, y, epochs=20, batch_size=32, on_epoch_end=None, seed=None):
    """
    Fit on normalized X / 0-1 labels y.
    on_epoch_end(epoch_index, EpochResult) fires once per epoch, in order.
    Returns the list of EpochResult.
    """
    X = torch.tensor(np.array(X, dtype=np.float32))
    y = torch.tensor(np.array(y, dtype=np.float32)).reshape(-1, 1)

    if X.shape[0] == 0:
        raise ValueError("Cannot train on an empty dataset")
    if X.shape[1] != model.input_dim:
        raise ValueError(f"Model expects {model.input_dim} features, got {X.shape[1]}")

    generator = torch.Generator()
    if seed is not None:
        generator.manual_seed(seed)

    loader = DataLoader(
        TensorDataset(X, y),
        batch_size=max(1, int(batch_size)),
        shuffle=True,
        generator=generator,
    )
    criterion = nn.BCELoss()
    history = []

    for epoch in range(int(epochs)):
        model.network.train()
        total_loss = 0.0
        correct = 0.0

        for xb, yb in loader:
            model.optimizer.zero_grad()
            out = model.network(xb)
            loss = criterion(out, yb)
            loss.backward()
            model.optimizer.step()

            total_loss += loss.item() * xb.shape[0]
            correct += ((out >= 0.5).float() == yb).sum().item()

        result = EpochResult(
            epoch=epoch,
            loss=total_loss / len(loader.dataset),
            accuracy=correct / len(loader.dataset),
        )
        history.append(result)
        logger.info("Epoch %d/%d | loss: %.4f | acc: %.3f",
                    epoch + 1, epochs, result.loss, result.accuracy)

        if on_epoch_end is not None:
            on_epoch_end(epoch, result)

    model.network.eval()
    return history


# ---------------- INFERENCE ----------------
def predict_proba(model, X) -> np.ndarray:
    """Normalized rows -> failure probabilities."""
    if model is None:
        raise ModelUnavailableError("No model loaded")
    x = torch.tensor(np.atleast_2d(np.array(X, dtype=np.float32)))
    model.network.eval()
    with torch.no_grad():
        out = model.network(x)
    return out.reshape(-1).cpu().numpy().astype(np.float64)


def predict_one(model, normalized_sample) -> float:
    return float(predict_proba(model, [normalized_sample])[0])


# ---------------- SERIALIZATION ----------------
def serialize_model(model) -> bytes:
    if model is None:
        raise ModelUnavailableError("No model to save")
    payload = {
        "state_dict": model.network.state_dict(),
        "input_dim": model.input_dim,
        "learning_rate": model.learning_rate,
        "feature_names": list(model.feature_names) if model.feature_names else None,
        "normalization": model.normalization.to_dict() if model.normalization else None,
    }
    buf = io.BytesIO()
    torch.save(payload, buf)
    return buf.getvalue()


def deserialize_model(blob: bytes) -> FailureModel:
    payload = torch.load(io.BytesIO(blob), map_location="cpu", weights_only=True)

    model = FailureModel(payload["input_dim"], payload.get("learning_rate", 0.01))
    model.network.load_state_dict(payload["state_dict"])
    model.network.eval()

    if payload.get("feature_names"):
        model.feature_names = list(payload["feature_names"])
    if payload.get("normalization"):
        model.normalization = NormalizationParams.from_dict(payload["normalization"])
    return model
