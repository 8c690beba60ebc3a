# preprocessor/helpers.py
"""
Small helper utilities shared by the preprocessing, training and UI code.
"""

from pathlib import Path
import json
import logging
import os
import sys

import yaml

ROOT = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml"
CONFIG_ENV_VAR = "FAILURE_PREDICTOR_CONFIG"

DEFAULTS = {
    "label_column": "failure",
    "example_rows": 1000,
    "example_seed": None,
    "epochs": 20,
    "batch_size": 32,
    "learning_rate": 0.01,
    "train_seed": None,
    "model_store_dir": "models/artifacts",
    "model_key": "pipeline-failure-model",
    "preview_rows": 8,
    "log_level": "INFO",
}

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def load_config(path=None):
    """
    Load the YAML config, falling back to DEFAULTS for missing keys.
    Path resolution: explicit argument, then $FAILURE_PREDICTOR_CONFIG,
    then preprocessor/config.yaml.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)

    with open(path, "r") as f:
        loaded = yaml.safe_load(f) or {}

    cfg = dict(DEFAULTS)
    cfg.update(loaded)
    return cfg


def resolve_path(value):
    """Relative paths in the config are relative to the repo root."""
    p = Path(value)
    return p if p.is_absolute() else ROOT / p


def configure_logging(level="INFO"):
    root = logging.getLogger()
    if not any(getattr(h, "_failure_predictor", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
        handler._failure_predictor = True
        root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)


def save_json(obj, path):
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w") as f:
        json.dump(obj, f, indent=2)
