# scripts/train_from_csv.py
"""
Headless training run:
 - parses a sensor CSV (or generates the example dataset)
 - prepares + normalizes it
 - trains the failure classifier
 - saves the model blob to the configured model store

Usage:
    python scripts/train_from_csv.py data/pipes.csv --epochs 30
    python scripts/train_from_csv.py --example --seed 7
"""

# ------------------------------------------------------------
# IMPORT & PATH FIX
# ------------------------------------------------------------
import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

import argparse
import logging

from api.model_store import ModelStore
from pipeline.errors import FailurePredictorError
from pipeline.session import Session
from preprocessor.helpers import configure_logging, load_config, resolve_path, save_json

logger = logging.getLogger("train_from_csv")


def build_parser(cfg):
    p = argparse.ArgumentParser(description="Train the pipeline failure classifier from a CSV file.")
    p.add_argument("csv", nargs="?", help="CSV file with a header row and a label column")
    p.add_argument("--example", action="store_true", help="Use the generated example dataset")
    p.add_argument("--rows", type=int, default=cfg["example_rows"], help="Example dataset rows")
    p.add_argument("--seed", type=int, default=cfg["train_seed"], help="Seed for example data and training")
    p.add_argument("--epochs", type=int, default=cfg["epochs"])
    p.add_argument("--batch-size", type=int, default=cfg["batch_size"])
    p.add_argument("--lr", type=float, default=cfg["learning_rate"])
    p.add_argument("--config", help="Alternative YAML config")
    p.add_argument("--report", help="Write the training history as JSON to this path")
    p.add_argument("--no-save", action="store_true", help="Do not save the trained model")
    return p


def run(args, cfg):
    session = Session(label_name=cfg["label_column"])

    if args.example:
        session.load_example(args.rows, seed=args.seed)
    else:
        text = Path(args.csv).read_text(encoding="utf-8-sig")
        session.load_csv_text(text)

    data = session.prepare()
    logger.info("Rows: %d (dropped %d)", data.n_rows, data.dropped_rows)

    history = session.train(
        epochs=args.epochs,
        batch_size=args.batch_size,
        learning_rate=args.lr,
        seed=args.seed,
    )

    if args.report:
        save_json(
            {
                "features": list(data.feature_names),
                "rows": data.n_rows,
                "normalization": data.params.to_dict(),
                "history": [{"epoch": r.epoch, "loss": r.loss, "accuracy": r.accuracy} for r in history],
            },
            args.report,
        )
        logger.info("Report saved -> %s", args.report)

    if not args.no_save:
        store = ModelStore(resolve_path(cfg["model_store_dir"]))
        session.save_model(store, cfg["model_key"])

    return history


def main(argv=None):
    # --config has to be known before defaults are filled in
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config")
    known, _ = pre.parse_known_args(argv)
    cfg = load_config(known.config)
    configure_logging(cfg["log_level"])

    parser = build_parser(cfg)
    args = parser.parse_args(argv)
    if not args.example and not args.csv:
        parser.error("either a CSV path or --example is required")

    try:
        run(args, cfg)
    except FailurePredictorError as e:
        logger.error("Training failed: %s", e)
        return 1
    return 0


# ------------------------------------------------------------
# MAIN
# ------------------------------------------------------------
if __name__ == "__main__":
    raise SystemExit(main())
