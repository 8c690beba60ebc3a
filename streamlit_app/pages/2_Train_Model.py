import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(ROOT))

import pandas as pd
import streamlit as st

from pipeline.errors import FailurePredictorError
from streamlit_app.state import init_state

session = init_state()
cfg = st.session_state["settings"]

st.title("🧠 Train Model")

# -----------------------------
# Safety check
# -----------------------------
if session.prepared is None:
    st.warning("No training data. Upload and prepare a CSV first.")
    st.stop()

st.write(f"Training rows: **{session.prepared.n_rows:,}** · Features: **{len(session.prepared.feature_names)}**")

# -----------------------------
# Hyperparameters
# -----------------------------
col1, col2, col3 = st.columns(3)
epochs = col1.number_input("Epochs", min_value=1, max_value=1000, key="epochs")
batch_size = col2.number_input("Batch size", min_value=1, max_value=4096, key="batch_size")
learning_rate = col3.number_input("Learning rate", min_value=0.0001, max_value=1.0,
                                  format="%.4f", key="learning_rate")

train_btn = st.button("🚀 Train")

chart = st.empty()
status_text = st.empty()

if train_btn:
    progress_bar = st.progress(0)
    log = []

    def on_epoch_end(epoch, result):
        log.append({"epoch": epoch + 1, "loss": result.loss, "accuracy": result.accuracy})
        chart.line_chart(pd.DataFrame(log).set_index("epoch"))
        status_text.text(f"Epoch {epoch + 1}: loss {result.loss:.4f} acc {result.accuracy:.3f}")
        progress_bar.progress((epoch + 1) / int(epochs))

    try:
        with st.spinner("Training..."):
            session.train(
                epochs=int(epochs),
                batch_size=int(batch_size),
                learning_rate=float(learning_rate),
                on_epoch_end=on_epoch_end,
                seed=cfg["train_seed"],
            )
        st.success("Training complete.")
    except FailurePredictorError as e:
        st.error(f"Training failed: {e}")
    finally:
        progress_bar.empty()

# Always show the last history if present
elif session.history:
    df = pd.DataFrame(
        [{"epoch": r.epoch + 1, "loss": r.loss, "accuracy": r.accuracy} for r in session.history]
    ).set_index("epoch")
    chart.line_chart(df)
    last = session.history[-1]
    status_text.text(f"Epoch {last.epoch + 1}: loss {last.loss:.4f} acc {last.accuracy:.3f}")
