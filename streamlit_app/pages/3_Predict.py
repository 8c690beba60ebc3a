import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(ROOT))

import streamlit as st

from pipeline.errors import FailurePredictorError, ModelUnavailableError, PersistenceError
from streamlit_app.state import init_state

session = init_state()
cfg = st.session_state["settings"]
store = st.session_state["model_store"]
key = cfg["model_key"]

st.title("🔮 Predict Failure")

# -----------------------------
# Model controls
# -----------------------------
col1, col2, col3 = st.columns(3)

if col1.button("💾 Save model", disabled=session.model is None):
    try:
        session.save_model(store, key)
        st.success("Model saved")
    except FailurePredictorError as e:
        st.error(f"Save failed: {e}")

if col2.button("📥 Load model"):
    try:
        session.load_model(store, key)
        st.success("Model loaded")
    except PersistenceError as e:
        st.error(f"Load failed: {e}")

if col3.button("♻️ Reset model"):
    session.reset_model()
    st.info("Model reset")

st.divider()

features = session.feature_names
if not features:
    st.warning("Train or load a model first.")
    st.stop()

stats = session.prepared.stats if session.prepared is not None else {}

# -----------------------------
# Inputs (text so empty stays empty)
# -----------------------------
values = {}
cols = st.columns(min(3, len(features)))
for i, f in enumerate(features):
    stat = stats.get(f)
    placeholder = f"{stat.min:.2f} – {stat.max:.2f}" if stat else ""
    values[f] = cols[i % len(cols)].text_input(f, placeholder=placeholder, key=f"predict_{f}")

if st.button("Predict", disabled=session.model is None):
    try:
        p = session.predict(values)
    except ModelUnavailableError:
        st.error("Prediction failed. Train or load a model first.")
        st.stop()
    except FailurePredictorError as e:
        st.error(str(e))
        st.stop()

    st.metric("Failure probability", f"{p * 100:.2f}%")
