import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

import streamlit as st

from streamlit_app.state import init_state

st.set_page_config(
    page_title="Pipeline Failure Predictor",
    layout="wide"
)

session = init_state()

with st.sidebar:
    st.header("Navigation")
    st.write("Use pages to navigate")

st.title("🛠️ Pipeline Failure Predictor")

st.markdown("""
Upload pipeline **sensor data (CSV)**, train a small neural network that
predicts the `failure` label, and score single pipe segments.

1. **Upload Dataset**: upload a CSV or generate the example dataset, then prepare it
2. **Train Model**: pick epochs / batch size / learning rate and watch loss & accuracy
3. **Predict**: enter one value per feature to get a failure probability
4. **Model Metrics**: confusion matrix on the training data
""")

col1, col2, col3 = st.columns(3)
col1.metric("Rows loaded", len(session.table) if session.table is not None else 0)
col2.metric("Rows prepared", session.prepared.n_rows if session.prepared is not None else 0)
col3.metric("Model", "ready" if session.model is not None else "none")
