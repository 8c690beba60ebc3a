import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(ROOT))

import matplotlib.pyplot as plt
import numpy as np
import streamlit as st
from sklearn.metrics import classification_report, confusion_matrix, roc_auc_score

from streamlit_app.state import init_state

# -------------------------------------------------
# Page config
# -------------------------------------------------
st.set_page_config(page_title="Model Metrics", layout="wide")

session = init_state()

st.title("📊 Model Metrics")

# -------------------------------------------------
# Safety checks
# -------------------------------------------------
if session.prepared is None or session.model is None:
    st.warning("Please prepare a dataset and train or load a model first.")
    st.stop()

if list(session.model.feature_names or []) != list(session.prepared.feature_names):
    st.error("The current model was trained on different features than the prepared dataset.")
    st.stop()

threshold = st.slider("Decision threshold", 0.05, 0.95, 0.5, 0.05)

y_true = session.prepared.y.astype(int)
y_prob = session.predict_training_set()
y_pred = (y_prob >= threshold).astype(int)

st.caption("Evaluated on the prepared training rows.")

# ---- Confusion Matrix ----
cm = confusion_matrix(y_true, y_pred, labels=[0, 1])

fig, ax = plt.subplots()
ax.imshow(cm, cmap="Blues")
ax.set_xticks([0, 1])
ax.set_yticks([0, 1])
ax.set_xticklabels(["OK", "FAILURE"])
ax.set_yticklabels(["OK", "FAILURE"])
ax.set_xlabel("Predicted")
ax.set_ylabel("Actual")

for i in range(2):
    for j in range(2):
        ax.text(j, i, cm[i, j], ha="center", va="center")

st.subheader("Confusion Matrix")
st.pyplot(fig)

# ---- Classification report ----
st.subheader("Classification Report")
st.code(
    classification_report(
        y_true,
        y_pred,
        labels=[0, 1],
        target_names=["OK", "FAILURE"],
        digits=4,
        zero_division=0
    )
)

if len(np.unique(y_true)) == 2:
    st.metric("ROC AUC", f"{roc_auc_score(y_true, y_prob):.4f}")
