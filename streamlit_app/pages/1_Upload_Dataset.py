import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(ROOT))

import pandas as pd
import streamlit as st

from pipeline.errors import FailurePredictorError
from preprocessor.csv_parser import to_csv_text
from preprocessor.stats import stats_frame
from streamlit_app.state import init_state

session = init_state()
cfg = st.session_state["settings"]

st.title("📂 Upload Dataset")

st.markdown(f"""
Upload a **sensor data CSV** with a header row.  
The label column must be named **`{session.label_name}`**; every other column is a feature.
""")

uploaded_file = st.file_uploader(
    "Upload CSV file",
    type=["csv"]
)

col1, col2 = st.columns(2)
example_rows = col1.number_input("Example rows", min_value=10, max_value=100000,
                                 value=int(cfg["example_rows"]), step=100)
example_btn = col2.button("🧪 Generate example CSV")

if uploaded_file is not None and st.session_state.get("uploaded_name") != uploaded_file.name:
    try:
        text = uploaded_file.getvalue().decode("utf-8-sig")
    except UnicodeDecodeError:
        st.error("CSV must be UTF-8 text")
        st.stop()
    with st.spinner("Reading CSV..."):
        session.load_csv_text(text)
    st.session_state["uploaded_name"] = uploaded_file.name
    st.success(f"Loaded {len(session.table):,} rows")

if example_btn:
    session.load_example(int(example_rows), seed=cfg["example_seed"])
    st.session_state["uploaded_name"] = None
    st.success(f"Example CSV generated ({len(session.table):,} rows)")

if session.table is None:
    st.info("ℹ️ No CSV loaded yet. Upload a file or generate the example dataset.")
    st.stop()

summary = session.summary(cfg["preview_rows"])

st.subheader("Dataset Summary")
st.write("**Columns:**", ", ".join(summary.headers))
st.write("**Rows:**", summary.n_rows)

st.subheader("Feature stats")
st.dataframe(stats_frame(summary.feature_stats), use_container_width=True)

with st.expander("Preview", expanded=True):
    if summary.preview:
        st.dataframe(pd.DataFrame(summary.preview, columns=summary.headers), use_container_width=True)
    else:
        st.write("_No rows parsed yet_")

st.download_button(
    "⬇️ Download CSV",
    to_csv_text(session.table.headers, session.table.rows),
    file_name="sensor_data.csv",
    mime="text/csv"
)

if not summary.has_label:
    st.error(f'CSV must include "{session.label_name}" column')
    st.stop()

# -----------------------------
# Prepare
# -----------------------------
if st.button("⚙️ Parse & prepare"):
    try:
        session.prepare()
    except FailurePredictorError as e:
        st.error(str(e))
        st.stop()

if session.prepared is not None:
    data = session.prepared
    st.success(f"Prepared train data. Rows: {data.n_rows:,} (dropped {data.dropped_rows:,})")

    st.subheader(f"Feature preview: {data.feature_names[0]}" if data.feature_names else "Feature preview")
    preview = data.feature_preview(30)
    if preview:
        st.bar_chart(pd.DataFrame({data.feature_names[0]: preview}, index=range(1, len(preview) + 1)))
