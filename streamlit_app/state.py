import streamlit as st

from api.model_store import ModelStore
from pipeline.session import Session
from preprocessor.helpers import configure_logging, load_config, resolve_path


def init_state():
    if "settings" not in st.session_state:
        st.session_state["settings"] = load_config()
        configure_logging(st.session_state["settings"]["log_level"])

    cfg = st.session_state["settings"]
    defaults = {
        "session": lambda: Session(label_name=cfg["label_column"]),
        "model_store": lambda: ModelStore(resolve_path(cfg["model_store_dir"])),
        "epochs": lambda: cfg["epochs"],
        "batch_size": lambda: cfg["batch_size"],
        "learning_rate": lambda: cfg["learning_rate"],
    }

    for k, make in defaults.items():
        if k not in st.session_state:
            st.session_state[k] = make()

    return st.session_state["session"]
