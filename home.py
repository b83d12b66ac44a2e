from __future__ import annotations

import streamlit as st

from core.config import get_settings
from core.db import get_conn, ensure_schema
from core.services.demo_data import upsert_reference_data

st.set_page_config(page_title="Tarpaulin Dashboard", page_icon="🧾", layout="wide")

st.title("🧾 Tarpaulin Trading: Inventory Dashboard")
st.caption("Log purchases (per-size pieces + weight, landed cost per kg) and sales; remaining stock, cost value and estimated profit are derived.")

settings = get_settings()
conn = get_conn(settings.db_path)
ensure_schema(conn)
upsert_reference_data(conn)

with st.sidebar:
    st.subheader("Environment")
    st.write(f"**Data directory:** `{settings.data_dir}`")
    st.write(f"**Database:** `{settings.db_path.name}`")
    st.write(f"**Default branch:** `{settings.default_branch}`")

st.info(
    "Use the left sidebar navigation. Start with **🧪 Data Management** to load demo data, then try **Purchase Entry**, **Sales Entry** and **Inventory**.",
    icon="ℹ️",
)
