from __future__ import annotations

import streamlit as st

from core.logging_config import configure_logging

configure_logging()

st.set_page_config(page_title="Tarpaulin Dashboard", page_icon="🧾", layout="wide")

pages = [
    st.Page("home.py", title="Home", icon="🏠"),
    st.Page("pages/1_🧾_Purchase_Entry.py", title="Purchase Entry", icon="🧾"),
    st.Page("pages/2_🛒_Sales_Entry.py", title="Sales Entry", icon="🛒"),
    st.Page("pages/3_📦_Inventory.py", title="Inventory", icon="📦"),
    st.Page("pages/4_🧪_Data_Management.py", title="Data Management", icon="🧪"),
]

st.navigation(pages).run()
