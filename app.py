# app.py - Inventory & Production Main Entry Point
import streamlit as st
from utils.api import ApiError
from utils.config import config
from modules.production import ProductionManager
from modules.common import (
    get_products, get_raw_materials, clear_cache, format_currency, show_error_message
)
import logging

# Configure logging
logging.basicConfig(level=getattr(logging, config.LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

# Page configuration
st.set_page_config(
    page_title=config.APP_TITLE,
    page_icon="🏭",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        margin-bottom: 1rem;
        color: #1f77b4;
    }
    .info-box {
        padding: 1rem;
        border-radius: 0.5rem;
        background-color: #f0f2f6;
        margin-bottom: 1rem;
    }
    .stButton>button {
        width: 100%;
    }
</style>
""", unsafe_allow_html=True)

st.markdown(f'<p class="main-header">🏭 {config.APP_TITLE}</p>', unsafe_allow_html=True)

with st.sidebar:
    st.markdown("### ⚙️ Backend")
    st.code(config.API_BASE_URL, language=None)
    if st.button("🔄 Reload Data", use_container_width=True):
        clear_cache()
        st.rerun()
    st.markdown("---")
    st.markdown("### 📍 Navigation")
    st.info("Use the pages above to navigate between modules")

st.markdown("## Overview")

# Quick stats
try:
    products = get_products()
    materials = get_raw_materials()
    prod_manager = ProductionManager()
    capacities = prod_manager.get_suggestions()
except ApiError as e:
    show_error_message("Could not load data from the inventory backend", str(e))
    logger.error(f"Error loading overview: {e}")
    st.stop()

summary = prod_manager.get_report_summary(capacities)
low_stock = [m for m in materials if m.stock_quantity < config.LOW_STOCK_THRESHOLD]

col1, col2, col3, col4 = st.columns(4)
with col1:
    st.metric(label="📋 Products", value=len(products))
with col2:
    st.metric(label="📦 Raw Materials", value=len(materials))
with col3:
    st.metric(label="💰 Potential Revenue", value=format_currency(summary['total_value']))
with col4:
    st.metric(
        label="⚠️ Low Stock Items",
        value=len(low_stock),
        delta="Requires attention" if low_stock else None,
        delta_color="inverse"
    )

st.markdown("---")

# Quick actions
st.markdown("### 🚀 Quick Actions")
col1, col2, col3 = st.columns(3)

with col1:
    st.markdown('<div class="info-box">', unsafe_allow_html=True)
    st.markdown("#### 🏭 Production")
    st.markdown("See how many units of each product current stock can make")
    if st.button("Go to Production →", key="btn_production"):
        st.switch_page("pages/1_🏭_Production.py")
    st.markdown('</div>', unsafe_allow_html=True)

with col2:
    st.markdown('<div class="info-box">', unsafe_allow_html=True)
    st.markdown("#### 📋 Products")
    st.markdown("Register products and the raw materials they are made of")
    if st.button("Manage Products →", key="btn_products"):
        st.switch_page("pages/2_📋_Products.py")
    st.markdown('</div>', unsafe_allow_html=True)

with col3:
    st.markdown('<div class="info-box">', unsafe_allow_html=True)
    st.markdown("#### 📦 Raw Materials")
    st.markdown("Keep raw material stock levels and costs up to date")
    if st.button("Manage Raw Materials →", key="btn_materials"):
        st.switch_page("pages/3_📦_Raw_Materials.py")
    st.markdown('</div>', unsafe_allow_html=True)

# Products that cannot be produced
stock_out = [c for c in capacities if not c.is_producible]
if stock_out:
    st.markdown("---")
    st.markdown("### 🔴 Products Out of Stock")
    for capacity in stock_out:
        if capacity.product.materials:
            st.warning(f"{capacity.product.code} - {capacity.product.name}: insufficient raw materials")
        else:
            st.info(f"{capacity.product.code} - {capacity.product.name}: no materials associated")

# Footer
st.markdown("---")
st.markdown(
    """
    <div style='text-align: center; color: #888;'>
    Inventory & Production v1.0
    </div>
    """,
    unsafe_allow_html=True
)
