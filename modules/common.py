# modules/common.py - Common utility functions
import pandas as pd
from datetime import date
from decimal import Decimal
from typing import Dict, Tuple, Any, Optional, Union, List
from io import BytesIO
import streamlit as st
import logging

from utils.config import config
from .models import Product, RawMaterial
from .inventory import InventoryManager
from .products import ProductManager

logger = logging.getLogger(__name__)

Number = Union[int, float, Decimal, None]


@st.cache_data(ttl=config.CACHE_TTL)
def get_products() -> List[Product]:
    """Get all products with their materials"""
    return ProductManager().get_products()


@st.cache_data(ttl=config.CACHE_TTL)
def get_raw_materials() -> List[RawMaterial]:
    """Get all raw materials"""
    return InventoryManager().get_raw_materials()


def clear_cache() -> None:
    """Drop cached backend data after a change"""
    get_products.clear()
    get_raw_materials.clear()


def _is_missing(value: Any) -> bool:
    return value is None or (not isinstance(value, Decimal) and pd.isna(value))


def format_number(value: Number, decimal_places: int = 2) -> str:
    """Format number with thousand separators"""
    if _is_missing(value):
        return "0"
    return f"{value:,.{decimal_places}f}"


def format_currency(value: Number, currency: Optional[str] = None) -> str:
    """Format currency value"""
    symbol = config.CURRENCY_SYMBOL if currency is None else currency
    if _is_missing(value):
        return f"{symbol}0.00"
    return f"{symbol}{value:,.2f}"


def format_quantity(value: Number, unit: str = "") -> str:
    """Format a stock or BOM quantity, dropping trailing zeros"""
    if _is_missing(value):
        text = "0"
    else:
        text = f"{value:,.4f}".rstrip("0").rstrip(".")
    return f"{text} {unit}".strip()


def create_status_indicator(status: str) -> str:
    """Plain-text status with an emoji marker, for tables and titles"""
    indicators = {
        'AVAILABLE': '🟢',
        'LOW_STOCK': '🟡',
        'STOCK_OUT': '🔴',
    }
    return f"{indicators.get(status.upper(), '⚪')} {status.replace('_', ' ').title()}"


def export_to_excel(dataframes_dict: Dict[str, pd.DataFrame]) -> bytes:
    """Export multiple dataframes to Excel file"""
    output = BytesIO()

    try:
        with pd.ExcelWriter(output, engine='xlsxwriter') as writer:
            for sheet_name, df in dataframes_dict.items():
                # Excel sheet name limit is 31 characters
                safe_sheet_name = sheet_name[:31]
                df.to_excel(writer, sheet_name=safe_sheet_name, index=False)

                # Auto-adjust column widths
                worksheet = writer.sheets[safe_sheet_name]
                for i, col in enumerate(df.columns):
                    longest = df[col].astype(str).str.len().max() if not df.empty else 0
                    column_width = max(longest, len(str(col))) + 2
                    worksheet.set_column(i, i, min(column_width, 50))

        return output.getvalue()
    except Exception as e:
        logger.error(f"Error exporting to Excel: {e}")
        raise


def create_download_button(data: Union[pd.DataFrame, Dict[str, pd.DataFrame]],
                           filename: str, label: str = "Download", file_type: str = "csv",
                           key: Optional[str] = None) -> None:
    """Create download button for data export"""
    if file_type == "csv":
        if isinstance(data, dict):
            data = next(iter(data.values()))
        st.download_button(
            label=f"📥 {label}",
            data=data.to_csv(index=False),
            file_name=filename,
            mime="text/csv",
            use_container_width=True,
            key=key
        )

    elif file_type == "excel":
        try:
            if isinstance(data, dict):
                excel_data = export_to_excel(data)
            else:
                excel_data = export_to_excel({"Sheet1": data})

            st.download_button(
                label=f"📥 {label}",
                data=excel_data,
                file_name=filename,
                mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                use_container_width=True,
                key=key
            )
        except Exception as e:
            st.error(f"Error creating Excel file: {str(e)}")


def export_filename(prefix: str, extension: str) -> str:
    return f"{prefix}_{date.today()}.{extension}"


def log_activity(activity_type: str, reference: str, details: Optional[Dict] = None) -> None:
    """Log user activity"""
    logger.info(f"Activity: {activity_type} - {reference}")
    if details:
        logger.debug(f"Details: {details}")


def show_success_message(message: str) -> Any:
    placeholder = st.empty()
    placeholder.success(message)
    return placeholder


def show_error_message(message: str, details: Optional[str] = None) -> None:
    """Show error message with optional details"""
    st.error(message)
    if details:
        with st.expander("Error Details"):
            st.code(details)


def confirm_action(message: str, key: str) -> Tuple[bool, bool]:
    """Show confirmation prompt with confirm and cancel buttons"""
    col1, col2, col3 = st.columns([2, 1, 1])
    with col1:
        st.warning(message)
    with col2:
        confirm = st.button("✓ Confirm", key=f"{key}_confirm",
                            type="primary", use_container_width=True)
    with col3:
        cancel = st.button("✗ Cancel", key=f"{key}_cancel",
                           use_container_width=True)

    return confirm, cancel


def calculate_percentage(numerator: Number, denominator: Number,
                         decimal_places: int = 1) -> float:
    """Calculate percentage safely"""
    if _is_missing(denominator) or _is_missing(numerator) or denominator == 0:
        return 0.0

    percentage = (float(numerator) / float(denominator)) * 100
    return round(percentage, decimal_places)
