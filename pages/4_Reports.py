import streamlit as st
import pandas as pd

from config import load_settings
from element_component import load_collections, require_admin, require_session
from services.metrics_service import (
    PERIODS,
    period_series,
    profit_margin,
    sale_profit,
    summarize_sales,
    total_revenue,
)
from services.report_service import (
    archive_report,
    build_sales_report_docx,
    report_filename,
    sales_csv,
)
from utils.formatting import format_currency

settings = load_settings()
require_admin(require_session())
currency = settings.currency_symbol

st.title("📄 Reports Dashboard")

period = st.selectbox("Period", PERIODS, index=PERIODS.index("monthly"), format_func=str.title)

sales = load_collections("sales")["sales"]
points = period_series(sales, period)

# headline figures include sales whose date could not be read
revenue = total_revenue(sales)
profit = sum(sale_profit(sale) for sale in sales)

col_rev, col_profit, col_margin = st.columns(3)
col_rev.metric("Total Revenue", format_currency(revenue, currency))
col_profit.metric("Total Profit", format_currency(profit, currency))
col_margin.metric("Profit Margin", f"{profit_margin(revenue, profit):.2f}%")
st.caption("Profit counts only line items whose product had a cost price when sold.")

tab_trend, tab_top = st.tabs(["Sales Trend", "Top Products"])

with tab_trend:
    if points:
        df_points = pd.DataFrame(
            [{"Period": p.label, "Revenue": p.revenue, "Profit": p.profit} for p in points]
        )
        df_points["Period"] = pd.Categorical(df_points["Period"], categories=df_points["Period"], ordered=True)
        st.line_chart(df_points, x="Period", y=["Revenue", "Profit"])
    else:
        st.info("No sales to report yet.")

summary = summarize_sales(sales)

with tab_top:
    st.dataframe(
        [
            {
                "ID": p.rank,
                "Product Name": p.name,
                "Sales": round(p.quantity, 2),
                "Revenue": format_currency(p.revenue, currency),
            }
            for p in summary.top_products
        ],
        hide_index=True,
        width="stretch",
    )

# -----------------------------------------------------------------------------
# Export
# -----------------------------------------------------------------------------
st.divider()
st.subheader("Generate Report")

docx_bytes = build_sales_report_docx(summary, sales, currency)
filename = report_filename()

col_docx, col_csv = st.columns(2)
with col_docx:
    st.download_button(
        "Download report (DOCX)",
        data=docx_bytes,
        file_name=filename,
        mime="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    )
with col_csv:
    st.download_button(
        "Download sales (CSV)",
        data=sales_csv(sales),
        file_name=report_filename(extension="csv"),
        mime="text/csv",
    )

if settings.report_folder_id:
    if st.button("Archive to Google Drive"):
        ok, msg, link = archive_report(docx_bytes, filename, settings.report_folder_id)
        if ok:
            st.success(f"{msg}: {link}" if link else msg)
        else:
            st.error(f"Archive failed: {msg}")
