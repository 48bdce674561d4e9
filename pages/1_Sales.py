import streamlit as st
import pandas as pd

from config import load_settings
from element_component import load_collections, require_session
from services.metrics_service import summarize_sales
from services.report_service import sales_csv, sales_frame
from utils.formatting import format_currency, format_percentage

settings = load_settings()
require_session()
currency = settings.currency_symbol

st.title("🛒 Sales Dashboard")

sales = load_collections("sales")["sales"]
summary = summarize_sales(sales)
split = summary.split

# -----------------------------------------------------------------------------
# KPI cards
# -----------------------------------------------------------------------------
col_total, col_avg, col_split = st.columns(3)
col_total.metric("Total Sales", format_currency(summary.total_revenue, currency))
col_avg.metric("Average Sale", format_currency(summary.average_sale, currency))
col_split.metric(
    "Online vs In-Store",
    f"{format_percentage(split.online_pct)} / {format_percentage(split.in_store_pct)}",
)
leader = "Online" if split.online_pct >= split.in_store_pct else "In-store"
col_split.caption(f"{leader} leading by {abs(split.online_pct - split.in_store_pct):.0f}%")

# -----------------------------------------------------------------------------
# Trend
# -----------------------------------------------------------------------------
st.subheader("Sales Trend")
if summary.monthly:
    df_trend = pd.DataFrame(
        [{"Month": p.label, "Online": p.online, "In-Store": p.in_store} for p in summary.monthly]
    )
    # keep the series order instead of sorting labels alphabetically
    df_trend["Month"] = pd.Categorical(df_trend["Month"], categories=df_trend["Month"], ordered=True)
    st.area_chart(df_trend, x="Month", y=["Online", "In-Store"], stack=True)
else:
    st.info("No sales to chart yet.")

tab_top, tab_recent, tab_all = st.tabs(["Top Products", "Recent Sales", "All Sales"])

with tab_top:
    st.dataframe(
        [
            {
                "Rank": p.rank,
                "Product Name": p.name,
                "Sales": round(p.quantity, 2),
                "Revenue": format_currency(p.revenue, currency),
            }
            for p in summary.top_products
        ],
        hide_index=True,
        width="stretch",
    )

with tab_recent:
    st.dataframe(
        [
            {
                "Product": s.product,
                "Customer": s.customer,
                "Date": s.date,
                "Amount": format_currency(s.amount, currency),
                "Status": s.status,
            }
            for s in summary.recent
        ],
        hide_index=True,
        width="stretch",
    )

with tab_all:
    df_sales = sales_frame(sales)
    st.dataframe(df_sales, hide_index=True, width="stretch")

    drifted = df_sales[df_sales["total_discrepancy"] != 0]
    if not drifted.empty:
        st.warning(
            f"{len(drifted)} sale(s) have a stored total that does not match their line items."
        )

    st.download_button(
        "Download as CSV",
        data=sales_csv(sales),
        file_name="sales.csv",
        mime="text/csv",
    )
