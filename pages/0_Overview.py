import streamlit as st

from config import load_settings
from element_component import load_collections, require_session
from services.inventory_service import inventory_overview
from services.metrics_service import summarize_sales
from utils.formatting import format_currency

settings = load_settings()
context = require_session()

st.title("📊 Dashboard")
st.caption(f"Welcome back, {context.email}")

names = ("sales", "products") if context.is_admin else ("sales",)
data = load_collections(*names)
summary = summarize_sales(data["sales"])

col_rev, col_avg, col_count = st.columns(3)
col_rev.metric("Total Revenue", format_currency(summary.total_revenue, settings.currency_symbol))
col_avg.metric("Average Sale", format_currency(summary.average_sale, settings.currency_symbol))
col_count.metric("Sales", len(data["sales"]))

if context.is_admin:
    overview = inventory_overview(data["products"], settings.low_stock_threshold)
    col_total, col_low, col_out = st.columns(3)
    col_total.metric("Total Products", overview.total_products)
    col_low.metric("Low Stock Items", overview.low_stock)
    col_out.metric("Out of Stock", overview.out_of_stock)

st.subheader("Recent Sales")
if summary.recent:
    st.dataframe(
        [
            {
                "Product": sale.product,
                "Customer": sale.customer,
                "Date": sale.date,
                "Amount": format_currency(sale.amount, settings.currency_symbol),
                "Status": sale.status,
            }
            for sale in summary.recent
        ],
        hide_index=True,
        width="stretch",
    )
else:
    st.info("No sales recorded yet.")
