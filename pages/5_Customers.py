import streamlit as st

from config import load_settings
from element_component import load_collections, require_session
from services.metrics_service import customer_summaries, filter_customers
from utils.formatting import format_currency

settings = load_settings()
require_session()
currency = settings.currency_symbol

st.title("👥 Customers")

sales = load_collections("sales")["sales"]
customers = customer_summaries(sales)

total_spent = sum(c.total_spent for c in customers)
total_orders = sum(c.orders for c in customers)
returning = sum(1 for c in customers if c.orders > 1)

col_count, col_avg, col_returning = st.columns(3)
col_count.metric("Total Customers", len(customers))
col_avg.metric(
    "Average Order Value",
    format_currency(total_spent / total_orders if total_orders else 0, currency),
)
col_returning.metric(
    "Returning Customers",
    f"{(returning / len(customers) * 100) if customers else 0:.0f}%",
)

search = st.text_input("Search customers...", placeholder="Name or phone")
shown = filter_customers(customers, search)

st.dataframe(
    [
        {
            "Name": c.name,
            "Phone": c.phone,
            "Total Orders": c.orders,
            "Total Spent": format_currency(c.total_spent, currency),
            "Last Purchase": c.last_purchase,
        }
        for c in shown
    ],
    hide_index=True,
    width="stretch",
)

selected = st.selectbox(
    "Purchase history",
    options=shown,
    index=None,
    format_func=lambda c: f"{c.name} ({c.phone})",
    placeholder="Pick a customer",
)
if selected is not None:
    history = [
        {
            "Date": s.date[:10],
            "Items": ", ".join(item.name for item in s.items),
            "Amount": format_currency(s.total_price, currency),
        }
        for s in sales
        if s.customer_name.strip() == selected.name and s.customer_phone.strip() == selected.phone
    ]
    st.dataframe(history, hide_index=True, width="stretch")
