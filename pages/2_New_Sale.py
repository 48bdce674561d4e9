import streamlit as st
import pandas as pd

from config import load_settings
from element_component import load_collections, require_session
from services.sale_service import SaleDraft, submit_sale
from services.validation import validate_customer
from utils.formatting import format_currency, format_quantity
from utils.units import UNITS

settings = load_settings()
require_session()
currency = settings.currency_symbol

st.title("➕ New Sale")

# -----------------------------------------------------------------------------
# Session state defaults
# -----------------------------------------------------------------------------
if "sale_draft" not in st.session_state:
    st.session_state["sale_draft"] = SaleDraft()
    st.session_state["sale_saved"] = False

defaults = {
    "customer_name": "",
    "customer_phone": "",
    "notes": "",
    "is_recurring": False,
    "is_online": False,
}

for k, v in defaults.items():
    st.session_state.setdefault(k, v)

draft: SaleDraft = st.session_state["sale_draft"]
products = load_collections("products")["products"]
product_by_id = {p.id: p for p in products}

# -----------------------------------------------------------------------------
# 1) Add products
# -----------------------------------------------------------------------------
st.subheader("Add Products")

if not products:
    st.warning("No products in inventory yet.")
else:
    with st.form("add_item_form", clear_on_submit=True):
        product_id = st.selectbox(
            "Select Product",
            options=list(product_by_id),
            index=None,
            placeholder="Select a product",
            format_func=lambda pid: (
                f"{product_by_id[pid].name} - {format_currency(product_by_id[pid].price, currency)}"
                f" (Stock: {product_by_id[pid].stock:g} {product_by_id[pid].unit})"
            ),
        )
        col_qty, col_unit = st.columns([2, 1])
        with col_qty:
            quantity = st.number_input("Quantity", min_value=0.01, step=0.01, value=1.0)
        with col_unit:
            unit = st.selectbox("Unit", UNITS)

        use_custom_price = st.toggle("Use Custom Price")
        custom_price = st.number_input("Custom Price", min_value=0.0, step=0.01, value=0.0)

        if st.form_submit_button("Add to Sale"):
            if product_id is None:
                st.error("Please select a product.")
            else:
                try:
                    draft.add_item(
                        products,
                        product_id,
                        quantity,
                        unit,
                        custom_price if use_custom_price else None,
                    )
                    st.session_state["sale_saved"] = False
                except ValueError as e:
                    st.error(str(e))

# -----------------------------------------------------------------------------
# 2) Working list
# -----------------------------------------------------------------------------
st.subheader("Sale Items")

if draft.is_empty():
    st.info("No items added yet.")
else:
    df_items = pd.DataFrame(
        [
            {
                "Product": item.name,
                "Quantity": format_quantity(item.quantity, item.unit),
                "Price": format_currency(item.effective_price, currency),
                "Total": format_currency(item.line_total, currency),
            }
            for item in draft.items
        ]
    )
    st.dataframe(df_items, width="stretch")

    remove_index = st.selectbox(
        "Remove item",
        options=range(len(draft.items)),
        format_func=lambda i: f"{i}: {draft.items[i].name}",
        index=None,
        placeholder="Pick an item to remove",
    )
    if st.button("Remove", disabled=remove_index is None):
        draft.remove_item(remove_index)
        st.rerun()

st.markdown(f"**Total Sale Price: {format_currency(draft.total(), currency)}**")

# -----------------------------------------------------------------------------
# 3) Customer + submit
# -----------------------------------------------------------------------------
with st.form("sale_form", enter_to_submit=False):
    st.subheader("Customer Information")
    st.text_input("Customer Name", key="customer_name")
    st.text_input("Customer Phone", key="customer_phone")

    st.subheader("Additional Information")
    st.text_area("Notes", key="notes")
    st.toggle("Recurring Sale", key="is_recurring")
    st.toggle("Online Sale", key="is_online")

    submitted = st.form_submit_button("Complete Sale", type="primary")

    if submitted:
        errors = validate_customer(
            st.session_state["customer_name"], st.session_state["customer_phone"]
        )
        if errors:
            for message in errors:
                st.error(message)
        else:
            ok, msg, _ = submit_sale(
                draft,
                customer_name=st.session_state["customer_name"],
                customer_phone=st.session_state["customer_phone"],
                notes=st.session_state["notes"],
                is_recurring=st.session_state["is_recurring"],
                is_online=st.session_state["is_online"],
            )
            if ok:
                for k in defaults:
                    del st.session_state[k]
                st.session_state["sale_saved"] = True
                st.rerun()
            else:
                st.error(msg)

if st.session_state["sale_saved"]:
    st.success("Sale completed successfully!")
