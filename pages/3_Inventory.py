import streamlit as st
import pandas as pd

from config import load_settings
from element_component import (
    confirmation_dialog_single_submission,
    load_collections,
    require_admin,
    require_session,
)
from services.inventory_service import (
    category_names,
    filter_products,
    group_subcategories,
    inventory_overview,
    orphan_subcategories,
    stock_status,
)
from services.validation import validate_category, validate_product, validate_subcategory
from utils.barcode import barcode_png
from utils.formatting import format_currency
from utils.units import UNITS

settings = load_settings()
require_admin(require_session())
currency = settings.currency_symbol
threshold = settings.low_stock_threshold

st.title("📦 Inventory Management")

for state_name in ("product_input_state", "category_input_state", "subcategory_input_state"):
    if state_name not in st.session_state:
        st.session_state[state_name] = False

data = load_collections("products", "categories", "subcategories")
products = data["products"]
categories = data["categories"]
subcategories = data["subcategories"]
category_label = category_names(categories)
category_ids = list(category_label)

# -----------------------------------------------------------------------------
# Overview
# -----------------------------------------------------------------------------
overview = inventory_overview(products, threshold)
col_total, col_low, col_out = st.columns(3)
col_total.metric("Total Products", overview.total_products)
col_low.metric("Low Stock Items", overview.low_stock)
col_out.metric("Out of Stock", overview.out_of_stock)

tab_list, tab_chart, tab_categories, tab_add = st.tabs(
    ["Inventory List", "Inventory Chart", "Categories", "Add New"]
)

# -----------------------------------------------------------------------------
# List + barcode labels
# -----------------------------------------------------------------------------
with tab_list:
    search = st.text_input("Search Inventory", placeholder="Search by product name or SKU...")
    shown = filter_products(products, search)

    df_products = pd.DataFrame(
        [
            {
                "Name": p.name,
                "SKU": p.sku,
                "Category": category_label.get(p.category_id, p.category_id or "-"),
                "Price": format_currency(p.price, currency),
                "Stock": f"{p.stock:g} {p.unit}",
                "Status": stock_status(p, threshold),
            }
            for p in shown
        ]
    )
    st.dataframe(df_products, hide_index=True, width="stretch")

    with_sku = [p for p in shown if p.sku]
    if with_sku:
        label_product = st.selectbox(
            "Print SKU label",
            options=with_sku,
            index=None,
            format_func=lambda p: f"{p.sku} - {p.name}",
            placeholder="Pick a product",
        )
        if label_product is not None:
            png = barcode_png(label_product.sku)
            st.image(png, caption=label_product.sku)
            st.download_button(
                "Download label",
                data=png,
                file_name=f"{label_product.sku}.png",
                mime="image/png",
            )

with tab_chart:
    if products:
        st.bar_chart(pd.DataFrame({"Product": [p.name for p in products],
                                   "Stock": [p.stock for p in products]}),
                     x="Product", y="Stock")
    else:
        st.info("No products yet.")

# -----------------------------------------------------------------------------
# Category browser
# -----------------------------------------------------------------------------
with tab_categories:
    if not categories:
        st.info("No categories yet.")
    for category, subs in group_subcategories(categories, subcategories):
        with st.expander(f"{category.name} ({len(subs)})"):
            if category.description:
                st.caption(category.description)
            for sub in subs:
                st.write(f"- **{sub.name}** {sub.description}")

    orphans = orphan_subcategories(categories, subcategories)
    if orphans:
        st.warning(
            "Subcategories without an existing parent: "
            + ", ".join(sub.name for sub in orphans)
        )

# -----------------------------------------------------------------------------
# Forms
# -----------------------------------------------------------------------------
with tab_add:
    with st.form("product_input_form", enter_to_submit=False):
        st.subheader("Add New Product")
        name = st.text_input("Product Name")
        sku = st.text_input("SKU")
        category_id = st.selectbox(
            "Category",
            options=category_ids,
            index=None,
            format_func=lambda cid: category_label[cid],
            placeholder="Select a category",
        )
        subcategory = st.selectbox(
            "Subcategory (optional)",
            options=subcategories,
            index=None,
            format_func=lambda s: f"{category_label.get(s.category_id, '?')} / {s.name}",
        )
        col_price, col_cost = st.columns(2)
        price = col_price.number_input("Price", min_value=0.0, step=0.01)
        cost_price = col_cost.number_input(
            "Cost Price (optional)", min_value=0.0, step=0.01, value=None
        )
        col_stock, col_unit = st.columns(2)
        stock = col_stock.number_input("Stock", min_value=0.0, step=0.01)
        unit = col_unit.selectbox("Unit", UNITS)
        description = st.text_area("Description")

        if st.form_submit_button("Add Product"):
            st.session_state["product_input_state"] = False
            values = {
                "name": name.strip(),
                "sku": sku.strip(),
                "category_id": category_id,
                "subcategory_id": subcategory.id if subcategory else None,
                "price": price,
                "cost_price": cost_price,
                "stock": stock,
                "unit": unit,
                "description": description,
            }
            errors = validate_product(values, category_ids)
            if values["sku"] and any(p.sku.lower() == values["sku"].lower() for p in products):
                errors.append(f"SKU '{values['sku']}' already exists")
            if subcategory and subcategory.category_id != category_id:
                errors.append("Subcategory does not belong to the selected category.")
            if errors:
                for message in errors:
                    st.error(message)
            else:
                confirmation_dialog_single_submission(
                    "products",
                    values,
                    "product_input_state",
                    labels={"category_id": category_label[category_id]},
                )

    if st.session_state["product_input_state"]:
        st.success("Product added to the inventory")

    with st.form("category_input_form", enter_to_submit=False):
        st.subheader("Add New Category")
        cat_name = st.text_input("Category Name")
        cat_description = st.text_area("Description", key="category_description")

        if st.form_submit_button("Add Category"):
            st.session_state["category_input_state"] = False
            values = {"name": cat_name.strip(), "description": cat_description}
            errors = validate_category(values, [c.name for c in categories])
            if errors:
                for message in errors:
                    st.error(message)
            else:
                confirmation_dialog_single_submission("categories", values, "category_input_state")

    if st.session_state["category_input_state"]:
        st.success("Category added successfully")

    with st.form("subcategory_input_form", enter_to_submit=False):
        st.subheader("Add New Subcategory")
        parent_id = st.selectbox(
            "Parent Category",
            options=category_ids,
            index=None,
            format_func=lambda cid: category_label[cid],
            placeholder="Select a category",
        )
        sub_name = st.text_input("Subcategory Name")
        sub_description = st.text_area("Description", key="subcategory_description")

        if st.form_submit_button("Add Subcategory"):
            st.session_state["subcategory_input_state"] = False
            values = {"name": sub_name.strip(), "description": sub_description, "category_id": parent_id}
            errors = validate_subcategory(values, category_ids)
            if errors:
                for message in errors:
                    st.error(message)
            else:
                confirmation_dialog_single_submission(
                    "subcategories",
                    values,
                    "subcategory_input_state",
                    labels={"category_id": category_label[parent_id]},
                )

    if st.session_state["subcategory_input_state"]:
        st.success("Subcategory added successfully")
