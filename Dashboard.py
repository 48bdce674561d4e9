import streamlit as st

from config import configure_logging, load_settings
from services.auth_service import (
    current_session,
    end_session,
    init_session,
    set_session,
    sign_in,
    sign_out,
    visible_pages,
)

configure_logging()
settings = load_settings()

st.set_page_config(page_title="POS System", page_icon="🏪", layout="wide")

init_session(st.session_state)


def login_page():
    st.title("🏪 POS System")
    st.caption("Sign in with your store account")

    with st.form("login_form", enter_to_submit=True):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign In", type="primary")

    if submitted:
        ok, msg, context = sign_in(email, password, settings.admin_email)
        if ok:
            set_session(st.session_state, context)
            st.rerun()
        else:
            st.error(msg)


PAGE_FILES = {
    "Dashboard": ("pages/0_Overview.py", "📊"),
    "Sales": ("pages/1_Sales.py", "🛒"),
    "New Sale": ("pages/2_New_Sale.py", "➕"),
    "Inventory": ("pages/3_Inventory.py", "📦"),
    "Reports": ("pages/4_Reports.py", "📄"),
    "Customers": ("pages/5_Customers.py", "👥"),
}

context = current_session(st.session_state)

if context is None:
    navigation = st.navigation([st.Page(login_page, title="Login", icon="🔑")])
else:
    pages = [
        st.Page(PAGE_FILES[name][0], title=name, icon=PAGE_FILES[name][1])
        for name in visible_pages(context.role)
    ]
    navigation = st.navigation(pages)

    st.sidebar.write(f"Signed in as **{context.email}** ({context.role})")
    if st.sidebar.button("Logout"):
        ok, msg = sign_out()
        if ok:
            end_session(st.session_state)
            st.toast(msg)
            st.rerun()
        else:
            st.sidebar.error(msg)

navigation.run()
