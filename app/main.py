"""
Streamlit Frontend for CashMind

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Every change is saved explicitly, and a failed save is shown
3. Syncing is a button press, never automatic
4. Nothing is shown until the user has signed in or signed up

Signed-in state lives only in st.session_state; restarting the app
signs the user out.
"""

import asyncio
from decimal import Decimal

import streamlit as st

from cashmind.audit import AuditLogger
from cashmind.config import get_settings, validate_all_settings
from cashmind.models.budget import BUDGET_CATEGORIES
from cashmind.models.expense import CUSTOM_CATEGORY, ExpenseCategory
from cashmind.orchestrator import AuthFlow, ExpenseFlow, create_app_components
from cashmind.queries import calculate_budget
from cashmind.services.store import NotFoundError, StoreError
from cashmind.services.sync import SyncError
from cashmind.validation import parse_amount, resolve_category


# Page configuration
st.set_page_config(
    page_title="CashMind",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .success-box {
        padding: 20px;
        background-color: #d4edda;
        border-radius: 10px;
        border-left: 5px solid #28a745;
        margin: 10px 0;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    return create_app_components()


def init_session_state():
    settings = get_settings().app
    defaults = {
        "authenticated": False,
        "username": None,
        "email": "",
        "monthly_income": str(settings.default_monthly_income),
        "preferred_currency": settings.preferred_currency,
        "auth_mode": "sign_in",
        "auth_error": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def money(value) -> str:
    return f"${Decimal(value):,.2f}"


def current_income() -> Decimal:
    return parse_amount(st.session_state.monthly_income) or Decimal("0")


def main():
    """Main application entry point."""
    try:
        expense_flow, auth_flow, _ = get_components()
    except (StoreError, SyncError, ValueError) as e:
        AuditLogger().log_error(type(e).__name__, str(e))
        st.error(f"Failed to initialize: {e}")
        st.stop()

    init_session_state()

    if not st.session_state.authenticated:
        render_auth_page(auth_flow)
        return

    st.sidebar.title("💰 CashMind")
    st.sidebar.markdown(f"Signed in as **{st.session_state.username}**")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🏠 Dashboard", "🧾 Expenses", "📐 Budget", "📊 Analytics", "⚙️ Settings"],
        index=0,
    )

    if page == "🏠 Dashboard":
        render_dashboard_page(expense_flow)
    elif page == "🧾 Expenses":
        render_expenses_page(expense_flow)
    elif page == "📐 Budget":
        render_budget_page()
    elif page == "📊 Analytics":
        render_analytics_page(expense_flow)
    elif page == "⚙️ Settings":
        render_settings_page(auth_flow)


def render_auth_page(auth_flow: AuthFlow):
    """Render sign in / sign up."""
    st.title("💰 CashMind")

    signing_up = st.session_state.auth_mode == "sign_up"

    username = st.text_input("Username")
    password = st.text_input("Password", type="password")
    email = st.text_input("Email") if signing_up else ""

    col1, col2 = st.columns(2)

    with col1:
        if signing_up:
            if st.button("Create Account", type="primary"):
                with st.spinner("Creating your account..."):
                    outcome = run_async(auth_flow.sign_up(username, password, email))
                _apply_auth_outcome(outcome, email=email)
        else:
            if st.button("Confirm Sign In", type="primary"):
                with st.spinner("Signing in..."):
                    outcome = run_async(auth_flow.sign_in(username, password))
                _apply_auth_outcome(outcome)

    with col2:
        label = "Back to Sign In" if signing_up else "Sign Up"
        if st.button(label):
            st.session_state.auth_mode = "sign_in" if signing_up else "sign_up"
            st.session_state.auth_error = None
            st.rerun()

    if st.session_state.auth_error:
        st.markdown(f"""
        <div class="error-box">
            <p>{st.session_state.auth_error}</p>
        </div>
        """, unsafe_allow_html=True)


def _apply_auth_outcome(outcome, email: str = ""):
    if outcome.authenticated:
        st.session_state.authenticated = True
        st.session_state.username = outcome.username
        if email:
            st.session_state.email = email
        st.session_state.auth_error = None
        if outcome.remote_registered is False:
            st.toast("Account saved on this device; the server did not confirm it.")
    else:
        st.session_state.auth_error = outcome.error_message
    st.rerun()


def render_dashboard_page(expense_flow: ExpenseFlow):
    """Render the monthly overview."""
    st.title("🏠 Dashboard")
    st.markdown("Your Monthly Budget Overview")

    overview = expense_flow.dashboard_overview(current_income())

    col1, col2, col3 = st.columns(3)
    col1.metric("Total Income", money(overview.total_income))
    col2.metric("Total Expenses", money(overview.total_expenses))
    col3.metric("Remaining Budget", money(overview.remaining_budget))


def render_expenses_page(expense_flow: ExpenseFlow):
    """Render the expense list, the add form and the sync button."""
    st.title("🧾 Expenses")

    expenses = expense_flow.list_expenses()

    if not expenses:
        st.info("No expenses recorded")
    else:
        for record in expenses:
            col1, col2 = st.columns([5, 1])
            with col1:
                st.markdown(f"**{record.display_category}** - {record.amount:.2f}")
                if record.notes:
                    st.caption(record.notes)
            with col2:
                if st.button("🗑️", key=f"delete-{record.id}"):
                    try:
                        result = expense_flow.delete_expense(record.id)
                    except NotFoundError as e:
                        st.error(str(e))
                    else:
                        if result.failed:
                            st.error(f"Failed to delete: {result.error_message}")
                        else:
                            st.rerun()

    st.markdown("---")
    st.subheader("Add Expense")

    amount_text = st.text_input("Amount")
    options = [category.value for category in ExpenseCategory] + [CUSTOM_CATEGORY]
    selected = st.selectbox("Category", options=options)
    custom = st.text_input("Custom Category") if selected == CUSTOM_CATEGORY else None
    notes = st.text_input("Notes")

    col1, col2 = st.columns(2)

    with col1:
        if st.button("➕ Add Expense", type="primary"):
            record, result = expense_flow.add_expense(
                amount_text,
                resolve_category(selected, custom),
                notes,
            )
            if result is not None and result.failed:
                st.error(f"Failed to save: {result.error_message}")
            elif record is not None:
                st.rerun()

    with col2:
        if st.button("🔄 Sync Expenses"):
            with st.spinner("Syncing..."):
                succeeded = run_async(expense_flow.sync_expenses())
            if succeeded:
                st.success("Expenses synced")
            else:
                st.error("Sync failed")


def render_budget_page():
    """Render the budget planner."""
    st.title("📐 Budget Planner")
    st.markdown(f"Monthly Income: {money(current_income())}")

    allocation_texts = {
        name: st.text_input(f"{name.title()} Budget", key=f"budget-{name}")
        for name in BUDGET_CATEGORIES
    }

    if st.button("Set Budget", type="primary"):
        summary = calculate_budget(st.session_state.monthly_income, allocation_texts)
        if summary is not None:
            st.session_state.budget_summary = summary

    summary = st.session_state.get("budget_summary")
    if summary is not None:
        st.markdown(f"Total Budget: {money(summary.total_budget)}")
        st.markdown(f"Allocated Budget: {money(summary.allocated)}")
        st.markdown(f"Remaining Budget: {money(summary.remaining)}")
        if summary.is_over_budget:
            st.warning("Your allocations exceed your income.")


def render_analytics_page(expense_flow: ExpenseFlow):
    """Render spending per category."""
    st.title("📊 Analytics")
    st.markdown("Visualize your spending trends")

    summary = expense_flow.spending_summary()

    if not summary.totals_by_category:
        st.info("No expenses recorded")
        return

    st.bar_chart({name: float(total) for name, total in summary.totals_by_category.items()})

    for name, total in summary.totals_by_category.items():
        col1, col2 = st.columns([3, 1])
        col1.markdown(name)
        col2.markdown(money(total))


def _load_profile(auth_flow: AuthFlow):
    profile = run_async(auth_flow.fetch_profile())
    if profile is None:
        st.session_state.profile_error = "Could not load your profile"
    else:
        st.session_state.username = profile.name
        st.session_state.email = profile.email
        st.session_state.profile_error = None


def _log_out(auth_flow: AuthFlow):
    auth_flow.sign_out(st.session_state.username)
    st.session_state.authenticated = False
    st.session_state.username = None


def render_settings_page(auth_flow: AuthFlow):
    """Render profile, preferences and log out."""
    st.title("⚙️ Settings")

    st.markdown("### User Profile")

    st.button("⬇️ Load Profile From Server", on_click=_load_profile, args=(auth_flow,))
    if st.session_state.get("profile_error"):
        st.error(st.session_state.profile_error)

    # Widgets are unkeyed so the values outlive this page
    st.session_state.username = st.text_input("Username", value=st.session_state.username or "")
    st.session_state.email = st.text_input("Email", value=st.session_state.email)
    st.session_state.monthly_income = st.text_input(
        "Monthly Income",
        value=st.session_state.monthly_income,
    )
    st.session_state.preferred_currency = st.text_input(
        "Preferred Currency",
        value=st.session_state.preferred_currency,
    )

    st.markdown("---")
    st.markdown("### Connection Status")

    status = validate_all_settings()
    for key in ("store", "api", "app"):
        if status.get(key, False):
            st.success(f"✅ {key.title()} settings OK")
        else:
            st.error(f"❌ {key.title()} - {status.get(f'{key}_error', 'Not configured')}")

    st.markdown("---")

    st.button("Log Out", on_click=_log_out, args=(auth_flow,))



if __name__ == "__main__":
    main()
