"""
Streamlit Frontend for the Expense Tracker

The view binding layer: it turns render snapshots into a page and user
gestures (form submission, delete click, filter/sort selection) into calls
on the tracker's actions. All numbers shown come from the snapshot; the
page never computes anything itself.

Run with:
    streamlit run app/main.py
"""

import asyncio

import streamlit as st

from expense_tracker.config import validate_all_settings
from expense_tracker.models.expense import ExpenseCategory, RenderSnapshot, SortMode
from expense_tracker.orchestrator import ExpenseTrackerApp, create_app
from expense_tracker.validation import ExpenseValidationError


SORT_LABELS = {
    SortMode.DATE_DESC: "Date (Newest First)",
    SortMode.DATE_ASC: "Date (Oldest First)",
    SortMode.AMOUNT_DESC: "Amount (Highest First)",
    SortMode.AMOUNT_ASC: "Amount (Lowest First)",
}

ALL_CATEGORIES = "All Categories"


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💰",
    layout="wide",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .empty-state {
        padding: 20px;
        text-align: center;
        color: #6c757d;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
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


def get_tracker() -> ExpenseTrackerApp:
    """One tracker per browser session, loaded on first use."""
    if "tracker" not in st.session_state:
        tracker = create_app()
        # Snapshot listener: the page redraws from the latest render
        tracker.subscribe(lambda snapshot: st.session_state.__setitem__("snapshot", snapshot))
        st.session_state.tracker = tracker
        with st.spinner("Loading expenses..."):
            run_async(tracker.start())
    return st.session_state.tracker


def on_filter_change():
    choice = st.session_state.category_filter
    st.session_state.tracker.set_filter(None if choice == ALL_CATEGORIES else choice)


def on_sort_change():
    st.session_state.tracker.set_sort(st.session_state.sort_by)


def main():
    """Main application entry point."""
    problems = {k: v for k, v in validate_all_settings().items() if k.endswith("_error")}
    if problems:
        st.error("Configuration error:\n" + "\n".join(problems.values()))
        st.stop()

    tracker = get_tracker()
    snapshot: RenderSnapshot = st.session_state.get("snapshot") or tracker.snapshot()
    symbol = tracker.currency_symbol

    st.title("💰 Expense Tracker")

    render_summary(snapshot, symbol)
    st.markdown("---")

    form_col, list_col = st.columns([1, 2])
    with form_col:
        render_add_form(tracker)
    with list_col:
        render_expense_list(tracker, snapshot, symbol)

    render_activity_sidebar(tracker)


def render_summary(snapshot: RenderSnapshot, symbol: str):
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Expenses", f"{symbol}{snapshot.total}")
    col2.metric("This Month", f"{symbol}{snapshot.monthly_total}")
    col3.metric("Largest Expense", f"{symbol}{snapshot.largest}")


def render_add_form(tracker: ExpenseTrackerApp):
    """Render the add-expense form."""
    st.subheader("Add Expense")

    with st.form("expense-form", clear_on_submit=True):
        name = st.text_input("Expense Name", placeholder="e.g. Groceries")
        amount = st.number_input("Amount", min_value=0.0, step=0.01, format="%.2f", value=None)
        category = st.selectbox(
            "Category",
            options=[""] + [c.value for c in ExpenseCategory],
            format_func=lambda x: x or "Select a category",
        )
        expense_date = st.date_input("Date", value=tracker.default_form_date())
        submitted = st.form_submit_button("Add Expense", type="primary")

    if submitted:
        try:
            expense = tracker.add_expense(name, amount, category, expense_date)
            st.toast(f"Added {expense.name} ({tracker.currency_symbol}{expense.formatted_amount})")
            st.rerun()
        except ExpenseValidationError as e:
            st.error(str(e))


def render_expense_list(tracker: ExpenseTrackerApp, snapshot: RenderSnapshot, symbol: str):
    """Render filters and the filtered/sorted list."""
    st.subheader("Expenses")

    col1, col2 = st.columns(2)
    with col1:
        options = [ALL_CATEGORIES] + [c.value for c in ExpenseCategory]
        current = snapshot.filter.value if snapshot.filter else ALL_CATEGORIES
        st.selectbox(
            "Filter by category",
            options=options,
            index=options.index(current),
            key="category_filter",
            on_change=on_filter_change,
        )
    with col2:
        modes = list(SORT_LABELS)
        st.selectbox(
            "Sort by",
            options=[m.value for m in modes],
            index=modes.index(snapshot.sort),
            format_func=lambda v: SORT_LABELS[SortMode(v)],
            key="sort_by",
            on_change=on_sort_change,
        )

    if snapshot.loading:
        st.info("Loading expenses...")
        return

    if snapshot.load_error:
        st.markdown(f"""
        <div class="error-box">
            <h4>Could not load expenses</h4>
            <p>{snapshot.load_error}</p>
        </div>
        """, unsafe_allow_html=True)

    if snapshot.is_empty:
        st.markdown("""
        <div class="empty-state">
            <h3>No expenses found</h3>
            <p>Add your first expense using the form on the left</p>
        </div>
        """, unsafe_allow_html=True)
        return

    for expense in snapshot.expenses:
        details, amount_col, delete_col = st.columns([4, 2, 1])
        with details:
            st.markdown(f"**{expense.name}**  \n{expense.category.value} · {expense.date.strftime('%d %B %Y')}")
        amount_col.markdown(f"**{symbol}{expense.formatted_amount}**")
        delete_col.button(
            "🗑️",
            key=f"delete-{expense.id}",
            on_click=tracker.delete_expense,
            args=(expense.id,),
        )


def render_activity_sidebar(tracker: ExpenseTrackerApp):
    st.sidebar.title("Recent Activity")
    events = tracker.audit_logger.recent_events(limit=15)
    if not events:
        st.sidebar.caption("Nothing yet.")
        return
    for event in events:
        st.sidebar.caption(f"{event.timestamp.strftime('%H:%M:%S')} · {event.description}")


if __name__ == "__main__":
    main()
