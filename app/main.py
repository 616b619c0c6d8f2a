import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import asyncio
import logging

import plotly.graph_objects as go
import streamlit as st

from tracker.aggregate import monthly_frame
from tracker.config import configure_logging, load_settings
from tracker.events import BUDGET_ALERT, EventBus, log_budget_alert
from tracker.gateway import RestGateway
from tracker.state import TrackerState
from tracker.sync import add_and_persist, restore_expenses
from tracker.validation import INVALID_BUDGET, INVALID_GOAL

settings = load_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)
CUR = settings.currency

st.set_page_config(page_title="Financial Spends Tracker", layout="centered")


def new_tracker(gateway) -> TrackerState:
    bus = EventBus()
    bus.subscribe(BUDGET_ALERT, log_budget_alert)
    tracker = TrackerState(bus)
    if gateway is not None:
        logger.info("persisting expenses to %s", settings.api_url)
        result = asyncio.run(restore_expenses(gateway, tracker))
        if result.is_left():
            st.session_state.gateway_error = result.get_error()["message"]
    return tracker


if "tracker" not in st.session_state:
    st.session_state.gateway = (
        RestGateway(settings.api_url, timeout=settings.request_timeout)
        if settings.persist_expenses else None
    )
    st.session_state.tracker = new_tracker(st.session_state.gateway)
    st.session_state.show_chart = False

tracker: TrackerState = st.session_state.tracker

st.title("Financial Spends Tracker")
st.caption("Track your expenses, plan your budget, and reach your savings goal!")

if st.session_state.get("gateway_error"):
    st.warning(st.session_state.pop("gateway_error"))

with st.form("budget_form"):
    raw_budget = st.text_input(f"Set Your Budget ({CUR})", placeholder="Enter your budget")
    raw_goal = st.text_input(f"Set Your Savings Goal ({CUR})", placeholder="Enter your savings goal")
    if st.form_submit_button("Set Budget & Goal"):
        errors = tracker.set_budget_and_goal(raw_budget, raw_goal)
        submitted = {INVALID_BUDGET: raw_budget, INVALID_GOAL: raw_goal}
        for err in errors:
            # a blank field just keeps its current value
            if submitted[err["error"]].strip():
                st.warning(err["message"])

view = tracker.view()

if view.budget > 0:
    st.subheader("Budget Tracker")
    c1, c2, c3 = st.columns(3)
    c1.metric("Budget", f"{CUR}{view.budget:,.2f}")
    c2.metric("Spent", f"{CUR}{view.actual:,.2f}")
    c3.metric("Left", f"{CUR}{view.budget - view.actual:,.2f}")
    st.progress(view.percent_spent / 100, text=f"{view.percent_spent:.2f}% of budget spent")

if view.savings_goal > 0:
    st.success(
        f"**Savings Goal:** {CUR}{view.savings_goal:,.2f}  \n"
        f"Amount left for savings: {CUR}{view.remaining_for_savings:,.2f}"
    )

if view.advice:
    st.error(f"**Expense Advice:** {view.advice}")

st.subheader("Add Expense")
with st.form("expense_form", clear_on_submit=True):
    amount = st.text_input(f"Amount ({CUR})")
    category = st.text_input("Category")
    description = st.text_input("Description")
    date = st.date_input("Date", value=None)
    if st.form_submit_button("Add Expense"):
        result, stored = asyncio.run(add_and_persist(tracker, st.session_state.gateway, {
            "amount": amount,
            "category": category,
            "description": description,
            "date": date.isoformat() if date else None,
        }))
        if result.is_left():
            st.error(result.get_error()["message"])
        else:
            if stored is not None and stored.is_left():
                st.session_state.gateway_error = stored.get_error()["message"]
            st.rerun()

if view.last_expense is not None:
    last = view.last_expense
    st.markdown("**Last Added Expense:**")
    st.write(f"{last.description} - {CUR}{last.amount:,.2f} ({last.category})")

label = "Hide Monthly Expenses Chart" if st.session_state.show_chart else "Show Monthly Expenses Chart"
if st.button(label):
    st.session_state.show_chart = not st.session_state.show_chart
    st.rerun()

if st.session_state.show_chart:
    frame = monthly_frame(view.expenses, view.budget)
    fig = go.Figure()
    fig.add_trace(go.Bar(x=frame["month"], y=frame["expenses"], name=f"Monthly Expenses ({CUR})",
                         marker_color="rgba(54, 162, 235, 0.5)"))
    fig.add_trace(go.Bar(x=frame["month"], y=frame["budget"], name=f"Monthly Budget ({CUR})",
                         marker_color="rgba(255, 99, 132, 0.5)"))
    fig.update_layout(barmode="group", height=400, yaxis=dict(range=[0, settings.chart_y_max]),
                      legend=dict(orientation="h", y=1.1), margin=dict(t=30, b=10, l=10, r=10))
    st.plotly_chart(fig, use_container_width=True)
