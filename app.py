"""
Logbook Profitability Dashboard

Main entry point for Streamlit app.
"""
import streamlit as st
from pathlib import Path

# Page config must be first Streamlit command
st.set_page_config(
    page_title="Logbook Dashboard",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Add src to path
import sys
sys.path.insert(0, str(Path(__file__).parent))

import pandas as pd

from src.config import config, configure_logging
from src.data.loader import load_dashboard_data, get_data_status
from src.metrics.filters import FilterOptions, filter_logbook, get_unique_values
from src.metrics.aggregations import (
    aggregate_hours_by_client,
    aggregate_hours_by_collaborator,
    aggregate_hours_by_macro_activity,
    aggregate_hours_by_micro_activity,
)
from src.metrics.kpis import calculate_kpis
from src.metrics.summaries import (
    get_client_monthly_revenue,
    get_client_summary,
    get_collaborator_summary,
    get_department_summary,
)
from src.ui.charts import horizontal_bar, hours_pie, revenue_cost_bar
from src.ui.formatting import (
    fmt_currency,
    fmt_hours,
    fmt_percent,
    fmt_rate,
    format_metric_df,
    to_csv_export,
)
from src.ui.state import init_state, reset_filters


configure_logging()


def render_sidebar_filters(logbook: pd.DataFrame) -> FilterOptions:
    """Sidebar widgets -> FilterOptions."""
    st.sidebar.header("Filters")

    full = FilterOptions.full_range(logbook)
    if st.session_state["date_range"] is None:
        st.session_state["date_range"] = (full.start_date.date(), full.end_date.date())

    date_range = st.sidebar.date_input("Period", key="date_range")
    if isinstance(date_range, (tuple, list)) and len(date_range) == 2:
        start, end = date_range
    else:
        # Range picker mid-selection: only the start is chosen
        start = end = date_range[0] if isinstance(date_range, (tuple, list)) else date_range

    collaborators = st.sidebar.multiselect(
        "Collaborators", get_unique_values(logbook, "collaborator"), key="selected_collaborators"
    )
    departments = st.sidebar.multiselect(
        "Departments", get_unique_values(logbook, "department"), key="selected_departments"
    )
    macro_activities = st.sidebar.multiselect(
        "Macro activities", get_unique_values(logbook, "macro_activity"), key="selected_macro_activities"
    )
    clients = st.sidebar.multiselect(
        "Clients", get_unique_values(logbook, "client"), key="selected_clients"
    )

    st.sidebar.button("Reset filters", on_click=reset_filters)

    return FilterOptions(
        start_date=pd.Timestamp(start),
        end_date=pd.Timestamp(end),
        collaborators=collaborators,
        departments=departments,
        macro_activities=macro_activities,
        clients=clients,
    )


def render_kpis(kpis):
    c1, c2, c3, c4, c5 = st.columns(5)
    c1.metric("Hours", fmt_hours(kpis.total_hours))
    c2.metric("Avg hourly cost", fmt_rate(kpis.average_hourly_cost))
    c3.metric("Cost of hours", fmt_currency(kpis.filtered_hours_cost))
    c4.metric("Revenue", fmt_currency(kpis.total_revenue))
    c5.metric("Margin", fmt_currency(kpis.margin), fmt_percent(kpis.margin_percentage))


def main():
    """Main app entry point."""

    init_state()

    st.title("Logbook Profitability Dashboard")
    st.caption("Hours, cost, revenue and margin by collaborator, department and client")

    status = get_data_status()
    if not status["logbook"]["csv_exists"]:
        st.error("No data found!")
        st.markdown(f"""
        ### Setup Required

        Export the sheets as CSV into: `{config.raw_dir}`

        - `logbook.csv` (required)
        - `clienti.csv`, `compensi.csv` (revenue and compensation)
        - `mappa.csv` (optional, billing name remap)
        """)
        return

    with st.spinner("Loading data..."):
        try:
            data = load_dashboard_data()
        except Exception as e:
            st.error(f"Error loading data: {e}")
            return

    logbook = data.logbook
    if len(logbook) == 0:
        st.warning("The logbook has no rows with a valid date.")
        return

    filters = render_sidebar_filters(logbook)
    filtered = filter_logbook(logbook, filters)
    st.caption(f"Records shown: {len(filtered):,} of {len(logbook):,}")

    kpis = calculate_kpis(filtered, logbook, data.clients, data.compensation, data.mapping, filters)
    render_kpis(kpis)

    st.markdown("---")
    left, right = st.columns(2)
    with left:
        st.plotly_chart(
            horizontal_bar(aggregate_hours_by_collaborator(filtered), x="hours", y="collaborator",
                           title="Hours by collaborator"),
            use_container_width=True,
        )
        st.plotly_chart(
            horizontal_bar(aggregate_hours_by_macro_activity(filtered), x="hours", y="macro_activity",
                           title="Hours by macro activity"),
            use_container_width=True,
        )
    with right:
        st.plotly_chart(
            hours_pie(aggregate_hours_by_client(filtered), names="client", title="Hours by client"),
            use_container_width=True,
        )
        st.plotly_chart(
            horizontal_bar(aggregate_hours_by_micro_activity(filtered), x="hours", y="micro_activity",
                           title="Hours by micro activity"),
            use_container_width=True,
        )

    st.markdown("---")
    tab_collab, tab_dept, tab_client, tab_monthly = st.tabs(
        ["Collaborators", "Departments", "Clients", "Monthly revenue"]
    )

    with tab_collab:
        summary = get_collaborator_summary(filtered, logbook, data.compensation, filters)
        st.dataframe(format_metric_df(summary), use_container_width=True, hide_index=True)
        st.caption("Hourly rate n/d: compensated in the period with no logged hours.")

    with tab_dept:
        summary = get_department_summary(
            filtered, logbook, data.clients, data.compensation, data.mapping, filters
        )
        if len(summary):
            st.plotly_chart(
                revenue_cost_bar(summary, "department", title="Revenue vs cost by department"),
                use_container_width=True,
            )
        st.dataframe(format_metric_df(summary), use_container_width=True, hide_index=True)

    with tab_client:
        summary = get_client_summary(
            filtered, logbook, data.clients, data.compensation, data.mapping, filters
        )
        if len(summary):
            st.plotly_chart(
                revenue_cost_bar(summary.head(20), "client", title="Revenue vs cost by client"),
                use_container_width=True,
            )
        st.dataframe(format_metric_df(summary), use_container_width=True, hide_index=True)

    with tab_monthly:
        matrix = get_client_monthly_revenue(filtered, data.clients, data.mapping)
        month_cols = [col for col in matrix.columns if col not in ("client", "total")]
        st.dataframe(
            format_metric_df(matrix, currency_cols=month_cols),
            use_container_width=True,
            hide_index=True,
        )
        st.download_button(
            "Download CSV",
            data=to_csv_export(matrix),
            file_name=f"client_monthly_revenue_{pd.Timestamp.today():%Y-%m-%d}.csv",
            mime="text/csv",
        )


if __name__ == "__main__":
    main()
