"""
NutriSnack: Sell-out Analytics Dashboard

Analytics backend that turns transaction-level sell-out rows from the data
store into a dashboard-ready view-model and a condensed snapshot for the
conversational assistant.

To switch between the live store and simulated data:
    Set DASHBOARD_DATA_SOURCE to "supabase" (default) or "demo". Both
    implement the query contract in nutrisnack_dashboard.loaders.store.

To connect a front end:
    Call dashboard.get_dashboard_view(store) for a plain dict suitable for
    rendering KPI cards, share charts, the weekly trend and the alert feed,
    or serve it over HTTP with nutrisnack_dashboard.api.

To add new KPI card colours:
    Add an entry to config.KPI_REGISTRY mapping the KPISnapshot field to its
    direction and amber_band.
"""
