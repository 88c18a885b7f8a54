# app.py - wires the sidebar filters, the data load and the two tabs together

import logging
import threading

from shiny import App, ui, reactive

from dashboard.aggregate import select_choices
from dashboard.store import (
    DashboardState,
    select_city,
    select_county,
    visible_records,
    with_records,
)
from fetch_ev_data import (
    EV_DATA_SOURCE,
    LOG_LEVEL,
    TTL_MINUTES,
    DataLoadError,
    load_records_ttl,
    resolve_log_level,
)
from user_views import breakdown, overview

logging.basicConfig(
    level=resolve_log_level(LOG_LEVEL),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("ev_dashboard")


# Warm-up: parse the CSV once in the background so the first session hits the cache
def _warm():
    try:
        load_records_ttl(EV_DATA_SOURCE)
    except DataLoadError:
        log.exception("warm-up load failed for %s", EV_DATA_SOURCE)

threading.Thread(target=_warm, daemon=True).start()

ALL_CITIES = {"": "All Cities"}
ALL_COUNTIES = {"": "All Counties"}

app_ui = ui.page_fluid(
    ui.panel_title("EV Dashboard"),
    ui.layout_sidebar(
        ui.sidebar(
            # Option lists are filled from the full (unfiltered) dataset once it loads
            ui.input_select("city", "City", ALL_CITIES, selected=""),
            ui.input_select("county", "County", ALL_COUNTIES, selected=""),
            ui.input_action_button("refresh", "Reload data"),
            width=300,
        ),
        ui.navset_tab(
            ui.nav_panel("Overview", *overview.panel().children),
            ui.nav_panel("Breakdown", *breakdown.panel().children),
        ),
    ),
)

def server(input, output, session):
    state = reactive.value(DashboardState())

    # Choices come from the full collection, never from the filtered view
    def _update_choices(records):
        cities, city = select_choices(records, "City", ALL_CITIES[""], input.city())
        counties, county = select_choices(records, "County", ALL_COUNTIES[""], input.county())
        ui.update_select("city", choices=cities, selected=city)
        ui.update_select("county", choices=counties, selected=county)

    def _load(ttl_minutes=TTL_MINUTES):
        try:
            records = load_records_ttl(EV_DATA_SOURCE, ttl_minutes)
        except DataLoadError as exc:
            log.exception("could not load EV data")
            ui.notification_show(f"Could not load EV data: {exc}", type="error", duration=None)
            return
        with reactive.isolate():
            state.set(with_records(state(), records))
            _update_choices(state().records)

    @reactive.effect
    def _initial_load():
        _load()

    @reactive.effect
    @reactive.event(input.refresh)
    def _reload():
        ui.notification_show("Reloading EV data…", type="message", duration=2)
        log.info("reload requested")
        _load(ttl_minutes=0)

    @reactive.effect
    @reactive.event(input.city, ignore_init=True)
    def _city_changed():
        state.set(select_city(state(), input.city()))

    @reactive.effect
    @reactive.event(input.county, ignore_init=True)
    def _county_changed():
        state.set(select_county(state(), input.county()))

    @reactive.calc
    def filtered():
        return visible_records(state())

    # Bind each tab's server code
    overview.server_bind(output, input, filtered)
    breakdown.server_bind(output, input, filtered)

app = App(app_ui, server)
