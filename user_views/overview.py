from shiny import ui, render
from shinywidgets import output_widget, render_plotly

from dashboard.draw_charts import chart_figure


def panel():
    return ui.page_fluid(
        ui.h4(ui.output_text("total_evs")),
        output_widget("plot_ev_types"),
        output_widget("plot_top_makes"),
        output_widget("plot_model_years"),
        ui.output_data_frame("tbl_records"),
    )


def server_bind(output, input, filtered):
    """`filtered` is the reactive calc holding the currently visible records."""

    @render.text
    def total_evs():
        return f"Total EVs: {len(filtered())}"

    @render_plotly
    def plot_ev_types():
        return chart_figure("ev_types", filtered())

    @render_plotly
    def plot_top_makes():
        return chart_figure("top_makes", filtered())

    @render_plotly
    def plot_model_years():
        return chart_figure("model_years", filtered())

    @render.data_frame
    def tbl_records():
        return filtered()
