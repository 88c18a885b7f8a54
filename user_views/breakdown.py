from shiny import ui
from shinywidgets import output_widget, render_plotly

from dashboard.draw_charts import chart_figure


def panel():
    return ui.page_fluid(
        ui.row(
            ui.column(6, output_widget("plot_top_cities")),
            ui.column(6, output_widget("plot_cafv")),
        ),
        output_widget("plot_top_utilities"),
    )


def server_bind(output, input, filtered):
    @render_plotly
    def plot_top_cities():
        return chart_figure("top_cities", filtered())

    @render_plotly
    def plot_cafv():
        return chart_figure("cafv", filtered())

    @render_plotly
    def plot_top_utilities():
        return chart_figure("top_utilities", filtered())
