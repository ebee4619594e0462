"""Charts and report export."""

from covid_trends.ui.charts import line_chart, scatter_chart, bar_chart, forecast_chart
from covid_trends.ui.report import export_report

__all__ = ["line_chart", "scatter_chart", "bar_chart", "forecast_chart", "export_report"]
