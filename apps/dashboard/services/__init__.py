"""
Dashboard services package.
Re-exports the functions views use.
"""
from .periods import get_date_range

from .stats import (
    filter_scans,
    get_dashboard_stats,
    get_most_scanned_type,
    round_half_up,
)

from .charts import (
    build_chart_data,
    get_type_data,
    get_daily_activity,
    get_day_of_week_data,
    get_hourly_data,
    get_top_performing,
    get_qr_analytics,
)

__all__ = [
    # Periods
    'get_date_range',
    # Stats
    'filter_scans',
    'get_dashboard_stats',
    'get_most_scanned_type',
    'round_half_up',
    # Charts
    'build_chart_data',
    'get_type_data',
    'get_daily_activity',
    'get_day_of_week_data',
    'get_hourly_data',
    'get_top_performing',
    'get_qr_analytics',
]
