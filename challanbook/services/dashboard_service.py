"""Dashboard statistics over a list of challans.

The reduction itself (``compute_dashboard_stats``) is pure. The caller is
expected to pass challans sorted by date, newest first; the most recent
five are taken from the front of the list as given.
"""
import calendar
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple, Union

from challanbook.enums import TimeFilter
from challanbook.models.challan import Challan, DashboardStats, MonthlyStat
from challanbook.services import challan_service

RECENT_LIMIT = 5

DateBound = Optional[Union[date, datetime]]


def _as_date(value: DateBound) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


def customer_key(name: str) -> str:
    """Identity used to count distinct customers.

    Names are compared exactly as stored: "Acme", "acme" and "Acme " are
    three different customers.
    """
    return name


def month_label(day: date) -> str:
    return f"{calendar.month_name[day.month]} {day.year}"


def filter_by_date_range(challans: Iterable[Challan], start_date: DateBound = None, end_date: DateBound = None) -> List[Challan]:
    """Keep challans dated within [start_date, end_date], both ends inclusive."""
    start, end = _as_date(start_date), _as_date(end_date)
    return [
        c for c in challans
        if (start is None or c.date >= start) and (end is None or c.date <= end)
    ]


def compute_dashboard_stats(challans: Iterable[Challan], start_date: DateBound = None, end_date: DateBound = None) -> DashboardStats:
    challans = filter_by_date_range(challans, start_date, end_date)

    total_challans = len(challans)
    total_amount = sum(c.total_amount for c in challans)
    unique_customers = len({customer_key(c.customer_name) for c in challans})
    average_amount = total_amount / total_challans if total_challans > 0 else 0

    # Insertion order follows the input, so months come out newest first
    monthly: Dict[Tuple[int, int], MonthlyStat] = {}
    for challan in challans:
        key = (challan.date.year, challan.date.month)
        if key not in monthly:
            monthly[key] = MonthlyStat(month=month_label(challan.date))
        monthly[key].total_amount += challan.total_amount
        monthly[key].challan_count += 1

    return DashboardStats(
        total_challans=total_challans,
        total_amount=total_amount,
        unique_customers=unique_customers,
        average_amount=average_amount,
        recent_challans=challans[:RECENT_LIMIT],
        monthly_stats=list(monthly.values()),
    )


def _one_month_before(day: date) -> date:
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def time_filter_range(time_filter: Union[TimeFilter, str], today: Optional[date] = None) -> Tuple[Optional[date], Optional[date]]:
    """Translate a dashboard time filter into an inclusive date range.

    Raises ValueError for an unknown filter name.
    """
    time_filter = TimeFilter(time_filter)
    today = today or date.today()

    if time_filter == TimeFilter.ALL:
        return None, None
    if time_filter == TimeFilter.TODAY:
        return today, today
    if time_filter == TimeFilter.WEEK:
        return today - timedelta(days=7), today
    return _one_month_before(today), today


async def get_dashboard_stats(time_filter: Union[TimeFilter, str] = TimeFilter.ALL) -> DashboardStats:
    start_date, end_date = time_filter_range(time_filter)
    challans = await challan_service.list_challans_by_date()
    return compute_dashboard_stats(challans, start_date, end_date)
