from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from challanbook.dependencies import get_current_user, get_template_context
from challanbook.enums import TimeFilter
from challanbook.exceptions import StoreOperationError
from challanbook.models.challan import DashboardStats
from challanbook.models.user import User
from challanbook.services import dashboard_service
from challanbook.templating import templates

router = APIRouter()

TIME_FILTER_LABELS = {
    TimeFilter.ALL.value: "All time",
    TimeFilter.TODAY.value: "Today",
    TimeFilter.WEEK.value: "Last 7 days",
    TimeFilter.MONTH.value: "Last month",
}


def _time_filter(value: str) -> TimeFilter:
    try:
        return TimeFilter(value)
    except ValueError:
        return TimeFilter.ALL


@router.get("/dashboard")
async def dashboard(
    context: dict = Depends(get_template_context),
    time_filter: str = TimeFilter.ALL.value,
):
    selected = _time_filter(time_filter)
    error = None
    try:
        stats = await dashboard_service.get_dashboard_stats(selected)
    except StoreOperationError:
        stats = DashboardStats()
        error = "Failed to fetch dashboard statistics"
        if selected != TimeFilter.ALL:
            error += " for date range"

    context.update({
        "stats": stats,
        "error": error,
        "time_filter": selected.value,
        "time_filters": TIME_FILTER_LABELS,
        "breadcrumbs": [{"name": "Dashboard", "url": "/dashboard"}]
    })
    return templates.TemplateResponse(context["request"], "dashboard.html", context)


@router.get("/api/dashboard/stats")
async def dashboard_stats(
    current_user: User = Depends(get_current_user),
    time_filter: str = TimeFilter.ALL.value,
):
    try:
        selected = TimeFilter(time_filter)
    except ValueError:
        return JSONResponse({"detail": f"Unknown time filter: {time_filter}"}, status_code=422)

    try:
        stats = await dashboard_service.get_dashboard_stats(selected)
    except StoreOperationError as e:
        return JSONResponse({"detail": e.message}, status_code=503)
    return JSONResponse(stats.model_dump(mode="json"))
