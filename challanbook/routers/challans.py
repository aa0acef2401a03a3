from datetime import date
from typing import Optional

from fastapi import APIRouter, Request, Depends, Query
from fastapi.responses import RedirectResponse, JSONResponse

from challanbook.dependencies import get_current_user, get_template_context
from challanbook.exceptions import ConflictError, RecordNotFound, StoreOperationError, ValidationFailed
from challanbook.models.user import User
from challanbook.services import challan_service, company_service
from challanbook.templating import templates
from challanbook.validators import parse_iso_date

router = APIRouter()

PER_PAGE = 10
BLANK_PRODUCT_ROWS = 2


def parse_challan_form(form) -> dict:
    """Collect challan fields and product rows (``products[i][field]``) from a form.

    Rows left completely blank are ignored.
    """
    products = []
    i = 0
    while f"products[{i}][name]" in form:
        row = {field: (form.get(f"products[{i}][{field}]") or "").strip() for field in ("name", "quantity", "price")}
        if any(row.values()):
            products.append(row)
        i += 1

    return {
        "date": (form.get("date") or "").strip(),
        "customer_name": form.get("customer_name") or "",
        "customer_phone": (form.get("customer_phone") or "").strip(),
        "products": products,
    }


def _version(form) -> Optional[int]:
    try:
        return int(form.get("version"))
    except (TypeError, ValueError):
        return None


def _breadcrumbs(*extra):
    return [
        {"name": "Dashboard", "url": "/dashboard"},
        {"name": "Challans", "url": "/challans"},
        *extra,
    ]


def _render_form(context: dict, challan: dict, error: str = None, challan_id: str = None, next_number: int = None, conflict: bool = False):
    rows = list(challan.get("products") or [])
    rows += [{"name": "", "quantity": "", "price": ""}] * BLANK_PRODUCT_ROWS
    context.update({
        "challan": challan,
        "product_rows": rows,
        "challan_id": challan_id,
        "next_number": next_number,
        "conflict": conflict,
        "error": error,
        "breadcrumbs": _breadcrumbs({"name": "Edit" if challan_id else "Create", "url": ""}),
    })
    return templates.TemplateResponse(context["request"], "challans/form.html", context)


async def _render_list(context: dict, page: int = 1, error: str = None, success: str = None):
    challans = []
    try:
        challans = await challan_service.list_challans()
    except StoreOperationError:
        error = error or "Failed to load challans. Please try again."

    total = len(challans)
    total_pages = max(1, -(-total // PER_PAGE))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * PER_PAGE

    context.update({
        "challans": challans[start:start + PER_PAGE],
        "page": page,
        "total_pages": total_pages,
        "total": total,
        "error": error,
        "success": success,
        "breadcrumbs": _breadcrumbs(),
    })
    return templates.TemplateResponse(context["request"], "challans/list.html", context)


@router.get("")
async def list_challans(
    context: dict = Depends(get_template_context),
    page: int = 1,
    deleted: Optional[str] = None,
):
    return await _render_list(context, page, success="Challan deleted successfully" if deleted else None)


@router.get("/create")
async def create_challan_form(context: dict = Depends(get_template_context)):
    error = None
    next_number = None
    try:
        next_number = await challan_service.peek_next_challan_number()
    except StoreOperationError as e:
        error = e.message
    blank = {"date": date.today().isoformat(), "customer_name": "", "customer_phone": "", "products": []}
    return _render_form(context, blank, error=error, next_number=next_number)


@router.post("/create")
async def create_challan(
    request: Request,
    context: dict = Depends(get_template_context),
):
    form_data = await request.form()
    data = parse_challan_form(form_data)
    current_user: User = context["current_user"]

    try:
        await challan_service.create_challan(data, current_user.uid)
    except ValidationFailed as e:
        return _render_form(context, data, error=e.message)
    except StoreOperationError:
        return _render_form(context, data, error="Failed to save challan. Please try again.")

    return RedirectResponse(url="/challans", status_code=303)


@router.get("/{challan_id}/edit")
async def edit_challan_form(challan_id: str, context: dict = Depends(get_template_context)):
    try:
        challan = await challan_service.get_challan(challan_id)
    except RecordNotFound:
        return await _render_list(context, error="Challan not found")
    except StoreOperationError:
        return await _render_list(context, error="Failed to load challan. Please try again.")
    return _render_form(context, challan.model_dump(mode="json"), challan_id=challan_id)


@router.post("/{challan_id}/edit")
async def update_challan(
    challan_id: str,
    request: Request,
    context: dict = Depends(get_template_context),
):
    form_data = await request.form()
    data = parse_challan_form(form_data)
    version = _version(form_data)

    try:
        await challan_service.update_challan(challan_id, data, version)
    except ValidationFailed as e:
        return _render_form(context, {**data, "version": version}, error=e.message, challan_id=challan_id)
    except ConflictError as e:
        # Form keeps the stale version; only a reload picks up the current one
        return _render_form(context, {**data, "version": version}, error=e.message, challan_id=challan_id, conflict=True)
    except RecordNotFound:
        return await _render_list(context, error="Challan not found")
    except StoreOperationError:
        return _render_form(context, {**data, "version": version}, error="Failed to save challan. Please try again.", challan_id=challan_id)

    return RedirectResponse(url="/challans", status_code=303)


@router.post("/{challan_id}/delete")
async def delete_challan(challan_id: str, context: dict = Depends(get_template_context)):
    try:
        await challan_service.delete_challan(challan_id)
    except RecordNotFound:
        return await _render_list(context, error="Challan not found")
    except StoreOperationError:
        return await _render_list(context, error="Failed to delete challan. Please try again.")
    return RedirectResponse(url="/challans?deleted=1", status_code=303)


@router.get("/{challan_id}/print")
async def print_challan(challan_id: str, context: dict = Depends(get_template_context)):
    current_user: User = context["current_user"]
    try:
        challan = await challan_service.get_challan(challan_id)
        company = await company_service.get_company(current_user.uid)
    except RecordNotFound:
        return await _render_list(context, error="Challan not found")
    except StoreOperationError as e:
        return await _render_list(context, error=e.message)

    context.update({"challan": challan, "company": company})
    return templates.TemplateResponse(context["request"], "challans/print.html", context)


@router.get("/api/list")
async def challans_json(
    current_user: User = Depends(get_current_user),
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
):
    bounds = {}
    for name, value in (("start_date", start_date), ("end_date", end_date)):
        if value:
            parsed = parse_iso_date(value)
            if parsed is None:
                return JSONResponse({"detail": f"{name} must be a date (YYYY-MM-DD)"}, status_code=422)
            bounds[name] = parsed

    try:
        if bounds:
            challans = await challan_service.list_challans_for_date_range(bounds.get("start_date"), bounds.get("end_date"))
        else:
            challans = await challan_service.list_challans()
    except StoreOperationError as e:
        return JSONResponse({"detail": e.message}, status_code=503)

    return JSONResponse([c.model_dump(mode="json") for c in challans])
