from typing import Optional

from fastapi import APIRouter, Request, Depends
from fastapi.responses import RedirectResponse

from challanbook.dependencies import get_template_context
from challanbook.exceptions import ConflictError, RecordNotFound, StoreOperationError, ValidationFailed
from challanbook.services import supplier_service
from challanbook.templating import templates

router = APIRouter()

SUPPLIER_FIELDS = ("name", "phone", "address", "gst")


def parse_supplier_form(form) -> dict:
    data = {field: (form.get(field) or "").strip() for field in SUPPLIER_FIELDS}
    data["gst"] = data["gst"].upper()
    return data


def _breadcrumbs(*extra):
    return [
        {"name": "Dashboard", "url": "/dashboard"},
        {"name": "Suppliers", "url": "/suppliers"},
        *extra,
    ]


def _render_form(context: dict, supplier: dict, error: str = None, supplier_id: str = None, conflict: bool = False):
    context.update({
        "supplier": supplier,
        "supplier_id": supplier_id,
        "conflict": conflict,
        "error": error,
        "breadcrumbs": _breadcrumbs({"name": "Edit" if supplier_id else "Create", "url": ""}),
    })
    return templates.TemplateResponse(context["request"], "suppliers/form.html", context)


async def _render_list(context: dict, error: str = None, success: str = None):
    suppliers = []
    try:
        suppliers = await supplier_service.list_suppliers()
    except StoreOperationError:
        error = error or "Failed to load suppliers. Please try again."

    context.update({
        "suppliers": suppliers,
        "error": error,
        "success": success,
        "breadcrumbs": _breadcrumbs(),
    })
    return templates.TemplateResponse(context["request"], "suppliers/list.html", context)


@router.get("")
async def list_suppliers(context: dict = Depends(get_template_context), deleted: Optional[str] = None):
    return await _render_list(context, success="Supplier deleted successfully" if deleted else None)


@router.get("/create")
async def create_supplier_form(context: dict = Depends(get_template_context)):
    return _render_form(context, {field: "" for field in SUPPLIER_FIELDS})


@router.post("/create")
async def create_supplier(request: Request, context: dict = Depends(get_template_context)):
    data = parse_supplier_form(await request.form())
    try:
        await supplier_service.add_supplier(data)
    except ValidationFailed as e:
        return _render_form(context, data, error=e.message)
    except StoreOperationError:
        return _render_form(context, data, error="Failed to save supplier. Please try again.")
    return RedirectResponse(url="/suppliers", status_code=303)


@router.get("/{supplier_id}/edit")
async def edit_supplier_form(supplier_id: str, context: dict = Depends(get_template_context)):
    try:
        supplier = await supplier_service.get_supplier(supplier_id)
    except RecordNotFound:
        return await _render_list(context, error="Supplier not found")
    except StoreOperationError:
        return await _render_list(context, error="Failed to load supplier. Please try again.")
    return _render_form(context, supplier.model_dump(mode="json"), supplier_id=supplier_id)


@router.post("/{supplier_id}/edit")
async def update_supplier(supplier_id: str, request: Request, context: dict = Depends(get_template_context)):
    form_data = await request.form()
    data = parse_supplier_form(form_data)
    try:
        version = int(form_data.get("version"))
    except (TypeError, ValueError):
        version = None

    try:
        await supplier_service.update_supplier(supplier_id, data, version)
    except ValidationFailed as e:
        return _render_form(context, {**data, "version": version}, error=e.message, supplier_id=supplier_id)
    except ConflictError as e:
        return _render_form(context, {**data, "version": version}, error=e.message, supplier_id=supplier_id, conflict=True)
    except RecordNotFound:
        return await _render_list(context, error="Supplier not found")
    except StoreOperationError:
        return _render_form(context, {**data, "version": version}, error="Failed to save supplier. Please try again.", supplier_id=supplier_id)
    return RedirectResponse(url="/suppliers", status_code=303)


@router.post("/{supplier_id}/delete")
async def delete_supplier(supplier_id: str, context: dict = Depends(get_template_context)):
    try:
        await supplier_service.delete_supplier(supplier_id)
    except RecordNotFound:
        return await _render_list(context, error="Supplier not found")
    except StoreOperationError:
        return await _render_list(context, error="Failed to delete supplier. Please try again.")
    return RedirectResponse(url="/suppliers?deleted=1", status_code=303)
