from fastapi import APIRouter, Request, Depends

from challanbook.dependencies import get_template_context
from challanbook.exceptions import StoreOperationError, ValidationFailed
from challanbook.models.user import User
from challanbook.services import company_service
from challanbook.services.company_service import COMPANY_FIELDS
from challanbook.templating import templates

router = APIRouter()


def _render(context: dict, company: dict, error: str = None, success: str = None):
    context.update({
        "company": company,
        "error": error,
        "success": success,
        "breadcrumbs": [
            {"name": "Dashboard", "url": "/dashboard"},
            {"name": "Company Settings", "url": "/settings/company"}
        ]
    })
    return templates.TemplateResponse(context["request"], "settings/company.html", context)


@router.get("/company")
async def company_settings(context: dict = Depends(get_template_context)):
    current_user: User = context["current_user"]
    company = {field: "" for field in COMPANY_FIELDS}
    error = None
    try:
        saved = await company_service.get_company(current_user.uid)
        if saved:
            company.update(saved.model_dump(exclude_none=True, exclude={"updated_at"}))
    except StoreOperationError as e:
        error = e.message
    return _render(context, company, error=error)


@router.post("/company")
async def save_company_settings(request: Request, context: dict = Depends(get_template_context)):
    current_user: User = context["current_user"]
    form_data = await request.form()
    data = {field: (form_data.get(field) or "").strip() for field in COMPANY_FIELDS}
    data["gst"] = data["gst"].upper()

    try:
        await company_service.save_company(current_user.uid, data)
    except (ValidationFailed, StoreOperationError) as e:
        return _render(context, data, error=e.message)
    return _render(context, data, success="Company details saved successfully")
