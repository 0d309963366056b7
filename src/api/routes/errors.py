"""Generic error page"""
from fastapi import APIRouter, Depends, Request
from fastapi.templating import Jinja2Templates

from src.api.dependencies import get_templates

router = APIRouter()


@router.get("")
async def general_error(request: Request, templates: Jinja2Templates = Depends(get_templates)):
    """Shown for every confirmation failure; carries no diagnostic detail"""
    return templates.TemplateResponse(request, "error.html", {})
