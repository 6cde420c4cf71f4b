"""Jinja2 page rendering."""

from pathlib import Path
from typing import Any, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates
from jinja2 import Environment, FileSystemLoader, pass_context

from .config import get_settings
from .i18n import get_locale, get_translations


# The catalogue is picked per render from the context, the environment is shared
@pass_context
def _gettext(context, message: str) -> str:
    return context["translations"].gettext(message)


@pass_context
def _ngettext(context, singular: str, plural: str, n: int) -> str:
    return context["translations"].ngettext(singular, plural, n)


environment = Environment(
    loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
    autoescape=True,
    extensions=["jinja2.ext.i18n"],
)
environment.install_gettext_callables(_gettext, _ngettext, newstyle=True)

templates = Jinja2Templates(env=environment)


def render(
    request: Request,
    name: str,
    context: Optional[dict[str, Any]] = None,
    status_code: int = 200,
):
    """Render a page in the request's language.

    Every page gets the browser-safe env, the app name and the locale.
    """
    settings = get_settings()
    locale = get_locale(request.headers.get("accept-language"))
    page_context = {
        "app_name": settings.app_name,
        "browser_env": settings.browser_env(),
        "locale": locale,
        "translations": get_translations(locale),
        "errors": {},
        "values": {},
    }
    page_context.update(context or {})
    response = templates.TemplateResponse(request, name, page_context, status_code=status_code)
    response.headers["Vary"] = "Accept-Language"
    return response
