"""
Newsletter subscription endpoints.

Endpoints:
- GET /newsletter/subscribe - Subscribe form (showSubscribeForm)
- POST /newsletter/subscribe - Subscribe, then redirect to the form
- GET /newsletter/unsubscribe - Unsubscribe form (showUnsubscribeForm)
- POST /newsletter/unsubscribe - Unsubscribe, then redirect to the form

Submissions always answer 303 See Other with `?message=<key>`; the form
page resolves the key to localized text. Store failures answer 503.
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from src.adapters.message_catalog import negotiate_locale
from src.api.deps import (
    get_message_catalog,
    get_notifier,
    get_rules,
    get_subscriber_store,
    get_subscription_config,
)
from src.api.pages import (
    render_error_page,
    render_subscribe_form,
    render_unsubscribe_form,
)
from src.components.subscription import (
    AlreadyActive,
    DuplicateSubscriberError,
    IntegrationError,
    MessageCatalogPort,
    SubscribeInput,
    SubscriberStorePort,
    SubscriptionConfig,
    UnsubscribeInput,
    UnsubscribeNotifierPort,
    normalize_email,
    resolve_message,
    run_subscribe,
    run_unsubscribe,
)
from src.rules.models import Rules

logger = logging.getLogger(__name__)

router = APIRouter()


# --- Helper Functions ---


def get_locale(
    request: Request,
    catalog: MessageCatalogPort = Depends(get_message_catalog),
    rules: Rules = Depends(get_rules),
) -> str:
    """Locale from Accept-Language, limited to the catalog's locales."""
    return negotiate_locale(
        request.headers.get("Accept-Language"),
        catalog.available_locales(),
        rules.newsletter.default_locale,
    )


def _redirect(request: Request, route_name: str, **params: object) -> RedirectResponse:
    path = request.app.url_path_for(route_name)
    query = urlencode({k: v for k, v in params.items() if v is not None})
    return RedirectResponse(
        f"{path}?{query}" if query else str(path),
        status_code=status.HTTP_303_SEE_OTHER,
    )


def _parse_pid(value: str | None) -> int | None:
    """Storage location hint from a query or form value; junk counts as absent."""
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def _service_unavailable(catalog: MessageCatalogPort, locale: str) -> HTMLResponse:
    return HTMLResponse(
        render_error_page(resolve_message("service_unavailable", catalog, locale), lang=locale),
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


# --- Display Actions ---


@router.get("/newsletter/subscribe", response_class=HTMLResponse, name="show_subscribe_form")
def show_subscribe_form(
    request: Request,
    message: str | None = None,
    pages: str | None = None,
    catalog: MessageCatalogPort = Depends(get_message_catalog),
    locale: str = Depends(get_locale),
) -> HTMLResponse:
    """Render the subscribe form with an optional status message."""
    flash = resolve_message(message, catalog, locale) if message else None
    return HTMLResponse(
        render_subscribe_form(
            action_url=str(request.app.url_path_for("subscribe")),
            flash=flash,
            storage_pid=_parse_pid(pages),
            lang=locale,
        )
    )


@router.get(
    "/newsletter/unsubscribe", response_class=HTMLResponse, name="show_unsubscribe_form"
)
def show_unsubscribe_form(
    request: Request,
    message: str | None = None,
    catalog: MessageCatalogPort = Depends(get_message_catalog),
    locale: str = Depends(get_locale),
) -> HTMLResponse:
    """Render the unsubscribe form with an optional status message."""
    flash = resolve_message(message, catalog, locale) if message else None
    return HTMLResponse(
        render_unsubscribe_form(
            action_url=str(request.app.url_path_for("unsubscribe")),
            flash=flash,
            lang=locale,
        )
    )


# --- Submissions ---


@router.post("/newsletter/subscribe", name="subscribe", response_model=None)
def subscribe(
    request: Request,
    email: str = Form(""),
    first_name: str = Form(""),
    last_name: str = Form(""),
    mail_html: str | None = Form(None),
    homepage: str = Form(""),
    storage_pid: str | None = Form(None),
    store: SubscriberStorePort = Depends(get_subscriber_store),
    config: SubscriptionConfig = Depends(get_subscription_config),
    catalog: MessageCatalogPort = Depends(get_message_catalog),
    locale: str = Depends(get_locale),
) -> RedirectResponse | HTMLResponse:
    """
    Subscribe to the newsletter.

    `homepage` is the honeypot field; `mail_html` counts as set whenever
    it is present in the form. A create that loses a race against a
    concurrent submission for the same address reports it as already
    subscribed.
    """
    pid = _parse_pid(storage_pid)
    inp = SubscribeInput(
        email=email,
        first_name=first_name,
        last_name=last_name,
        wants_html_mail=mail_html is not None,
        honeypot=homepage,
        context_storage_pid=pid,
    )

    try:
        try:
            message_key = run_subscribe(inp, store, config=config).message_key
        except DuplicateSubscriberError:
            if store.find_active_by_email(normalize_email(email)) is None:
                raise
            logger.info("Concurrent subscribe already stored the address")
            message_key = AlreadyActive.message_key
    except IntegrationError:
        logger.exception("Subscribe failed")
        return _service_unavailable(catalog, locale)

    return _redirect(request, "show_subscribe_form", message=message_key, pages=pid)


@router.post("/newsletter/unsubscribe", name="unsubscribe", response_model=None)
def unsubscribe(
    request: Request,
    email: str = Form(""),
    store: SubscriberStorePort = Depends(get_subscriber_store),
    notifier: UnsubscribeNotifierPort | None = Depends(get_notifier),
    config: SubscriptionConfig = Depends(get_subscription_config),
    catalog: MessageCatalogPort = Depends(get_message_catalog),
    locale: str = Depends(get_locale),
) -> RedirectResponse | HTMLResponse:
    """Unsubscribe from the newsletter and notify the administrator."""
    try:
        outcome = run_unsubscribe(
            UnsubscribeInput(email=email), store, notifier=notifier, config=config
        )
    except IntegrationError:
        logger.exception("Unsubscribe failed")
        return _service_unavailable(catalog, locale)

    return _redirect(request, "show_unsubscribe_form", message=outcome.message_key)
