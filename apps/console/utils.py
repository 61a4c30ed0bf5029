from __future__ import annotations

import logging
from typing import Callable

from django.contrib import messages
from django.shortcuts import redirect, render

from apps.api import ApiError, records
from apps.api.cache import invalidate, last_known, read_through


logger = logging.getLogger(__name__)

SEARCH_FAILED = "Search failed"


def server_message(exc: ApiError, fallback: str) -> str:
    return exc.detail or fallback


def _report_load_failure(request, error_message: str) -> None:
    logger.exception(error_message)
    messages.error(request, error_message)
    request.console_load_failed = True


def load_list(request, resource: str, loader: Callable[[], list], *, error_message: str) -> list:
    """Full list through the shared cache; on failure the last good list (empty on first load)."""
    try:
        return read_through(resource, loader)
    except ApiError:
        _report_load_failure(request, error_message)
        return last_known(resource)


def load_filtered(request, resource: str, loader: Callable[[], list], *, error_message: str) -> list:
    """Search or filter result, never cached. A failure shows nothing rather than rows outside the filter."""
    try:
        return records(loader(), resource)
    except ApiError:
        _report_load_failure(request, error_message)
        return []


def search_or_list(
    request,
    resource: str,
    *,
    term: str,
    loader: Callable[[], list],
    search: Callable[[str], list],
    error_message: str,
) -> list:
    # Blank terms go back to the full list; anything else is sent exactly as typed.
    if term.strip() == "":
        return load_list(request, resource, loader, error_message=error_message)
    return load_filtered(request, resource, lambda: search(term), error_message=SEARCH_FAILED)


def search_filters(**values: str) -> list[tuple[str, str]]:
    """Active filters, carried by the search box so a search stays inside them."""
    return [(name, value) for name, value in values.items() if value]


def form_visible(request, flag: str) -> bool:
    return request.GET.get(flag) == "1"


def render_list(request, template: str, results_template: str, context: dict):
    """
    Full page, or only the results fragment for search-as-you-type requests.
    The fragment echoes the caller's sequence number so the page can drop
    responses that arrive after a newer one.
    """
    if request.GET.get("partial") != "1":
        return render(request, template, context)

    response = render(request, results_template, context)
    seq = request.GET.get("seq") or ""
    if seq.isdigit():
        response["X-Search-Seq"] = seq
    if getattr(request, "console_load_failed", False):
        # The page keeps its current rows and only takes the error banner.
        response["X-Search-Failed"] = "1"
    return response


def confirm_delete(
    request,
    *,
    prompt: str,
    list_url: str,
    perform: Callable[[], None],
    invalidates: tuple[str, ...],
    success_message: str,
    error_message: str,
):
    """
    GET shows the confirmation page. Only a POST carrying confirm=yes sends
    the delete request; any other answer goes back to the list untouched.
    """
    if request.method != "POST":
        return render(
            request,
            "console/confirm_delete.html",
            {"prompt": prompt, "cancel_url": list_url},
        )

    if request.POST.get("confirm") != "yes":
        return redirect(list_url)

    try:
        perform()
    except ApiError:
        logger.exception(error_message)
        messages.error(request, error_message)
        return redirect(list_url)

    invalidate(*invalidates)
    messages.success(request, success_message)
    return redirect(list_url)
