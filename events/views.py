import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.http import HttpResponseForbidden, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from ai.client import GeminiClient, generate_objective
from ai.errors import GenerationError

from .forms import EventReportForm, SocialLinkFormSet
from .models import Event
from .report import EventRecord, assemble_report
from .uploads import ReportUploadError, store_report_photos

logger = logging.getLogger(__name__)

LINKS_PREFIX = "links"


def _load_event(event_id: int) -> Event:
    return get_object_or_404(
        Event.objects.select_related("venue", "submitted_by"), id=event_id
    )


def _as_list(value) -> list:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _stored_links(event: Event) -> list:
    return [
        {"url": link.get("url", "")}
        for link in _as_list(event.social_media_links)
        if isinstance(link, dict) and link.get("url")
    ]


@login_required
@require_GET
def event_list(request):
    events = Event.objects.select_related("submitted_by").order_by("-created_at")
    return render(request, "events/event_list.html", {"events": events})


@login_required
@require_http_methods(["GET", "POST"])
def event_report(request, event_id: int):
    """Show the official report and, for the coordinator, the evidence form."""
    event = _load_event(event_id)
    can_edit = event.can_submit_report(request.user)
    existing_photos = len(_as_list(event.report_photo_urls))

    if request.method == "POST":
        if not can_edit:
            logger.warning(
                "User %s tried to submit a report for event %s", request.user.id, event.id
            )
            return HttpResponseForbidden(
                "Only the coordinator of an approved event can submit its report."
            )
        form = EventReportForm(request.POST, request.FILES, existing_photos=existing_photos)
        link_formset = SocialLinkFormSet(request.POST, prefix=LINKS_PREFIX)
        if form.is_valid() and link_formset.is_valid():
            try:
                new_urls = store_report_photos(event, form.cleaned_data["photos"])
            except ReportUploadError as exc:
                messages.error(request, f"Submission failed: {exc}")
            else:
                event.final_report_remarks = form.cleaned_data["final_report_remarks"] or None
                event.ai_objective = form.cleaned_data["ai_objective"]
                event.report_photo_urls = _as_list(event.report_photo_urls) + new_urls
                event.social_media_links = [
                    {"url": link["url"].strip()}
                    for link in link_formset.cleaned_data
                    if link.get("url", "").strip()
                ]
                event.save(
                    update_fields=[
                        "final_report_remarks",
                        "ai_objective",
                        "report_photo_urls",
                        "social_media_links",
                        "updated_at",
                    ]
                )
                logger.info(
                    "Post-event report submitted for event %s by user %s",
                    event.id,
                    request.user.id,
                )
                messages.success(request, "Post-event report submitted successfully.")
                return redirect("events:event_report", event_id=event.id)
    else:
        form = EventReportForm(
            initial={
                "final_report_remarks": event.final_report_remarks or "",
                "ai_objective": event.ai_objective,
            },
            existing_photos=existing_photos,
        )
        link_formset = SocialLinkFormSet(initial=_stored_links(event), prefix=LINKS_PREFIX)

    document = assemble_report(EventRecord.from_event(event))
    context = {
        "event": event,
        "document": document,
        "can_edit": can_edit,
        "form": form if can_edit else None,
        "link_formset": link_formset if can_edit else None,
        "photo_slots_left": max(document.max_photos - existing_photos, 0),
    }
    return render(request, "events/event_report.html", context)


@login_required
@require_GET
def event_report_print(request, event_id: int):
    """Standalone page that opens the browser's print dialog (Save as PDF)."""
    event = _load_event(event_id)
    document = assemble_report(EventRecord.from_event(event))
    return render(
        request,
        "events/event_report_print.html",
        {"event": event, "document": document},
    )


@login_required
@require_POST
def generate_event_objective(request, event_id: int):
    """Generate the formal objective for an event and store it on the record."""
    event = _load_event(event_id)
    if not event.can_submit_report(request.user):
        return JsonResponse(
            {"error": "Only the coordinator of an approved event can generate its objective."},
            status=403,
        )
    fields = {
        "title": event.title,
        "objective": event.objective,
        "description": event.description,
    }
    try:
        with GeminiClient.from_settings() as client:
            text = generate_objective(client, fields)
    except GenerationError as exc:
        logger.error("Objective generation failed for event %s (%s): %s", event.id, exc.status, exc)
        return JsonResponse({"error": str(exc)}, status=exc.status)

    event.ai_objective = text
    event.save(update_fields=["ai_objective", "updated_at"])
    logger.info("Generated objective for event %s by user %s", event.id, request.user.id)
    return JsonResponse({"objective": text})
