from django.contrib import admin

from .models import Event, Venue


@admin.register(Venue)
class VenueAdmin(admin.ModelAdmin):
    list_display = ("name", "location")
    search_fields = ("name", "location")


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("title", "unique_code", "department_club", "status", "event_date", "submitted_by")
    list_filter = ("status", "mode_of_event")
    search_fields = ("title", "unique_code", "department_club")
    raw_id_fields = ("submitted_by",)
    fieldsets = (
        (None, {"fields": ("submitted_by", "status", "unique_code")}),
        (
            "Program details",
            {
                "fields": (
                    "title", "objective", "description", "proposed_outcomes",
                    "academic_year", "program_driven_by", "quarter", "program_type",
                    "activity_lead_by", "program_theme", "activity_duration_hours",
                    "department_club", "categories", "funding_sources",
                )
            },
        ),
        (
            "Schedule & venue",
            {
                "fields": (
                    "event_date", "end_date", "start_time", "end_time",
                    "venue", "other_venue_details", "mode_of_event",
                )
            },
        ),
        (
            "Participants & expenditure",
            {
                "fields": (
                    "student_participants", "faculty_participants",
                    "external_participants", "budget_estimate",
                )
            },
        ),
        ("Approvals", {"fields": ("hod_approval_at", "dean_approval_at", "principal_approval_at")}),
        (
            "Post-event evidence",
            {
                "fields": (
                    "final_report_remarks", "ai_objective",
                    "report_photo_urls", "social_media_links",
                )
            },
        ),
    )
