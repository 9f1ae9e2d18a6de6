from django.contrib.auth.models import User
from django.db import models


class Venue(models.Model):
    name = models.CharField(max_length=200)
    location = models.CharField(max_length=200, blank=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class Event(models.Model):
    """An event submission together with its approvals and post-event evidence."""

    class Status(models.TextChoices):
        PENDING_HOD = "pending_hod", "Pending HOD"
        PENDING_DEAN = "pending_dean", "Pending Dean IR"
        PENDING_PRINCIPAL = "pending_principal", "Pending Principal"
        APPROVED = "approved", "Approved"
        RETURNED = "returned", "Returned for Revision"
        REJECTED = "rejected", "Rejected"

    class Mode(models.TextChoices):
        OFFLINE = "offline", "Offline"
        ONLINE = "online", "Online"
        HYBRID = "hybrid", "Hybrid"

    submitted_by = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name="submitted_events"
    )
    status = models.CharField(
        max_length=32, choices=Status.choices, default=Status.PENDING_HOD, db_index=True
    )
    unique_code = models.CharField(max_length=32, blank=True, db_index=True)

    # Program details
    title = models.CharField(max_length=200)
    objective = models.TextField(blank=True)
    description = models.TextField(blank=True)
    proposed_outcomes = models.TextField(blank=True)
    academic_year = models.CharField(max_length=20, blank=True)
    program_driven_by = models.CharField(max_length=100, blank=True)
    quarter = models.CharField(max_length=20, blank=True)
    program_type = models.CharField(max_length=100, blank=True)
    activity_lead_by = models.CharField(max_length=100, blank=True)
    program_theme = models.CharField(max_length=200, blank=True)
    activity_duration_hours = models.DecimalField(
        max_digits=6, decimal_places=2, null=True, blank=True
    )
    department_club = models.CharField(
        max_length=200, blank=True, help_text='e.g. "Computer Science (B.E.)"'
    )
    categories = models.JSONField(default=list, blank=True)
    funding_sources = models.JSONField(default=list, blank=True)

    # Schedule & venue
    event_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    start_time = models.CharField(max_length=5, blank=True, help_text="24-hour HH:MM")
    end_time = models.CharField(max_length=5, blank=True, help_text="24-hour HH:MM")
    venue = models.ForeignKey(
        Venue, on_delete=models.SET_NULL, null=True, blank=True, related_name="events"
    )
    other_venue_details = models.CharField(max_length=255, blank=True)
    mode_of_event = models.CharField(max_length=16, choices=Mode.choices, blank=True)

    # Participants & expenditure
    student_participants = models.PositiveIntegerField(null=True, blank=True)
    faculty_participants = models.PositiveIntegerField(null=True, blank=True)
    external_participants = models.PositiveIntegerField(null=True, blank=True)
    budget_estimate = models.DecimalField(
        max_digits=12, decimal_places=2, null=True, blank=True
    )

    # Approvals
    hod_approval_at = models.DateTimeField(null=True, blank=True)
    dean_approval_at = models.DateTimeField(null=True, blank=True)
    principal_approval_at = models.DateTimeField(null=True, blank=True)

    # Post-event evidence
    final_report_remarks = models.TextField(blank=True, null=True)
    report_photo_urls = models.JSONField(default=list, blank=True)
    social_media_links = models.JSONField(default=list, blank=True)
    ai_objective = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.title

    @property
    def is_approved(self) -> bool:
        return self.status == self.Status.APPROVED

    def can_submit_report(self, user) -> bool:
        """Only the submitting coordinator may add evidence, and only once approved."""
        return (
            self.is_approved
            and user.is_authenticated
            and self.submitted_by_id == user.id
        )
