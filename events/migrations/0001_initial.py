import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Venue",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("location", models.CharField(blank=True, max_length=200)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending_hod", "Pending HOD"),
                            ("pending_dean", "Pending Dean IR"),
                            ("pending_principal", "Pending Principal"),
                            ("approved", "Approved"),
                            ("returned", "Returned for Revision"),
                            ("rejected", "Rejected"),
                        ],
                        db_index=True,
                        default="pending_hod",
                        max_length=32,
                    ),
                ),
                ("unique_code", models.CharField(blank=True, db_index=True, max_length=32)),
                ("title", models.CharField(max_length=200)),
                ("objective", models.TextField(blank=True)),
                ("description", models.TextField(blank=True)),
                ("proposed_outcomes", models.TextField(blank=True)),
                ("academic_year", models.CharField(blank=True, max_length=20)),
                ("program_driven_by", models.CharField(blank=True, max_length=100)),
                ("quarter", models.CharField(blank=True, max_length=20)),
                ("program_type", models.CharField(blank=True, max_length=100)),
                ("activity_lead_by", models.CharField(blank=True, max_length=100)),
                ("program_theme", models.CharField(blank=True, max_length=200)),
                ("activity_duration_hours", models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ("department_club", models.CharField(blank=True, help_text='e.g. "Computer Science (B.E.)"', max_length=200)),
                ("categories", models.JSONField(blank=True, default=list)),
                ("funding_sources", models.JSONField(blank=True, default=list)),
                ("event_date", models.DateField(blank=True, null=True)),
                ("end_date", models.DateField(blank=True, null=True)),
                ("start_time", models.CharField(blank=True, help_text="24-hour HH:MM", max_length=5)),
                ("end_time", models.CharField(blank=True, help_text="24-hour HH:MM", max_length=5)),
                ("other_venue_details", models.CharField(blank=True, max_length=255)),
                (
                    "mode_of_event",
                    models.CharField(
                        blank=True,
                        choices=[("offline", "Offline"), ("online", "Online"), ("hybrid", "Hybrid")],
                        max_length=16,
                    ),
                ),
                ("student_participants", models.PositiveIntegerField(blank=True, null=True)),
                ("faculty_participants", models.PositiveIntegerField(blank=True, null=True)),
                ("external_participants", models.PositiveIntegerField(blank=True, null=True)),
                ("budget_estimate", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("hod_approval_at", models.DateTimeField(blank=True, null=True)),
                ("dean_approval_at", models.DateTimeField(blank=True, null=True)),
                ("principal_approval_at", models.DateTimeField(blank=True, null=True)),
                ("final_report_remarks", models.TextField(blank=True, null=True)),
                ("report_photo_urls", models.JSONField(blank=True, default=list)),
                ("social_media_links", models.JSONField(blank=True, default=list)),
                ("ai_objective", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "submitted_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="submitted_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "venue",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="events",
                        to="events.venue",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
