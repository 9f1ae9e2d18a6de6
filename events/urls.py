from django.urls import path

from . import views

app_name = "events"

urlpatterns = [
    path("", views.event_list, name="event_list"),
    path("<int:event_id>/report/", views.event_report, name="event_report"),
    path(
        "<int:event_id>/report/print/",
        views.event_report_print,
        name="event_report_print",
    ),
    path(
        "<int:event_id>/report/generate-objective/",
        views.generate_event_objective,
        name="generate_event_objective",
    ),
]
