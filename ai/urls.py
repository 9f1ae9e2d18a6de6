from django.urls import path

from . import views

app_name = "ai"

urlpatterns = [
    path(
        "generate-report-objective/",
        views.generate_report_objective,
        name="generate_report_objective",
    ),
]
