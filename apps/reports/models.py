# apps/reports/models.py

from django.db import models


class Report(models.Model):
    """
    A visitor's flag against a listed group. group_title is a copy of the
    title at report time and is never kept in sync with the entry.
    Resolving a report deletes it.
    """
    class ReportStatus(models.TextChoices):
        PENDING = 'pending', 'Pending'

    group_id = models.CharField(max_length=64, db_index=True, help_text="Id of the reported entry in the entries table.")
    group_title = models.CharField(max_length=255)
    reason = models.CharField(max_length=600)
    status = models.CharField(
        max_length=20,
        choices=ReportStatus.choices,
        default=ReportStatus.PENDING,
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Report on '{self.group_title}' ({self.reason})"
