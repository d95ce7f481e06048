from django.db import models


class OutboxMessage(models.Model):
    """
    A lifecycle event waiting to be delivered to the message broker.

    Rows are written in the same transaction as the state change they describe,
    so an event exists if and only if its change was committed.
    """

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        SENT = "SENT", "Sent"

    topic = models.CharField(max_length=100)
    partition_key = models.CharField(max_length=64, db_index=True, help_text="Order id; keeps per-order ordering")
    event_type = models.CharField(max_length=50)
    payload = models.JSONField()

    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    attempts = models.PositiveIntegerField(default=0)
    last_error = models.TextField(blank=True)
    claimed_until = models.DateTimeField(null=True, blank=True, help_text="Set while a relay is publishing this row")

    created_at = models.DateTimeField(auto_now_add=True)
    sent_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["status", "id"], name="outbox_status_id_idx"),
        ]

    def __str__(self):
        return f"{self.event_type} for {self.partition_key} ({self.status})"

    @property
    def message(self):
        """The wire message: {"event_type": ..., "data": ...}."""
        return {"event_type": self.event_type, "data": self.payload}
