from django.db import models
from django.conf import settings


class AuditLog(models.Model):
    """Who changed a result or decided a withdrawal, and with what input"""
    ACTION_RESULT_DECLARED = 'result_declared'
    ACTION_RESULT_SCHEDULED = 'result_scheduled'
    ACTION_RESULT_CORRECTED = 'result_corrected'
    ACTION_WITHDRAWAL_APPROVED = 'withdrawal_approved'
    ACTION_WITHDRAWAL_REJECTED = 'withdrawal_rejected'
    ACTIONS = (
        (ACTION_RESULT_DECLARED, 'Result declared'),
        (ACTION_RESULT_SCHEDULED, 'Result scheduled'),
        (ACTION_RESULT_CORRECTED, 'Result corrected'),
        (ACTION_WITHDRAWAL_APPROVED, 'Withdrawal approved'),
        (ACTION_WITHDRAWAL_REJECTED, 'Withdrawal rejected'),
    )

    # Null for actions taken by the scheduler
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs'
    )
    action = models.CharField(max_length=50, choices=ACTIONS)
    resource_type = models.CharField(max_length=50, null=True, blank=True)
    resource_id = models.CharField(max_length=100, null=True, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(null=True, blank=True)
    request_data = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', '-created_at'], name='audit_audit_action_8c4e1d_idx'),
            models.Index(fields=['resource_type', 'resource_id'], name='audit_audit_resourc_5d7a9e_idx'),
        ]
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.get_action_display()} {self.resource_type}:{self.resource_id} by {self.user or 'system'}"
