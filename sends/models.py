from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models


class SendQuerySet(models.QuerySet):
    def for_uuid(self, uuid):
        return self.filter(uuid=uuid)

    def for_mail_class(self, mail_class):
        return self.filter(mail_class=mail_class)

    def for_model(self, model, pk=None):
        """Sends associated with a model instance, or with (model class, pk)"""
        if pk is None:
            pk = model.pk
        content_type = ContentType.objects.get_for_model(model)
        return self.filter(
            sendables__content_type=content_type,
            sendables__object_id=pk,
        ).distinct()


class Send(models.Model):
    """One outgoing email, recorded after the mail backend delivered it"""
    uuid = models.CharField(max_length=255, null=True, blank=True, db_index=True,
                            help_text='Correlation id from the send uuid header or the transport Message-ID')
    mail_class = models.CharField(max_length=255, null=True, blank=True, db_index=True,
                                  help_text='Decrypted mail class header')
    subject = models.TextField(blank=True)
    content = models.TextField(null=True, blank=True, help_text='HTML body, only when content storage is enabled')

    # address -> display name (or null)
    from_address = models.JSONField(null=True, blank=True, db_column='from')
    reply_to = models.JSONField(null=True, blank=True)
    to = models.JSONField(null=True, blank=True)
    cc = models.JSONField(null=True, blank=True)
    bcc = models.JSONField(null=True, blank=True)

    sent_at = models.DateTimeField(db_index=True)

    objects = SendQuerySet.as_manager()

    class Meta:
        ordering = ['-sent_at', '-id']

    def __str__(self):
        return f"{self.subject} ({self.sent_at:%Y-%m-%d %H:%M})" if self.sent_at else self.subject


class Sendable(models.Model):
    """Association between a Send and an application model that has sends"""
    send = models.ForeignKey(Send, on_delete=models.CASCADE, related_name='sendables')
    content_type = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    object_id = models.PositiveBigIntegerField()
    content_object = GenericForeignKey('content_type', 'object_id')

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['send', 'content_type', 'object_id'], name='unique_sendable'),
        ]
        indexes = [
            models.Index(fields=['content_type', 'object_id'], name='sendable_target_idx'),
        ]

    def __str__(self):
        return f"Send {self.send_id} -> {self.content_type.app_label}.{self.content_type.model} {self.object_id}"
