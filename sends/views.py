from django.apps import apps
from rest_framework import viewsets
from rest_framework.exceptions import ValidationError

from .conf import get_send_model
from .serializers import SendSerializer


class SendViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Recorded outgoing mail.

    Filters: ?uuid=, ?mail_class=, and ?model=<app_label.model>&object_id=<pk>
    for sends linked to one record.
    """
    serializer_class = SendSerializer

    def get_queryset(self):
        queryset = get_send_model().objects.prefetch_related('sendables__content_type')
        params = self.request.query_params

        if params.get('uuid'):
            queryset = queryset.for_uuid(params['uuid'])
        if params.get('mail_class'):
            queryset = queryset.for_mail_class(params['mail_class'])

        label = params.get('model')
        object_id = params.get('object_id')
        if label or object_id:
            if not (label and object_id):
                raise ValidationError({"detail": "model and object_id must be given together"})
            try:
                model = apps.get_model(label)
            except (ValueError, LookupError):
                raise ValidationError({"model": f"Unknown model '{label}'"})
            if not object_id.isdigit():
                raise ValidationError({"object_id": "object_id must be an integer"})
            queryset = queryset.for_model(model, int(object_id))

        return queryset
