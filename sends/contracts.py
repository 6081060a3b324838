"""
The HasSends capability.

A model that can be linked to Send records either subclasses the abstract
``HasSends`` model or is passed to ``register``. The recorder only attaches
sends to models found in the registry, which ``SendsConfig.ready`` fills
with every installed ``HasSends`` subclass.
"""

from django.contrib.contenttypes.fields import GenericRelation
from django.contrib.contenttypes.models import ContentType
from django.db import models

from .models import Sendable

_registry = set()


def _label(model_or_instance):
    return model_or_instance._meta.label_lower


def register(model):
    """Declare that ``model`` supports sends. Usable as a class decorator."""
    _registry.add(_label(model))
    return model


def supports_sends(model_or_instance):
    return _label(model_or_instance) in _registry


def registered_models():
    return sorted(_registry)


def autodiscover(app_registry):
    for model in app_registry.get_models():
        if issubclass(model, HasSends):
            register(model)


class SendsRelation:
    """Sends linked to one model instance"""

    def __init__(self, instance):
        self.instance = instance

    def _target(self):
        return {
            'content_type': ContentType.objects.get_for_model(self.instance),
            'object_id': self.instance.pk,
        }

    def all(self):
        from .conf import get_send_model

        return get_send_model().objects.for_model(self.instance)

    def attach(self, send):
        sendable, _ = Sendable.objects.get_or_create(send=send, **self._target())
        return sendable

    def detach(self, send):
        deleted, _ = Sendable.objects.filter(send=send, **self._target()).delete()
        return deleted


class HasSends(models.Model):
    sendables = GenericRelation(Sendable)

    class Meta:
        abstract = True

    @property
    def sends(self):
        return SendsRelation(self)
