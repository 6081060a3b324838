from django.dispatch import Signal, receiver

from .listeners import StoreOutgoingMailListener

# Sent by RecordingEmailBackend with event=MessageSent for every delivered message
message_sent = Signal()


@receiver(message_sent, dispatch_uid='sends.store_outgoing_mail')
def store_outgoing_mail(sender, event, **kwargs):
    """Record the delivered message as a Send"""
    StoreOutgoingMailListener().handle(event)
