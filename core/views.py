from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from sends.serializers import SendSerializer
from .models import User
from .serializers import UserSerializer


class UserViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = User.objects.all()
    serializer_class = UserSerializer

    @action(detail=True, methods=["get"])
    def sends(self, request, pk=None):
        """Mail recorded for this user"""
        user = self.get_object()
        sends = user.sends.all().prefetch_related('sendables__content_type')
        return Response(SendSerializer(sends, many=True).data)
