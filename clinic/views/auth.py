"""
Registration, login and the current-user endpoint.

Registration and login are public; both answer ``{user, token}`` where
``token`` is the bearer token for every other call.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from clinic.serializers.auth import LoginSerializer, RegisterSerializer, UserSerializer
from clinic.services import accounts


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def register(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user, token = accounts.register_patient(s.validated_data)
    return Response({'user': UserSerializer(user).data, 'token': token}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def login(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user, token = accounts.login(s.validated_data['username'], s.validated_data['password'])
    return Response({'user': UserSerializer(user).data, 'token': token})


@api_view(['GET'])
def me(request):
    user = accounts.current_user(request.user.user_id)
    return Response(UserSerializer(user).data)
