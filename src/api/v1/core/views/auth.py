from drf_spectacular.utils import extend_schema
from rest_framework_simplejwt.serializers import (
    TokenObtainPairSerializer,
    TokenVerifySerializer,
)
from rest_framework_simplejwt.tokens import Token
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
    TokenVerifyView,
)

from account.services import AccountService
from api.v1.account.serializers import UserSerializer
from core.api.views import BaseAPIView


def attach_user_role_claims(token: Token, user) -> None:
    role_slugs, role_titles = AccountService.role_claims(user)
    token["role_slugs"] = role_slugs
    token["roles"] = role_titles


class LoginTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        attach_user_role_claims(token, user)
        return token

    def validate(self, attrs):
        data = super().validate(attrs)
        data["user"] = UserSerializer(self.user).data
        return data


@extend_schema(
    tags=["Auth"],
    summary="Login with credentials and get JWT tokens",
    description=(
        "Authenticates username and password and returns JWT access and refresh "
        "tokens carrying the user's role slugs."
    ),
)
class LoginAPIView(TokenObtainPairView, BaseAPIView):
    serializer_class = LoginTokenObtainPairSerializer


@extend_schema(
    tags=["Auth"],
    summary="Refresh JWT access token",
    description="Validates a refresh token and issues a new access token.",
)
class RefreshAPIView(TokenRefreshView, BaseAPIView):
    pass


@extend_schema(
    tags=["Auth"],
    summary="Verify JWT token",
    description="Checks whether the provided JWT token is valid and not expired.",
)
class TokenVerifyAPIView(TokenVerifyView, BaseAPIView):
    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)

        if response.status_code == 200:
            serializer = TokenVerifySerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            response.data = {"detail": "Token is valid"}

        return response
