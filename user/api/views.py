import logging

from rest_framework import status, generics, permissions
from rest_framework_simplejwt.tokens import RefreshToken
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from user.api.serializers import LoginSerializer, UserProfileSerializer
from user.api.utils import success_response

logger = logging.getLogger(__name__)


class LoginView(generics.GenericAPIView):
    serializer_class = LoginSerializer
    permission_classes = [permissions.AllowAny]
    authentication_classes = []  # Disable authentication for this view

    @swagger_auto_schema(
        operation_description="Authenticate a user and receive JWT tokens",
        operation_summary="Login",
        request_body=LoginSerializer,
        responses={
            200: openapi.Response('Login successful', UserProfileSerializer),
            400: openapi.Response('Invalid credentials'),
        },
        tags=['Authentication']
    )
    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = serializer.validated_data['user']
        refresh = RefreshToken.for_user(user)
        logger.info(f"User {user.id} logged in")

        return success_response(
            data={
                'user': UserProfileSerializer(user, context={'request': request}).data,
                'tokens': {
                    'refresh': str(refresh),
                    'access': str(refresh.access_token),
                }
            },
            message='Login successful.',
            status_code=status.HTTP_200_OK
        )


class ProfileView(generics.RetrieveAPIView):
    serializer_class = UserProfileSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return self.request.user

    @swagger_auto_schema(
        operation_description="Retrieve the authenticated user's profile and role grants",
        operation_summary="Get Profile",
        responses={
            200: openapi.Response('Profile retrieved successfully', UserProfileSerializer),
            401: openapi.Response('Authentication required'),
        },
        security=[{'Bearer': []}],
        tags=['Authentication']
    )
    def retrieve(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object())
        return success_response(
            data=serializer.data,
            message='Profile retrieved successfully.'
        )
