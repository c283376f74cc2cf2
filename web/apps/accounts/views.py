"""HTTP views for registration, login and the customer listing."""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from . import services
from .permissions import ADMIN_ONLY, require_role
from .schemas import LoginDTO, RegisterDTO, UserOut


def _profile(user) -> dict:
    return UserOut.model_validate(user).model_dump()


class RegisterView(APIView):
    authentication_classes = []
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "auth"

    def post(self, request):
        """Create a customer account.

        Returns:
            Response: 201 with ``{message, user, token}``; 400 with
            ``EMAIL_ALREADY_REGISTERED`` or ``VALIDATION_ERROR``.
        """
        dto = RegisterDTO.model_validate(request.data)
        user, token = services.register(dto)
        return Response(
            {"message": "User registered successfully", "user": _profile(user), "token": token},
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    authentication_classes = []
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "auth"

    def post(self, request):
        dto = LoginDTO.model_validate(request.data)
        user, token = services.login(dto)
        return Response({"message": "Login successful", "user": _profile(user), "token": token})


class CustomersView(APIView):
    def get(self, request):
        require_role(request.user, ADMIN_ONLY)
        clients = [_profile(u) for u in services.list_customers()]
        return Response({"message": "Customers retrieved", "count": len(clients), "clients": clients})
