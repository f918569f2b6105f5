"""Account URL configuration."""

from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from modules.accounts.views import MeView, SignInView, SignOutView, SignUpView, UserViewSet

router = DefaultRouter(trailing_slash=True)
router.register("users", UserViewSet, basename="user")

urlpatterns = [
    path("auth/sign-in/", SignInView.as_view(), name="sign_in"),
    path("auth/sign-up/", SignUpView.as_view(), name="sign_up"),
    path("auth/sign-out/", SignOutView.as_view(), name="sign_out"),
    path("me", MeView.as_view(), name="me"),
    *router.urls,
]
