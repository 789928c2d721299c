from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from user.api.views import LoginView, ProfileView

app_name = 'user_api'

urlpatterns = [
    path('token/', LoginView.as_view(), name='token-obtain'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),
    path('profile/', ProfileView.as_view(), name='profile'),
]
