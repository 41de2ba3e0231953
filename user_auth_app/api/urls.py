from django.urls import path

from .views import LoginView, LogoutView, MeView, PasswordUpdateView, RegistrationView

urlpatterns = [
    path('register', RegistrationView.as_view(), name='registration'),
    path('login', LoginView.as_view(), name='login'),
    path('password', PasswordUpdateView.as_view(), name='password-update'),
    path('logout', LogoutView.as_view(), name='logout'),
    path('me', MeView.as_view(), name='me'),
]
