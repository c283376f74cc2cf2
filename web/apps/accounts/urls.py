from django.urls import path

from .views import CustomersView, LoginView, RegisterView

app_name = "accounts"

urlpatterns = [
    path("register", RegisterView.as_view(), name="register"),
    path("login", LoginView.as_view(), name="login"),
    path("clientes", CustomersView.as_view(), name="customers"),
]
