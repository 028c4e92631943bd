"""Configuration des URLs Django pour la facturation B2C."""

from django.urls import path

from factures_b2c.contrib.django.views import (
    CreateInvoiceView,
    OssReportView,
    ShopSettingsView,
)

app_name = "factures_b2c"

urlpatterns = [
    path(
        "shops/<str:shop>/reports/oss/",
        OssReportView.as_view(),
        name="oss-report",
    ),
    path(
        "shops/<str:shop>/invoices/",
        CreateInvoiceView.as_view(),
        name="create-invoice",
    ),
    path(
        "shops/<str:shop>/settings/",
        ShopSettingsView.as_view(),
        name="shop-settings",
    ),
]
