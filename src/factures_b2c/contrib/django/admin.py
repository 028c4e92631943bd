"""Configuration de l'admin Django pour la facturation B2C."""

from django.contrib import admin

from factures_b2c.contrib.django.models import (
    Invoice,
    InvoiceLine,
    OssSale,
    OssThreshold,
    ShopSettings,
)


@admin.register(ShopSettings)
class ShopSettingsAdmin(admin.ModelAdmin):
    """Administration des paramètres de boutique."""

    list_display = ["shop", "company_name", "franchise_en_base", "oss_enabled", "current_sequence"]
    search_fields = ["shop", "company_name", "siren"]
    # Séquence gérée uniquement par l'incrément atomique
    readonly_fields = ["current_year", "current_sequence", "created_at", "updated_at"]

    fieldsets = [
        (
            "Identité légale",
            {
                "fields": [
                    "shop",
                    "company_name",
                    "legal_form",
                    "share_capital",
                    "address",
                    "postal_code",
                    "city",
                    "country",
                    "siren",
                    "siret",
                    "rcs",
                    "vat_number",
                ],
            },
        ),
        (
            "Régimes de TVA",
            {
                "fields": ["franchise_en_base", "oss_enabled", "oss_number"],
            },
        ),
        (
            "Numérotation",
            {
                "fields": ["invoice_prefix", "invoice_format", "current_year", "current_sequence"],
            },
        ),
        (
            "Présentation",
            {
                "fields": [
                    "default_language",
                    "default_currency",
                    "pdf_theme",
                    "payment_terms",
                    "late_penalty_rate",
                    "late_penalty_amount",
                ],
            },
        ),
    ]


class InvoiceLineInline(admin.TabularInline):
    """Inline en lecture seule pour les lignes de facture."""

    model = InvoiceLine
    extra = 0
    can_delete = False

    def has_change_permission(self, request, obj=None):
        return False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    """Administration des factures (données fiscales non modifiables)."""

    list_display = [
        "invoice_number",
        "shop",
        "issued_at",
        "customer_name",
        "customer_country",
        "total_ttc",
        "oss_applied",
    ]
    list_filter = ["shop", "oss_applied", "franchise_en_base", "customer_country"]
    search_fields = ["invoice_number", "order_id", "customer_name", "customer_email"]
    inlines = [InvoiceLineInline]

    def get_readonly_fields(self, request, obj=None):
        fields = [f.name for f in self.model._meta.fields]
        return [name for name in fields if name not in ("pdf_path", "pdf_url")]

    def has_add_permission(self, request):
        return False


@admin.register(OssThreshold)
class OssThresholdAdmin(admin.ModelAdmin):
    """Consultation des cumuls OSS par pays."""

    list_display = [
        "shop",
        "year",
        "country_code",
        "total_sales_ttc",
        "order_count",
        "threshold_reached",
        "threshold_date",
    ]
    list_filter = ["year", "threshold_reached", "country_code"]
    search_fields = ["shop"]
    readonly_fields = ["last_updated"]


@admin.register(OssSale)
class OssSaleAdmin(admin.ModelAdmin):
    """Consultation du registre des ventes OSS."""

    list_display = [
        "invoice_number",
        "shop",
        "sale_date",
        "customer_country",
        "base_ht",
        "tax_rate",
        "tax_amount",
        "total_ttc",
    ]
    list_filter = ["year", "quarter", "customer_country"]
    search_fields = ["invoice_number", "order_id", "shop"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
