"""Vues Django pour la facturation B2C et les rapports OSS.

FR: Vues CBV (Class-Based Views) pour l'export du rapport OSS (JSON ou
    CSV), la création de factures et la gestion des paramètres de
    boutique. Pas de dépendance à Django REST Framework.
EN: CBV views for OSS report export (JSON or CSV), invoice creation and
    shop settings management. No DRF dependency.
"""

import json
import logging
from datetime import UTC, datetime

import pydantic
from django.http import HttpResponse, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from factures_b2c.contrib.django.conf import get_assembler, get_setting, get_storage_instance
from factures_b2c.models.invoice import InvoiceInput
from factures_b2c.oss.report import OssReporter
from factures_b2c.tax.rates import quarter_from_month

logger = logging.getLogger(__name__)


def _validation_details(exc: pydantic.ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in error['loc'])} : {error['msg']}"
        for error in exc.errors()
    ]


class JsonBodyMixin:
    """Mixin fournissant le décodage du corps JSON d'une requête."""

    def get_payload(self, request) -> dict:
        """Décode le corps JSON ou lève ValueError."""
        try:
            payload = json.loads(request.body or b"{}")
        except json.JSONDecodeError as exc:
            msg = "Corps de requête JSON invalide."
            raise ValueError(msg) from exc
        if not isinstance(payload, dict):
            msg = "Le corps de la requête doit être un objet JSON."
            raise ValueError(msg)
        return payload


class OssReportView(View):
    """Rapport OSS trimestriel d'une boutique (GET).

    Paramètres : ``year`` et ``quarter`` (défaut : trimestre en cours),
    ``format`` (``json`` par défaut, ou ``csv``).
    """

    def get(self, request, shop: str) -> HttpResponse:
        """Génère le rapport OSS au format demandé."""
        now = datetime.now(UTC)
        try:
            year = int(request.GET.get("year", now.year))
            quarter = int(request.GET.get("quarter", quarter_from_month(now.month)))
        except ValueError:
            return JsonResponse(
                {"success": False, "error": "Année ou trimestre invalide."},
                status=400,
            )

        try:
            reporter = OssReporter(get_storage_instance())
            report = reporter.generate_report(shop, year, quarter)
        except ValueError as exc:
            return JsonResponse({"success": False, "error": str(exc)}, status=400)
        except Exception:
            logger.exception("Erreur de génération du rapport OSS pour %s", shop)
            return JsonResponse(
                {"success": False, "error": "Erreur lors de la génération du rapport OSS."},
                status=500,
            )

        if request.GET.get("format", "json").lower() == "csv":
            response = HttpResponse(
                OssReporter.export_to_csv(report),
                content_type="text/csv; charset=utf-8",
            )
            response["Content-Disposition"] = (
                f'attachment; filename="oss-report-{year}-Q{quarter}.csv"'
            )
            return response

        return JsonResponse({"success": True, "report": report.model_dump(mode="json")})


@method_decorator(csrf_exempt, name="dispatch")
class CreateInvoiceView(JsonBodyMixin, View):
    """Crée la facture d'une commande normalisée (POST)."""

    def post(self, request, shop: str) -> JsonResponse:
        """Crée la facture ; 201 si émise, 200 si la commande était déjà facturée."""
        try:
            data = InvoiceInput.model_validate({**self.get_payload(request), "shop": shop})
        except ValueError as exc:
            details = _validation_details(exc) if isinstance(exc, pydantic.ValidationError) else []
            return JsonResponse(
                {"success": False, "error": "Données de commande invalides.", "details": details},
                status=400,
            )

        storage = get_storage_instance()
        already_invoiced = storage.find_invoice_by_order_id(data.order_id) is not None
        result = get_assembler(storage).create_invoice(data)
        if not result.success:
            return JsonResponse(
                {"success": False, "error": result.error, "errors": result.errors},
                status=400,
            )
        return JsonResponse(
            {"success": True, "invoice": result.invoice.model_dump(mode="json")},
            status=200 if already_invoiced else 201,
        )


@method_decorator(csrf_exempt, name="dispatch")
class ShopSettingsView(JsonBodyMixin, View):
    """Paramètres de facturation d'une boutique (GET, POST)."""

    def get(self, request, shop: str) -> JsonResponse:
        """Retourne les paramètres, créés avec les valeurs par défaut si absents."""
        storage = get_storage_instance()
        settings = storage.get_shop_settings(shop)
        if settings is None:
            settings = storage.update_shop_settings(
                shop, {"default_language": get_setting("DEFAULT_LANGUAGE")}
            )
        return JsonResponse({"success": True, "settings": settings.model_dump(mode="json")})

    def post(self, request, shop: str) -> JsonResponse:
        """Met à jour les paramètres (les champs de séquence sont ignorés)."""
        try:
            settings = get_storage_instance().update_shop_settings(shop, self.get_payload(request))
        except ValueError as exc:
            details = _validation_details(exc) if isinstance(exc, pydantic.ValidationError) else []
            return JsonResponse(
                {"success": False, "error": "Paramètres invalides.", "details": details},
                status=400,
            )
        return JsonResponse({"success": True, "settings": settings.model_dump(mode="json")})
