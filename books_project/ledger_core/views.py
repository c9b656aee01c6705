import json
import logging
from datetime import date
from functools import wraps

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from . import services
from .exceptions import ConflictError, NotFoundError, PeriodLockedError

logger = logging.getLogger(__name__)

# Engine error -> HTTP status
ERROR_STATUS = {
    DjangoValidationError: 400,  # engine ValidationError subclasses it
    PeriodLockedError: 423,
    NotFoundError: 404,
    ConflictError: 409,
}


def _error_message(exc):
    if isinstance(exc, DjangoValidationError):
        return "; ".join(exc.messages)
    return str(exc)


def engine_view(view):
    """Require an active company, then turn engine errors into JSON responses."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        if getattr(request, "company", None) is None:
            return JsonResponse({"ok": False, "error": "Company not found"}, status=404)
        try:
            return view(request, *args, **kwargs)
        except tuple(ERROR_STATUS) as exc:
            status = next(code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls))
            return JsonResponse({"ok": False, "error": _error_message(exc)}, status=status)
    return wrapper


def _body(request):
    try:
        return json.loads(request.body or b"{}")
    except ValueError:
        raise DjangoValidationError("Request body is not valid JSON")


def _date(value, label, required=True):
    if not value:
        if required:
            raise DjangoValidationError(f"{label} is required")
        return None
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise DjangoValidationError(f"{label} must be an ISO date (YYYY-MM-DD)")


def _user(request):
    user = getattr(request, "user", None)
    return user if user is not None and user.is_authenticated else None


def _json(data, status=200):
    return JsonResponse(data, status=status, encoder=DjangoJSONEncoder)


def _voucher_payload(voucher):
    return {
        "id": voucher.pk,
        "voucher_number": voucher.voucher_number,
        "voucher_type": voucher.voucher_type.name,
        "date": voucher.date,
        "narration": voucher.narration,
        "total_amount": voucher.total_amount,
        "entries": [
            {"ledger_id": e.ledger_id, "amount": e.amount, "entry_type": e.entry_type}
            for e in voucher.entries.order_by("id")
        ],
    }


def _invoice_payload(invoice):
    return {
        "id": invoice.pk,
        "voucher_id": invoice.voucher_id,
        "invoice_type": invoice.invoice_type,
        "invoice_number": invoice.invoice_number,
        "date": invoice.date,
        "subtotal": invoice.subtotal,
        "tax_total": invoice.tax_total,
        "discount_amount": invoice.discount_amount,
        "grand_total": invoice.grand_total,
        "paid_amount": invoice.paid_amount,
        "outstanding_amount": invoice.outstanding_amount,
        "payment_status": invoice.payment_status,
        "items": [
            {
                "item_id": line.item_id,
                "quantity": line.quantity,
                "rate": line.rate,
                "taxable_amount": line.taxable_amount,
                "cgst_amount": line.cgst_amount,
                "sgst_amount": line.sgst_amount,
                "igst_amount": line.igst_amount,
                "total_amount": line.total_amount,
            }
            for line in invoice.items.all()
        ],
    }


def _voucher_kwargs(data):
    return {
        "voucher_type": data.get("voucher_type_id"),
        "voucher_number": data.get("voucher_number"),
        "date": _date(data.get("date"), "date"),
        "narration": data.get("narration", ""),
        "entries": data.get("entries") or [],
    }


def _invoice_kwargs(data):
    return {
        "invoice_type": data.get("invoice_type"),
        "invoice_number": data.get("invoice_number"),
        "date": _date(data.get("date"), "date"),
        "party_ledger_id": data.get("party_ledger_id"),
        "sales_ledger_id": data.get("sales_ledger_id"),
        "items": data.get("items") or [],
        "discount_percent": data.get("discount_percent") or 0,
        "due_date": _date(data.get("due_date"), "due_date", required=False),
        "notes": data.get("notes", ""),
        "original_invoice_number": data.get("original_invoice_number", ""),
        "original_invoice_date": _date(
            data.get("original_invoice_date"), "original_invoice_date", required=False
        ),
    }


# ---------- Vouchers ----------
@csrf_exempt
@require_POST
@engine_view
def voucher_create_view(request):
    voucher = services.post_voucher(
        request.company, user=_user(request), **_voucher_kwargs(_body(request))
    )
    return _json({"ok": True, "voucher": _voucher_payload(voucher)}, status=201)


@csrf_exempt
@require_http_methods(["PUT", "DELETE"])
@engine_view
def voucher_detail_view(request, voucher_id):
    if request.method == "DELETE":
        services.void_voucher(request.company, voucher_id, user=_user(request))
        return _json({"ok": True})

    data = _body(request)
    kwargs = _voucher_kwargs(data)
    if kwargs["voucher_type"] is None:
        kwargs.pop("voucher_type")
    voucher = services.replace_voucher(
        request.company, voucher_id, user=_user(request), **kwargs
    )
    return _json({"ok": True, "voucher": _voucher_payload(voucher)})


# ---------- Invoices ----------
@csrf_exempt
@require_POST
@engine_view
def invoice_create_view(request):
    invoice = services.create_invoice(
        request.company, user=_user(request), **_invoice_kwargs(_body(request))
    )
    return _json({"ok": True, "invoice": _invoice_payload(invoice)}, status=201)


@csrf_exempt
@require_http_methods(["PUT", "DELETE"])
@engine_view
def invoice_detail_view(request, invoice_id):
    if request.method == "DELETE":
        services.delete_invoice(request.company, invoice_id, user=_user(request))
        return _json({"ok": True})

    invoice = services.update_invoice(
        request.company, invoice_id, user=_user(request), **_invoice_kwargs(_body(request))
    )
    return _json({"ok": True, "invoice": _invoice_payload(invoice)})


# ---------- Statement ----------
@require_GET
@engine_view
def ledger_statement_view(request, ledger_id):
    statement = services.build_statement(
        request.company,
        ledger_id,
        start_date=_date(request.GET.get("start_date"), "start_date", required=False),
        end_date=_date(request.GET.get("end_date"), "end_date", required=False),
    )
    return _json({"ok": True, "statement": statement.as_dict()})


# ---------- Financial years ----------
@csrf_exempt
@require_POST
@engine_view
def financial_year_close_view(request, year_id):
    fy = services.close_financial_year(request.company, year_id, user=_user(request))
    return _json({"ok": True, "id": fy.pk, "is_closed": fy.is_closed})


@csrf_exempt
@require_POST
@engine_view
def financial_year_reopen_view(request, year_id):
    fy = services.reopen_financial_year(request.company, year_id, user=_user(request))
    return _json({"ok": True, "id": fy.pk, "is_closed": fy.is_closed})
