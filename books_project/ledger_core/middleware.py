from django.utils.deprecation import MiddlewareMixin
from .models import Company


class CurrentCompanyMiddleware(MiddlewareMixin):
    # Run on every request and attach a .company attribute to the request.
    # Authentication lives outside the engine, so the active company comes
    # from the X-Company header, falling back to the session.
    def process_request(self, request):
        company_id = request.headers.get("X-Company")
        if not company_id and hasattr(request, "session"):
            # If user switched companies,
            # choice is stored in the session as "active_company_id"
            company_id = request.session.get("active_company_id")

        request.company = None
        if company_id:
            try:
                request.company = Company.objects.get(pk=company_id)
            except (Company.DoesNotExist, ValueError):
                # unknown id: views answer 404 for a missing company
                request.company = None
