class TenantAdminMixin:
    """
    Enforce tenant isolation in Django admin.
    Uses request.company (set by CurrentCompanyMiddleware).
    Superusers see every company.
    """

    def _get_request_company(self, request):
        return getattr(request, "company", None)

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        company = self._get_request_company(request)

        # If superuser, show everything;
        # otherwise restrict to company if available
        if request.user.is_superuser:
            return qs
        if company is None:
            # If no company available in request, return none
            return qs.none()
        return qs.filter(company=company)

    def formfield_for_foreignkey(self, db_field, request, **kwargs):
        """
        Restrict foreignkey dropdowns to the current company where appropriate
        (company, group, ledger, item, unit...).
        """
        company = self._get_request_company(request)

        if not request.user.is_superuser:
            rel_model = db_field.related_model
            if db_field.name == "company":
                # If FK is to Company, restrict to the request's company
                qs = rel_model.objects.filter(pk=company.pk) if company else rel_model.objects.none()
                kwargs["queryset"] = qs
            elif any(f.name == "company" for f in rel_model._meta.get_fields()):
                # related model is company-scoped
                qs = rel_model.objects.filter(company=company) if company else rel_model.objects.none()
                kwargs["queryset"] = qs

        return super().formfield_for_foreignkey(db_field, request, **kwargs)

    def save_model(self, request, obj, form, change):
        # Ensure object is always owned by company on save (unless superuser)
        if not request.user.is_superuser:
            company = self._get_request_company(request)
            if company is not None:
                obj.company = company
        super().save_model(request, obj, form, change)
