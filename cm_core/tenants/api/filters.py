from __future__ import annotations

import django_filters

from cm_core.tenants.models import Tenant, TenantStatus, TenantType


class TenantFilter(django_filters.FilterSet):
    type = django_filters.ChoiceFilter(choices=TenantType.choices)
    status = django_filters.ChoiceFilter(choices=TenantStatus.choices)
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")

    class Meta:
        model = Tenant
        fields = ["type", "status", "name"]
