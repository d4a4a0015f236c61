import django_filters

from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    """Catalog search: case-insensitive substring match on the name."""

    search = django_filters.CharFilter(field_name="name", lookup_expr="icontains")

    class Meta:
        model = Product
        fields: list = []
