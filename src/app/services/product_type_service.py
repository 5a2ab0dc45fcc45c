from src.app.services.base import TenantScopedService
from src.app.services.dtos import ProductTypeResponse
from src.domain.entities import ProductType


class ProductTypeService(TenantScopedService[ProductType, ProductTypeResponse]):
    """CRUD over product types, slug unique per tenant"""

    entity = ProductType
    response = ProductTypeResponse
    repository_name = "product_types"
    error_prefix = "PRODUCT_TYPE"
    label = "Product type"
    conflict_code = "PRODUCT_TYPE_SLUG_EXISTS"
