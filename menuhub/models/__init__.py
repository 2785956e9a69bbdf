from menuhub.models.tenant import Tenant
from menuhub.models.user import User
from menuhub.models.category import Category
from menuhub.models.product import Product
from menuhub.models.product_variant import ProductVariant
