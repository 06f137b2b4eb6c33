# Package exports - these allow cleaner imports like:
# from storefront.services import ProductService, OrderService
from storefront.services.user_service import UserService
from storefront.services.category_service import CategoryService
from storefront.services.product_service import ProductService
from storefront.services.order_service import OrderService
from storefront.services.payment_service import PaymentService
