# Package exports - these allow cleaner imports like:
# from storefront.schemas import ProductResponse, CategoryResponse
from storefront.schemas.common import Envelope, ErrorEnvelope
from storefront.schemas.user import RegisterRequest, LoginRequest, ForgotPasswordRequest, ProfileUpdate, UserResponse
from storefront.schemas.category import CategoryRequest, CategoryResponse
from storefront.schemas.product import ProductResponse, ProductFilterRequest, ProductForm
from storefront.schemas.order import OrderResponse, OrderStatusUpdate, PaymentRequest, CartItem
