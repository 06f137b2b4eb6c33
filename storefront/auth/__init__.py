# Package exports - these allow cleaner imports like:
# from storefront.auth import require_sign_in, is_admin
from storefront.auth.jwt_validator import jwt_validator
from storefront.auth.passwords import hash_password, compare_password
from storefront.auth.dependencies import require_sign_in, is_admin
