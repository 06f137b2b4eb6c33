from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List, Tuple
import logging

from storefront.auth.jwt_validator import jwt_validator
from storefront.auth.passwords import hash_password, compare_password
from storefront.core.errors import BadRequestError, ConflictError, NotFoundError, UnauthorizedError
from storefront.models.user import User, ROLE_USER
from storefront.schemas.user import RegisterRequest, LoginRequest, ForgotPasswordRequest, ProfileUpdate

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class UserService:
    """Service layer for registration, login and profile operations"""

    def __init__(self, db: Session):
        self.db = db

    def _find_by_email(self, email: str) -> User:
        return self.db.query(User).filter(User.email == email).first()

    def register(self, data: RegisterRequest) -> User:
        """Create a regular user account"""
        if self._find_by_email(data.email):
            raise ConflictError("Email is already registered, please log in")

        user = User(
            name=data.name,
            email=data.email,
            password=hash_password(data.password),
            phone=data.phone,
            address=data.address,
            answer=data.answer,
            role=ROLE_USER,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            self.db.rollback()
            raise ConflictError("Email is already registered, please log in")
        self.db.refresh(user)

        logger.info(f"Registered user {user.email} (user_id: {user.id})")
        return user

    def login(self, data: LoginRequest) -> Tuple[User, str]:
        """Check credentials; returns the user and a freshly signed token"""
        user = self._find_by_email(data.email)
        if not user:
            raise NotFoundError("Email is not registered")

        if not compare_password(data.password, user.password):
            logger.warning(f"Invalid password for {data.email}")
            raise UnauthorizedError("Invalid Password")

        token = jwt_validator.create_token(str(user.id))
        logger.info(f"User {user.email} logged in")
        return user, token

    def reset_password(self, data: ForgotPasswordRequest) -> None:
        """Reset the password of the user matching both email and security answer"""
        user = self.db.query(User).filter(
            User.email == data.email,
            User.answer == data.answer
        ).first()
        if not user:
            raise NotFoundError("Wrong Email Or Answer")

        user.password = hash_password(data.new_password)
        self.db.commit()
        logger.info(f"Password reset for {user.email}")

    def update_profile(self, user: User, data: ProfileUpdate) -> User:
        """Apply a partial profile update; omitted fields keep their values"""
        if data.password is not None and len(data.password) < MIN_PASSWORD_LENGTH:
            raise BadRequestError("Password is required and 6 character long")

        update_data = data.model_dump(exclude_unset=True, exclude_none=True)
        if "password" in update_data:
            update_data["password"] = hash_password(update_data["password"])

        for field, value in update_data.items():
            setattr(user, field, value)

        self.db.commit()
        self.db.refresh(user)
        return user

    def list_users(self) -> List[User]:
        """List regular (non-admin) users"""
        return self.db.query(User).filter(User.role == ROLE_USER).order_by(User.created_at.desc(), User.id).all()
