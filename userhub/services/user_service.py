"""User and authentication workflows.

``UserService`` composes the password hasher, the verification token codec,
the JWT issuer and the repositories. Every public method opens exactly one
``UnitOfWork``; anything that fails inside it is rolled back. Repository and
collaborator exceptions are translated into the ``UserServiceError``
taxonomy before they leave this module.
"""

import logging
from contextlib import suppress
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from sqlalchemy.orm import sessionmaker

from userhub.config import Settings, settings
from userhub.constants import (
    PROFILE_IMAGE_DIR,
    VERIFICATION_EMAIL_TEMPLATE,
    VERIFICATION_TOKEN_SEPARATOR,
    VERIFICATION_TOKEN_TIME_FORMAT,
    VERIFY_EMAIL_ROUTE,
    Role,
)
from userhub.models import User
from userhub.schemas.auth import RefreshTokenRequest, TokenResponse, UserLoginRequest
from userhub.schemas.common import PaginationRequest
from userhub.schemas.user import (
    SendVerificationEmailRequest,
    UserCreateRequest,
    UserPaginationResponse,
    UserResponse,
    UserUpdateRequest,
    UserUpdateResponse,
    VerifyEmailRequest,
    VerifyEmailResponse,
)
from userhub.services.email_service import EmailDeliveryError, EmailService
from userhub.services.exceptions import (
    AccountAlreadyVerifiedError,
    EmailAlreadyExistsError,
    EmailNotFoundError,
    ExpiredRefreshTokenError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    MailDeliveryError,
    StorageError,
    TokenExpiredError,
    TokenInvalidError,
    UserNotFoundError,
    ValidationFailedError,
)
from userhub.services.file_storage import FileStorageError, FileUpload, LocalFileStorage
from userhub.services.jwt_service import JWTService
from userhub.services.password_service import (
    CredentialError,
    PasswordService,
    PasswordTooLongError,
)
from userhub.services.repositories import DuplicateError
from userhub.services.template_service import TemplateRenderer, TemplateRenderError
from userhub.services.token_codec import TokenCodec, TokenCodecError
from userhub.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class UserService:
    """Registration, verification, profile and token lifecycle flows."""

    def __init__(
        self,
        session_factory: sessionmaker,
        config: Settings = settings,
        *,
        jwt_service: JWTService | None = None,
        token_codec: TokenCodec | None = None,
        password_service: PasswordService | None = None,
        mailer: EmailService | None = None,
        renderer: TemplateRenderer | None = None,
        file_storage: LocalFileStorage | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._config = config
        self._jwt = jwt_service or JWTService(config)
        self._codec = token_codec or TokenCodec(config.aes_key)
        self._passwords = password_service or PasswordService(config)
        self._mailer = mailer or EmailService(config)
        self._renderer = renderer or TemplateRenderer()
        self._files = file_storage or LocalFileStorage(config)

    def _unit_of_work(self) -> UnitOfWork:
        return UnitOfWork(self._session_factory)

    def _hash_password(self, password: str) -> str:
        try:
            return self._passwords.hash_password(password)
        except PasswordTooLongError as e:
            raise ValidationFailedError("password", str(e)) from e

    # Email verification tokens

    def build_verification_token(self, email: str, expires_at: datetime) -> str:
        """Encrypt ``email`` and its expiry into an opaque token."""
        expiry = expires_at.astimezone(UTC).strftime(VERIFICATION_TOKEN_TIME_FORMAT)
        return self._codec.encrypt(f"{email}{VERIFICATION_TOKEN_SEPARATOR}{expiry}")

    def parse_verification_token(self, token: str) -> tuple[str, datetime]:
        """Decrypt a verification token into (email, expiry).

        Raises:
            TokenInvalidError: The token is not one we issued or is malformed.
        """
        try:
            plaintext = self._codec.decrypt(token)
        except TokenCodecError as e:
            raise TokenInvalidError() from e

        # Split on the last separator: the email may itself contain "_".
        email, separator, expiry = plaintext.rpartition(VERIFICATION_TOKEN_SEPARATOR)
        if not separator or not email:
            raise TokenInvalidError()

        try:
            expires_at = datetime.strptime(expiry, VERIFICATION_TOKEN_TIME_FORMAT)
        except ValueError as e:
            raise TokenInvalidError() from e

        return email, expires_at.replace(tzinfo=UTC)

    def _send_verification_email(self, email: str) -> None:
        hours = self._config.verification_token_expire_hours
        try:
            token = self.build_verification_token(
                email, datetime.now(UTC) + timedelta(hours=hours)
            )
            verify_link = f"{self._config.app_url.rstrip('/')}/{VERIFY_EMAIL_ROUTE}?token={token}"
            body = self._renderer.render(
                VERIFICATION_EMAIL_TEMPLATE,
                {"email": email, "verify_link": verify_link, "expires_hours": hours},
            )
            self._mailer.send(email, self._config.email_subject, body)
        except (TokenCodecError, TemplateRenderError, EmailDeliveryError) as e:
            logger.exception(f"Failed to send verification email to {email}")
            raise MailDeliveryError() from e

        logger.info(f"Verification email sent to: {email}")

    # Registration and verification

    def _store_profile_image(self, image: FileUpload) -> str:
        path = f"{PROFILE_IMAGE_DIR}/{uuid4()}"
        if image.extension:
            path = f"{path}.{image.extension}"
        try:
            return self._files.save(image, path)
        except FileStorageError as e:
            raise StorageError() from e

    def _discard_image(self, image_url: str | None) -> None:
        if image_url:
            self._files.delete(image_url)

    def register(self, request: UserCreateRequest, image: FileUpload | None = None) -> UserResponse:
        """Create an unverified user and send the verification email.

        The user row is committed before the email is sent. If sending fails
        the account stays registered but unverified, and the caller can retry
        with ``send_verification_email``.
        """
        password_hash = self._hash_password(request.password)

        with self._unit_of_work() as uow:
            _, exists = uow.users.check_email(request.email)
            if exists:
                raise EmailAlreadyExistsError()

            image_url = self._store_profile_image(image) if image is not None else None

            user = User(
                name=request.name,
                email=request.email,
                phone_number=request.phone_number,
                password=password_hash,
                role=Role.USER,
                image_url=image_url,
                is_verified=False,
            )
            try:
                uow.users.register(user)
                uow.commit()
            except DuplicateError as e:
                # Lost a race with a concurrent registration for the same email
                self._discard_image(image_url)
                raise EmailAlreadyExistsError() from e
            except Exception:
                self._discard_image(image_url)
                raise

            response = UserResponse.model_validate(user)

        logger.info(f"User registered (pending verification): {response.email}")
        self._send_verification_email(response.email)
        return response

    def send_verification_email(self, request: SendVerificationEmailRequest) -> None:
        """Send a fresh verification link. Safe to call repeatedly."""
        with self._unit_of_work() as uow:
            user = uow.users.find_by_email(request.email)
            if user is None:
                raise EmailNotFoundError()
            email = user.email

        self._send_verification_email(email)

    def verify_email(self, request: VerifyEmailRequest) -> VerifyEmailResponse:
        """Mark the account named in a verification token as verified.

        Raises:
            TokenInvalidError: The token cannot be decrypted or parsed.
            TokenExpiredError: The token is past its expiry. The error carries
                a response with the email and ``is_verified=False``.
            UserNotFoundError: No live user has the token's email.
            AccountAlreadyVerifiedError: The account was verified before.
        """
        email, expires_at = self.parse_verification_token(request.token)

        if datetime.now(UTC) > expires_at:
            raise TokenExpiredError(VerifyEmailResponse(email=email, is_verified=False))

        with self._unit_of_work() as uow:
            user = uow.users.find_by_email(email)
            if user is None:
                raise UserNotFoundError()
            if user.is_verified:
                raise AccountAlreadyVerifiedError()

            uow.users.update(user.id, is_verified=True)
            uow.commit()

        logger.info(f"Email verified for user: {email}")
        return VerifyEmailResponse(email=email, is_verified=True)

    # Profile

    def get_all_users_with_pagination(self, request: PaginationRequest) -> UserPaginationResponse:
        with self._unit_of_work() as uow:
            page = uow.users.get_all_with_pagination(
                search=request.search, page=request.page, per_page=request.per_page
            )
            return UserPaginationResponse(
                data=[UserResponse.model_validate(u) for u in page.items],
                page=page.page,
                per_page=page.per_page,
                max_page=page.max_page,
                count=page.count,
            )

    def get_user_by_id(self, user_id: str) -> UserResponse:
        with self._unit_of_work() as uow:
            user = uow.users.find_by_id(user_id)
            if user is None:
                raise UserNotFoundError()
            return UserResponse.model_validate(user)

    def get_user_by_email(self, email: str) -> UserResponse:
        with self._unit_of_work() as uow:
            user = uow.users.find_by_email(email)
            if user is None:
                raise UserNotFoundError()
            return UserResponse.model_validate(user)

    def update(self, request: UserUpdateRequest, user_id: str) -> UserUpdateResponse:
        """Apply the supplied fields to a user's profile.

        A new password is hashed before it is stored; omitting it keeps the
        current hash.
        """
        fields = request.model_dump(exclude_unset=True, exclude_none=True)
        if "password" in fields:
            fields["password"] = self._hash_password(fields["password"])

        with self._unit_of_work() as uow:
            user = uow.users.find_by_id(user_id)
            if user is None:
                raise UserNotFoundError()

            new_email = fields.get("email")
            if new_email and new_email != user.email:
                _, taken = uow.users.check_email(new_email)
                if taken:
                    raise EmailAlreadyExistsError()

            try:
                user = uow.users.update(user.id, **fields)
                uow.commit()
            except DuplicateError as e:
                raise EmailAlreadyExistsError() from e

            logger.info(f"User updated: {user.id} ({', '.join(sorted(fields)) or 'no changes'})")
            return UserUpdateResponse.model_validate(user)

    def delete(self, user_id: str) -> None:
        """Soft-delete a user together with all of their refresh tokens."""
        with self._unit_of_work() as uow:
            user = uow.users.find_by_id(user_id)
            if user is None:
                raise UserNotFoundError()

            removed = uow.refresh_tokens.delete_by_user_id(user.id)
            uow.users.delete(user.id)
            uow.commit()

        logger.info(f"User deleted: {user_id} (revoked {removed} refresh tokens)")

    # Tokens

    def login(self, request: UserLoginRequest) -> TokenResponse:
        """Check credentials and issue a new access/refresh token pair.

        Every failure raises the same ``InvalidCredentialsError``. Previous
        refresh tokens for the user are replaced in the same transaction as
        the new one is stored.
        """
        with self._unit_of_work() as uow:
            user = uow.users.find_by_email(request.email)
            if user is None:
                # Keep timing close to the wrong-password path
                with suppress(CredentialError):
                    self._passwords.verify_password(
                        self._passwords.get_dummy_hash(), request.password
                    )
                logger.warning("Login failed: unknown email")
                raise InvalidCredentialsError()

            try:
                self._passwords.verify_password(user.password, request.password)
            except CredentialError as e:
                logger.warning(f"Login failed for user {user.id}: {e}")
                raise InvalidCredentialsError() from None

            if self._config.require_verified_login and not user.is_verified:
                logger.warning(f"Login blocked for unverified user {user.id}")
                raise InvalidCredentialsError()

            access_token, expires_in = self._jwt.generate_access_token(user.id, user.role)
            refresh_token, expires_at = self._jwt.generate_refresh_token()

            uow.refresh_tokens.delete_by_user_id(user.id)
            uow.refresh_tokens.create(user.id, refresh_token, expires_at)
            uow.commit()

            logger.info(f"User logged in: {user.id}")
            return TokenResponse(
                access_token=access_token,
                refresh_token=refresh_token,
                expires_in=expires_in,
                role=user.role,
            )

    def refresh_token(self, request: RefreshTokenRequest) -> TokenResponse:
        """Exchange a refresh token for a new access token.

        With rotation enabled the presented token is consumed and a new one
        returned. The old token is removed with a conditional delete, so of
        two concurrent refreshes with the same token only one can succeed.
        Without rotation the same refresh token is returned and storage is not
        touched.
        """
        with self._unit_of_work() as uow:
            stored = uow.refresh_tokens.find_by_token(request.refresh_token)
            if stored is None:
                raise InvalidRefreshTokenError()

            if stored.is_expired():
                uow.refresh_tokens.delete_by_token(stored.token)
                uow.commit()
                raise ExpiredRefreshTokenError()

            user = uow.users.find_by_id(stored.user_id)
            if user is None:
                raise UserNotFoundError()

            access_token, expires_in = self._jwt.generate_access_token(user.id, user.role)

            if not self._config.rotate_refresh_token:
                return TokenResponse(
                    access_token=access_token,
                    refresh_token=request.refresh_token,
                    expires_in=expires_in,
                    role=user.role,
                )

            if uow.refresh_tokens.delete_by_token(stored.token) == 0:
                # Already consumed by a concurrent refresh
                raise InvalidRefreshTokenError()

            new_token, expires_at = self._jwt.generate_refresh_token()
            uow.refresh_tokens.create(user.id, new_token, expires_at)
            uow.commit()

            logger.info(f"Refresh token rotated for user: {user.id}")
            return TokenResponse(
                access_token=access_token,
                refresh_token=new_token,
                expires_in=expires_in,
                role=user.role,
            )

    def logout(self, refresh_token: str) -> None:
        """Delete a refresh token. Unknown tokens are ignored."""
        with self._unit_of_work() as uow:
            removed = uow.refresh_tokens.delete_by_token(refresh_token)
            uow.commit()

        if removed:
            logger.info("User logged out")

    def revoke_refresh_token(self, user_id: str) -> int:
        """Delete every refresh token belonging to a user."""
        with self._unit_of_work() as uow:
            if uow.users.find_by_id(user_id) is None:
                raise UserNotFoundError()

            removed = uow.refresh_tokens.delete_by_user_id(user_id)
            uow.commit()

        logger.info(f"Revoked {removed} refresh tokens for user: {user_id}")
        return removed

    def delete_expired_tokens(self) -> int:
        """Physically remove refresh tokens past their expiry."""
        with self._unit_of_work() as uow:
            removed = uow.refresh_tokens.delete_expired()
            uow.commit()

        logger.info(f"Deleted {removed} expired refresh tokens")
        return removed
