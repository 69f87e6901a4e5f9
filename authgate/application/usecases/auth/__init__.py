from .auth_results import AuthError, AuthErrorCode, AuthResult, PasswordCheckResult
from .change_password import ChangePasswordInput, ChangePasswordUseCase
from .confirm_password import ConfirmPasswordInput, ConfirmPasswordUseCase
from .login import LoginInput, LoginUseCase
from .signup import SignupInput, SignupUseCase

__all__ = [
    "AuthError",
    "AuthErrorCode",
    "AuthResult",
    "PasswordCheckResult",
    "SignupInput",
    "SignupUseCase",
    "LoginInput",
    "LoginUseCase",
    "ChangePasswordInput",
    "ChangePasswordUseCase",
    "ConfirmPasswordInput",
    "ConfirmPasswordUseCase",
]
