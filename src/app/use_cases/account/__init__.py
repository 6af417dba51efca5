"""
Account Use Cases
"""

from .change_password_use_case import ChangePasswordResponse, ChangePasswordUseCase

__all__ = ["ChangePasswordUseCase", "ChangePasswordResponse"]
