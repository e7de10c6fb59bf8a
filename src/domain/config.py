"""
Domain configuration - immutable values threaded into the signup service.

Built once from application settings (see src.config.settings) and
passed in at construction; the domain never reads global config.
"""

from dataclasses import dataclass
from datetime import timedelta

MIN_BCRYPT_COST = 4


@dataclass(frozen=True)
class SignupConfig:
    """Signup workflow configuration."""

    token_lifetime: timedelta
    bcrypt_cost: int = 10

    def __post_init__(self) -> None:
        if self.token_lifetime <= timedelta(0):
            raise ValueError("token_lifetime must be positive")
        if self.bcrypt_cost < MIN_BCRYPT_COST:
            raise ValueError(f"bcrypt_cost must be at least {MIN_BCRYPT_COST}")
