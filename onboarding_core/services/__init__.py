"""Services of the onboarding core."""

from .configuration_service import OnboardingConfiguration

__all__ = ["OnboardingConfiguration"]
