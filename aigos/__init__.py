"""AI-GOS: company research and onboarding prefill service."""

__version__ = "0.1.0"
