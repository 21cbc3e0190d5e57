"""Agency dashboard core: click analytics and the onboarding/approval access gate."""

__version__ = "0.1.0"
