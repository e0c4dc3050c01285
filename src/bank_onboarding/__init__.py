"""Bank onboarding - three-step bank registration service."""
