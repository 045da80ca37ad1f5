"""infrakit - Terraform scaffolding and CI/CD wiring for small deployments."""

__version__ = "0.1.0"
