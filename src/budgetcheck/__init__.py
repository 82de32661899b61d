"""Cost-model and configuration-template verification."""
