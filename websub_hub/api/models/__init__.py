"""Request and response models for the hub API."""
