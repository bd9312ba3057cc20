"""
Feature modules for Route Weather.

Each feature is a self-contained module with:
- models.py - Dataclasses for the feature's domain
- schemas.py - Pydantic schemas
- service.py / sampler.py / enrichment.py ... - Business logic
"""
