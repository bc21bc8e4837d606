"""Shared models, validators, and utilities for the varejo data generator."""

from varejo_datagen.shared.models import ENTITY_MODELS, EntityRecord

__all__ = ["ENTITY_MODELS", "EntityRecord"]
