"""Pydantic models for notion-native."""
