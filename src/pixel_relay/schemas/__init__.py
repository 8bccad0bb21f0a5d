"""Pydantic models for canonical events, consent and the init snapshot."""
