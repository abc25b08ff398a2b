"""Bounded contexts: configuration, application, session."""
