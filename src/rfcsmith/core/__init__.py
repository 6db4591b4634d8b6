"""Renderer state, configuration and diagnostics shared by every adapter."""
