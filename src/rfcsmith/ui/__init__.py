"""User interfaces for rfcsmith."""
