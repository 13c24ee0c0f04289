"""Configuration for the dialog facets app."""
