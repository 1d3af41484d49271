"""Glossary pipeline stages: validation and export."""
