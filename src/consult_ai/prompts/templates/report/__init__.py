"""Prompt templates for consultation reports."""
