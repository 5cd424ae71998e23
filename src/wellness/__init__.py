"""Wellness tracking API."""
