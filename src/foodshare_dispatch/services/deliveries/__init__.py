"""Delivery status lifecycle and updates."""
