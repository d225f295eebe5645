"""Webhook service for Clova Extension Kit requests."""
