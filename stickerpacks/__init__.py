"""Sticker pack submission, moderation and catalogue service."""
