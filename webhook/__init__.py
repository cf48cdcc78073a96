"""
Webhook module - FastAPI route handlers outside the chat channel.

Includes:
- oauth.py: Kommo OAuth callback page
"""

from webhook.oauth import create_oauth_router

__all__ = ["create_oauth_router"]
