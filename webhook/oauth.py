"""
Kommo OAuth Callback Page

After "Authorize in Kommo", Kommo redirects here with ?code=...

The code is NOT exchanged server-side; the page shows the curl command to
mint tokens locally so no token ever passes through this server's logs.
"""

import html
import json
import logging
import uuid
from typing import Optional

from fastapi import APIRouter, status
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from config import Config

logger = logging.getLogger(__name__)

CLIENT_SECRET_PLACEHOLDER = "$KOMMO_CLIENT_SECRET"

_PAGE = """<!doctype html>
<html>
  <head>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Kommo OAuth Code</title>
    <style>
      body{{font-family: system-ui, -apple-system, Segoe UI, Roboto, Arial; padding:24px; max-width:900px; margin:auto; line-height:1.5}}
      code,pre{{background:#111; color:#eee; padding:12px; border-radius:8px; display:block; overflow:auto}}
      .box{{background:#f6f6f7; padding:16px; border-radius:10px; border:1px solid #e5e7eb}}
      h1{{margin-top:0}}
    </style>
  </head>
  <body>
    <h1>Authorization code received ✅</h1>
    <div class="box">
      <p><b>Code:</b> <code>{code}</code></p>
      <p>Run this cURL <i>on your machine</i> to exchange the code for <b>access_token</b> and <b>refresh_token</b>:</p>
      <pre>{curl}</pre>
      <p>Then set the tokens as environment variables on your host:</p>
      <pre>KOMMO_ACCESS_TOKEN=...
KOMMO_REFRESH_TOKEN=...</pre>
      <p><b>Security note:</b> Do not print or share tokens in chats or logs.</p>
    </div>
    <p>Next steps:</p>
    <ol>
      <li>Export <code>KOMMO_CLIENT_SECRET</code> in your shell and run the cURL above.</li>
      <li>In your hosting dashboard, add <code>KOMMO_ACCESS_TOKEN</code> and <code>KOMMO_REFRESH_TOKEN</code>.</li>
      <li>Register a Chat Channel via API and save <code>CHAT_CHANNEL_ID</code> / <code>CHAT_CHANNEL_SECRET</code>.</li>
    </ol>
  </body>
</html>
"""


def build_token_request(config: Config, code: str) -> dict:
    """Body for POST /oauth2/access_token, with the secret left as a shell variable."""
    return {
        "client_id": config.client_id,
        "client_secret": CLIENT_SECRET_PLACEHOLDER,
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": config.redirect_uri,
    }


def build_mint_command(config: Config, code: str) -> str:
    # Sentinel has no shell-special characters, so escaping leaves it intact
    sentinel = f"SECRET{uuid.uuid4().hex}"
    request = build_token_request(config, code)
    request["client_secret"] = sentinel
    body = json.dumps(request, indent=2, ensure_ascii=False)
    # Double quotes so the shell expands $KOMMO_CLIENT_SECRET and nothing else
    for char in ("\\", '"', "`", "$"):
        body = body.replace(char, "\\" + char)
    body = body.replace(sentinel, CLIENT_SECRET_PLACEHOLDER)
    return (
        f'curl -sS -X POST "{config.base_url}/oauth2/access_token" \\\n'
        f'  -H "Content-Type: application/json" \\\n'
        f'  -d "{body}"'
    )


def render_callback_page(config: Config, code: str) -> str:
    return _PAGE.format(
        code=html.escape(code),
        curl=html.escape(build_mint_command(config, code)),
    )


def create_oauth_router(config: Config) -> APIRouter:
    """Router exposing GET /oauth/callback."""

    router = APIRouter(prefix="/oauth", tags=["Kommo OAuth"])

    @router.get("/callback")
    async def oauth_callback(code: Optional[str] = None) -> Response:
        if not code:
            return PlainTextResponse(
                "Missing ?code param", status_code=status.HTTP_400_BAD_REQUEST
            )

        logger.info("OAuth authorization code received")
        return HTMLResponse(render_callback_page(config, code))

    return router
