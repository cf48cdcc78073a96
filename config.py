"""
Configuration management for the Wamid Kommo bot.

Loads environment variables (optionally from a .env file) once at start-up
and exposes them as an immutable Config value that is passed explicitly to
the webhook handler, the OAuth page and the sender.
"""

import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from dotenv import load_dotenv

DEFAULT_ENV_PATH = Path(__file__).parent / ".env"


def _as_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Config:
    """Process configuration. Read once, never mutated."""

    # Kommo account
    base_url: str = ""
    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""

    # Chat channel
    channel_secret: str = ""
    access_token: str = ""

    # Server
    port: int = 3000
    environment: str = "development"
    log_level: str = "INFO"

    # Outbound delivery
    send_timeout: float = 10.0
    msgid_prefix: str = "wamid"
    dispatch_in_background: bool = False

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        env_file: Optional[Path] = DEFAULT_ENV_PATH,
    ) -> "Config":
        """
        Build configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)
            env_file: Optional .env file loaded into os.environ before
                reading; ignored when environ is given, existing
                variables are not overridden

        Raises:
            ValueError: PORT or KOMMO_SEND_TIMEOUT is not a number
        """
        if environ is None and env_file is not None and Path(env_file).exists():
            load_dotenv(env_file, override=False)

        env = os.environ if environ is None else environ

        return cls(
            base_url=env.get("KOMMO_BASE_URL", "").strip().rstrip("/"),
            client_id=env.get("KOMMO_CLIENT_ID", "").strip(),
            client_secret=env.get("KOMMO_CLIENT_SECRET", "").strip(),
            redirect_uri=env.get("KOMMO_REDIRECT_URI", "").strip(),
            channel_secret=env.get("CHAT_CHANNEL_SECRET", ""),
            access_token=env.get("KOMMO_ACCESS_TOKEN", "").strip(),
            port=int(env.get("PORT") or "3000"),
            environment=env.get("ENVIRONMENT", "development"),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            send_timeout=float(env.get("KOMMO_SEND_TIMEOUT") or "10"),
            msgid_prefix=env.get("KOMMO_MSGID_PREFIX", "").strip() or "wamid",
            dispatch_in_background=_as_bool(env.get("KOMMO_DISPATCH_IN_BACKGROUND")),
        )

    @property
    def signature_required(self) -> bool:
        return bool(self.channel_secret)

    @property
    def can_send(self) -> bool:
        """True when outbound replies can be attempted at all."""
        return bool(self.access_token)

    def info(self) -> Dict[str, Any]:
        """Non-sensitive configuration summary (secrets reduced to flags)."""
        data = asdict(self)
        for secret in ("client_secret", "channel_secret", "access_token"):
            data[secret] = bool(data[secret])
        return data

    def warnings(self) -> List[str]:
        """Start-up concerns worth logging. Empty when fully configured."""
        problems = []
        if not self.channel_secret:
            problems.append(
                "CHAT_CHANNEL_SECRET not set: webhook signatures are NOT verified"
            )
        if not self.access_token:
            problems.append("KOMMO_ACCESS_TOKEN not set: replies will not be sent")
        if self.access_token and not self.base_url:
            problems.append("KOMMO_BASE_URL not set: outbound replies will fail")
        return problems


def load_config(env_file: Optional[Path] = DEFAULT_ENV_PATH) -> Config:
    """Load process configuration from the environment."""
    return Config.from_env(env_file=env_file)


if __name__ == "__main__":
    cfg = load_config()
    print("Configuration loaded:")
    for key, value in cfg.info().items():
        print(f"  {key}: {value}")
    for warning in cfg.warnings():
        print(f"  ⚠️  {warning}")
