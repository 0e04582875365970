import json
import logging
from pathlib import Path
from typing import Optional

from charging_app.core.config import settings

logger = logging.getLogger(__name__)

ADMIN_MODE_KEY = "adminMode"


class Preferences:
    """
    Preferencias locales del cliente guardadas en un JSON (equivalente a localStorage).
    Solo afecta a lo que se muestra; nunca se envía al servidor.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or settings.CLIENT_STATE_FILE).expanduser()

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Could not read client preferences at %s, using defaults", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get_admin_mode(self) -> bool:
        # Por defecto activo
        value = self._load().get(ADMIN_MODE_KEY)
        return value if isinstance(value, bool) else True

    def set_admin_mode(self, enabled: bool) -> None:
        data = self._load()
        data[ADMIN_MODE_KEY] = bool(enabled)
        self._save(data)
