import os

class Settings:
    """Configuración de la aplicación que lee variables de entorno dinámicamente."""

    @property
    def app_name(self) -> str:
        return "Portfolio Backend"

    @property
    def version(self) -> str:
        return os.getenv("APP_VERSION", "1.0.0")

    @property
    def environment(self) -> str:
        # Producción si ENV=production o si la plataforma inyecta PORT
        env = os.getenv("ENV", "").lower()
        if env == "production" or os.getenv("PORT"):
            return "production"
        return "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def database_url(self) -> str:
        return os.getenv("DATABASE_URL", "").strip() or "sqlite:///./portfolio.db"

    @property
    def db_timeout_seconds(self) -> int:
        return int(os.getenv("DB_TIMEOUT_SECONDS", "10"))

    @property
    def cors_origin(self) -> str:
        return os.getenv("CORS_ORIGIN", "http://localhost:3000")

    @property
    def jwt_secret(self) -> str:
        return os.getenv("JWT_SECRET", "")

    @property
    def jwt_algorithm(self) -> str:
        return os.getenv("JWT_ALGORITHM", "HS256")

    @property
    def resend_api_key(self) -> str:
        return os.getenv("RESEND_API_KEY", "")

    @property
    def notification_email(self) -> str:
        return os.getenv("NOTIFICATION_EMAIL", "")

    @property
    def from_email(self) -> str:
        return os.getenv("RESEND_FROM_EMAIL", "Portfolio <notifications@example.com>")

    @property
    def visitor_id_length(self) -> int:
        # 64 conserva el digest SHA-256 completo
        raw = os.getenv("VISITOR_ID_LENGTH", "32").strip()
        try:
            length = int(raw)
        except ValueError:
            raise ValueError(f"VISITOR_ID_LENGTH debe ser un entero entre 1 y 64 (recibido: {raw!r})")
        if not 1 <= length <= 64:
            raise ValueError(f"VISITOR_ID_LENGTH debe estar entre 1 y 64 (recibido: {length})")
        return length

# Instancia singleton de Settings (sin cache, lee valores dinámicamente)
_settings_instance = None

def get_settings() -> Settings:
    """Retorna la instancia de Settings. Lee variables de entorno dinámicamente."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance

def clear_settings_cache():
    """Limpia la instancia de settings (aunque no es necesario con propiedades dinámicas)."""
    global _settings_instance
    _settings_instance = None
