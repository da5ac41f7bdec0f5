import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Socket.IO ("" picks eventlet or threading from the platform)
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Game
    ROUND_DURATION_SEC = int(os.environ.get("ROUND_DURATION_SEC", "60"))
    MIN_ROUND_SEC = int(os.environ.get("MIN_ROUND_SEC", "20"))
    MAX_ROUND_SEC = int(os.environ.get("MAX_ROUND_SEC", "180"))
    STOP_GRACE_SEC = float(os.environ.get("STOP_GRACE_SEC", "5"))
    MIN_PLAYERS = int(os.environ.get("MIN_PLAYERS", "2"))
