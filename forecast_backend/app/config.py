"""App-wide configuration; any key can be overridden with a FORECAST_<KEY> env var."""


class Config:
    CORS_ORIGINS = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]
    LOG_LEVEL = "INFO"
    LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    # one slot per chart colour in the dashboard
    MAX_SCENARIOS = 8


class TestingConfig(Config):
    TESTING = True
    LOG_LEVEL = "DEBUG"
