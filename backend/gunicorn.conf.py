# Bind & workers
bind = "0.0.0.0:8000"
workers = 2  # override with env GUNICORN_WORKERS
threads = 4
timeout = 30
graceful_timeout = 30
keepalive = 5

# Application entry point: gunicorn "authgate:create_app()"
wsgi_app = "authgate:create_app()"

# Logs to stdout/stderr (the app emits JSON lines itself)
accesslog = "-"
errorlog = "-"
loglevel = "info"  # override with env LOG_LEVEL
