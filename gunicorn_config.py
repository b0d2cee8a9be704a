"""Gunicorn configuration for the chat service.

Run with: gunicorn -c gunicorn_config.py app:app
"""

import os

# Basic configuration
bind = f"0.0.0.0:{os.getenv('PORT', '5001')}"
workers = int(os.getenv('WEB_CONCURRENCY', '2'))
threads = 4
worker_class = 'gthread'
timeout = 60

backlog = 100
keepalive = 5
graceful_timeout = 30

# Each worker keeps its own token cache and connection pool
preload_app = False

# Log configuration
loglevel = os.getenv('LOG_LEVEL', 'info').lower()
accesslog = '-'
errorlog = '-'
capture_output = True
