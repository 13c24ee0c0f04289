"""Configuration for the gunicorn WSGI server."""
import os

from gevent.monkey import patch_all

# The "gevent" worker class that we select below runs each request in a
# greenlet, and patch_all() makes blocking I/O cooperative. Requests spend
# most of their time waiting on the facet backend and the database, so
# greenlets let one worker serve many of them concurrently.
# gevent docs: http://www.gevent.org/
patch_all()

# Use async workers: https://docs.gunicorn.org/en/stable/design.html#async-workers
worker_class = "gevent"
# See https://docs.gunicorn.org/en/stable/settings.html
bind = f"0.0.0.0:{os.environ.get('PORT', 8080)}"
# Development mode - restart the server on code changes
reload = os.environ.get("ENV") == "dev"
# Include debug level-logs if we're in development mode
loglevel = "DEBUG" if reload else "INFO"
# Facet backends may run searches while processing facets
timeout = 120
# Send all logs to stdout
errorlog = "-"
