# gunicorn.conf.py
import os
import logging
import sys
import multiprocessing

wsgi_app = "bible_reader.app:create_app()"

# Configure logging to stdout
accesslog = '-'
errorlog = '-'
loglevel = os.getenv('LOG_LEVEL', 'info')

port = os.getenv('PORT', '5001')
bind = f"0.0.0.0:{port}"

# Each worker holds its own book catalog and upstream session
cores = multiprocessing.cpu_count()
workers = min(cores * 2 + 1, 6)
# Chapter and Supabase calls are I/O bound
threads = 4


def on_starting(server):
    logger = logging.getLogger('gunicorn.error')
    logger.setLevel(logging.INFO)
    logger.addHandler(logging.StreamHandler(sys.stdout))
    logger.info(f"Starting gunicorn with {workers} workers on port {port}")
    logger.info(f"Worker timeout set to {timeout} seconds")


# Upstream requests time out after UPSTREAM_TIMEOUT; a bookmarks list may need several
timeout = 60
keepalive = 5
worker_class = "gthread"

proc_name = "bible_reader"

graceful_timeout = 30
