"""
Celery configuration for the catalog back office.

Only the CSV import has a background variant.  Without REDIS_URL every
task runs synchronously in the calling process.
"""

from celery import Celery
from celery.signals import worker_process_init

import config

app = Celery(
    "catalog",
    broker=config.REDIS_URL or None,
    backend=config.REDIS_URL or None,
    include=["import_engine.tasks"],
)

# Task will run synchronously if Redis is not available
app.conf.task_always_eager = not config.REDIS_URL
app.conf.task_serializer = "json"
app.conf.result_serializer = "json"
app.conf.accept_content = ["json"]


@worker_process_init.connect
def _init_worker_db(**_kwargs):
    # each forked worker opens its own engine
    from db import init_db
    init_db(config.DB_URL)
