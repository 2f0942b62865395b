"""WSGI entrypoint: ``gunicorn -c gunicorn.conf.py wsgi:app``."""

from customer_directory import create_app

app = create_app()
