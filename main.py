#!/usr/bin/env python3
"""
Catalog back office - product CSV import service
================================================

Single-command run:  python main.py
CLI import:          flask --app main import-products PATH

See config.py for all environment-variable tunables.
"""

from __future__ import annotations

import logging

import click
from flask import Flask

import config
from db import init_db
from api import api_bp


def create_app(db_url: str | None = None) -> Flask:
    """Flask application factory."""

    _configure_logging()
    app = Flask(__name__)
    app.secret_key = config.SECRET
    app.config["MAX_CONTENT_LENGTH"] = config.IMPORT_MAX_BYTES

    # ── Initialise database ─────────────────────────────────────────
    init_db(db_url or config.DB_URL)

    # ── Register blueprints ─────────────────────────────────────────
    app.register_blueprint(api_bp)

    # ── CLI ─────────────────────────────────────────────────────────
    @app.cli.command("import-products")
    @click.argument("path", type=click.Path(exists=True, dir_okay=False))
    def import_products_command(path):
        """Import a product CSV (template or master schema)."""
        from import_engine import run_import

        result = run_import(path)
        stats = result.stats.to_dict() if result.stats else {}
        click.echo(f"  Done: success={result.success}, {len(result.errors)} errors")
        for key, value in stats.items():
            click.echo(f"    {key}: {value}")
        if result.errors:
            click.echo("  First errors (max 10):")
            for err in result.errors[:10]:
                click.echo(f"    Row {err.row}: {err.message}")

    return app


def _configure_logging():
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)


def main():
    print("=" * 56)
    print("  Catalog back office - product import")
    print("=" * 56)

    app = create_app()
    print(f"  Database: {config.DB_URL}")
    print(f"\n  http://{config.HOST}:{config.PORT}")
    print("=" * 56)

    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)


if __name__ == "__main__":
    main()
