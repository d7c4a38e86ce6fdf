from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

import structlog
from dotenv import load_dotenv
from flask import Flask

from .approvals.controller import register as register_approvals
from .common.api import ApiJSONProvider, register_error_handlers
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_employees, list_tables
from .employees.controller import register as register_employees
from .locations.controller import register as register_locations
from .logging_config import register_request_logging, setup_logging
from .notifications.controller import register as register_notifications
from .payroll.controller import register as register_payroll
from .reports.controller import register as register_reports
from .rotas.controller import register as register_rotas
from .scheduling.controller import register as register_scheduling
from .shift_templates.controller import register as register_templates
from .tenants.controller import register as register_tenants
from .timekeeping.controller import register as register_timekeeping

DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the API app. Tests pass a ready container and skip database bootstrap."""
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    debug = bool(getattr(settings, "DEBUG", False))
    setup_logging(debug=debug)
    logger = structlog.get_logger("rotaclock")

    app = Flask(__name__)
    app.json = ApiJSONProvider(app)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = debug

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "app_starting",
            settings=settings_module,
            db=f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}",
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema_ready", tables=len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_employees(db_config, tenant_id=int(getattr(settings, "DEMO_TENANT_ID", 1)))
            logger.info("demo_seed_ready")
        container = build_container(db_config=db_config, settings=settings)

    register_error_handlers(app)
    register_request_logging(app)

    register_tenants(app, container)
    register_employees(app, container)
    register_locations(app, container)
    register_notifications(app, container)
    register_templates(app, container)
    register_rotas(app, container)
    register_scheduling(app, container)
    register_timekeeping(app, container)
    register_approvals(app, container)
    register_payroll(app, container)
    register_reports(app, container)

    return app
