"""
Application startup validation and initialization.

This module performs startup checks to make sure the application is
properly configured before serving requests.
"""

import logging
import sys
from typing import List, Tuple
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import sqlalchemy as sa

from core.config import settings, validate_production_config
from core.database import engine
from core.redis_config import get_redis_client

logger = logging.getLogger(__name__)

REQUIRED_TABLES = [
    "categories",
    "products",
    "product_variants",
    "customers",
    "orders",
    "order_items",
    "loyalty_transactions",
]


class StartupValidator:
    """Validates application startup requirements"""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def check_environment_config(self) -> bool:
        try:
            validate_production_config()
        except ValueError as e:
            self.errors.append(f"Configuration validation failed: {str(e)}")
            return False

        if not settings.ordering_enabled:
            self.warnings.append("Ordering is disabled - running in static site mode")
        if settings.auth_mode == "static":
            self.warnings.append("Identity provider disabled - every purchaser is a guest")
        return True

    def check_database_connection(self) -> bool:
        """Check database connectivity"""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection successful")
            return True
        except SQLAlchemyError as e:
            if settings.catalog_fallback_enabled:
                self.warnings.append(
                    f"Database connection failed: {str(e)} - catalog will use fallback data"
                )
                return True
            self.errors.append(f"Database connection failed: {str(e)}")
            return False

    def check_redis_connection(self) -> bool:
        """Check Redis connectivity when it backs the cart store"""
        if settings.cart_storage_backend != "redis":
            self.warnings.append("Carts are kept in process memory")
            return True

        if get_redis_client() is None:
            self.errors.append("Redis cart storage selected but Redis is unavailable")
            return False

        logger.info("Redis connection successful")
        return True

    def check_required_tables(self) -> bool:
        """Check if required database tables exist"""
        try:
            existing_tables = sa.inspect(engine).get_table_names()
        except SQLAlchemyError as e:
            self.warnings.append(f"Could not check database tables: {str(e)}")
            return True

        missing_tables = [t for t in REQUIRED_TABLES if t not in existing_tables]
        if missing_tables:
            self.warnings.append(
                f"Missing database tables: {', '.join(missing_tables)}. "
                "Run migrations with: alembic upgrade head"
            )
        return True

    def validate_all(self) -> Tuple[bool, List[str], List[str]]:
        """Run all validation checks"""
        checks = [
            ("Environment Configuration", self.check_environment_config),
            ("Database Connection", self.check_database_connection),
            ("Redis Connection", self.check_redis_connection),
            ("Database Tables", self.check_required_tables),
        ]

        all_passed = True
        for check_name, check_func in checks:
            logger.info(f"Running check: {check_name}")
            if not check_func():
                all_passed = False

        return all_passed, self.errors, self.warnings


def configure_startup_logging():
    """Configure logging for startup"""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def run_startup_checks():
    """Run all startup validation checks"""
    logger.info("=" * 60)
    logger.info("Starting O'Sushi ordering backend")
    logger.info(f"Environment: {settings.environment}")
    logger.info("=" * 60)

    validator = StartupValidator()
    passed, errors, warnings = validator.validate_all()

    for warning in warnings:
        logger.warning(f"Startup warning: {warning}")
    for error in errors:
        logger.error(f"Startup error: {error}")

    if not passed and settings.is_production:
        logger.error("Cannot start in production with errors!")
        sys.exit(1)
    elif not passed:
        logger.warning("Starting in development mode despite errors")
    else:
        logger.info("All startup checks passed")

    return passed, warnings
