#!/usr/bin/env python3
"""
main.py - Main application entry point
Starts the history engine, the background scheduler and the HTTP API
"""

import os
import sys
import logging
import threading
import schedule
import time
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Add project root to Python path
project_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, project_root)

from auditlog import create_app
from auditlog.core.runtime import scheduled_task
from auditlog.db import init_db_manager
from auditlog.history import init_history
from config.settings import get_config, Config


def setup_logging():
    """Setup application logging"""
    os.makedirs("logs", exist_ok=True)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler("logs/auditlog.log", mode="a"),
        ],
    )

    return logging.getLogger(__name__)


def initialize_history():
    """Create the database tables and the history engine

    Returns:
        HistoryEngine, or None if the database could not be initialized
    """
    logger = logging.getLogger(__name__)

    try:
        db_manager = init_db_manager(Config.DATABASE_URL or f"sqlite:///{Config.DATABASE_PATH()}")
        engine = init_history(db_manager)
        logger.info("History engine initialized successfully")
        return engine

    except Exception as e:
        logger.error(f"History initialization error: {e}")
        return None


def run_scheduled_tasks(engine):
    """Run scheduled background tasks

    Each job runs as a named scheduled task, so events it logs are
    attributed to the automated system.
    """
    logger = logging.getLogger(__name__)

    def log_stats():
        """Log the process event counters"""
        with scheduled_task("history_log_stats"):
            try:
                engine.get_producer("HistoryLogger").log_stats()
                logger.info(f"Logged history stats: {engine.counter.total} events")
            except Exception as e:
                logger.error(f"Scheduled stats logging failed: {e}")

    def check_tables():
        """Recreate history tables that disappeared"""
        with scheduled_task("history_check_tables"):
            if not engine.recovery.recreate_if_missing():
                logger.error("Scheduled table check could not recreate history tables")

    schedule.every().hour.do(check_tables)
    schedule.every().day.at("00:05").do(log_stats)

    while True:
        schedule.run_pending()
        time.sleep(60)


def start_scheduler(engine):
    """Start background scheduler"""
    logger = logging.getLogger(__name__)

    try:
        logger.info("Starting background scheduler")
        scheduler_thread = threading.Thread(target=run_scheduled_tasks, args=(engine,), daemon=True)
        scheduler_thread.start()
        logger.info("Background scheduler started")

    except Exception as e:
        logger.error(f"Failed to start scheduler: {e}")


def check_environment():
    """Check directories and configuration"""
    logger = logging.getLogger(__name__)

    try:
        for directory in ["data", "logs"]:
            os.makedirs(directory, exist_ok=True)

        config_issues = Config.validate_config()
        if config_issues:
            logger.warning("Configuration issues found:")
            for issue in config_issues:
                logger.warning(f"  - {issue}")

        logger.info("Environment check passed")
        return True

    except OSError as e:
        logger.error(f"Environment check failed: {e}")
        return False


def print_startup_info():
    """Print startup information"""
    config_class = get_config()

    startup_info = f"""
{'=' * 60}
>> Audit Log Starting
{'=' * 60}
Configuration: {config_class.__name__}
Database: {Config.DATABASE_URL or Config.DATABASE_PATH()}
Table prefix: {config_class.TABLE_PREFIX() or '(none)'}
Anonymize IP: {config_class.ANONYMIZE_IP()}
Language: {config_class.LANGUAGE()}
Host: {config_class.API_HOST()}:{config_class.API_PORT()}
{'=' * 60}
    """

    print(startup_info)


def main():
    """Main application function"""
    logger = setup_logging()

    try:
        print_startup_info()

        if not check_environment():
            logger.error("Environment check failed, aborting startup")
            return 1

        engine = initialize_history()
        if engine is None:
            logger.error("History initialization failed, aborting startup")
            return 1

        config_class = get_config()
        app = create_app(engine=engine)
        app.config.from_object(config_class)

        start_scheduler(engine)

        if os.getenv("FLASK_ENV") == "development":
            # Localhost only, the debug server must not be reachable remotely
            dev_host = "127.0.0.1"
            dev_port = config_class.API_PORT()
            logger.info(f"Starting Flask development server on {dev_host}:{dev_port}")
            app.run(host=dev_host, port=dev_port, debug=True, use_reloader=False)
        else:
            logger.info(
                f"Starting Flask application on {config_class.API_HOST()}:{config_class.API_PORT()}"
            )
            app.run(host=config_class.API_HOST(), port=config_class.API_PORT(), debug=False)

        return 0

    except KeyboardInterrupt:
        logger.info("Shutdown requested by user")
        return 0

    except Exception as e:
        logger.error(f"Application startup failed: {e}")
        return 1


def create_wsgi_app():
    """Create WSGI application for Gunicorn"""
    logger = setup_logging()

    if not check_environment():
        raise RuntimeError("Environment check failed")

    engine = initialize_history()
    if engine is None:
        raise RuntimeError("History initialization failed")

    app = create_app(engine=engine)
    app.config.from_object(get_config())
    start_scheduler(engine)

    logger.info("WSGI application created successfully")
    return app


if __name__ == "__main__":
    sys.exit(main())
