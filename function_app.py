
import logging
import azure.functions as func

from src.function_blueprints.generate_card_blueprint import bp as generate_card_bp
from src.shared.settings import get_settings

app = func.FunctionApp()
app.register_functions(generate_card_bp)


def _configure_logging() -> None:
    lvl = get_settings().log_level
    logging.getLogger("statcard").setLevel(getattr(logging, lvl, logging.INFO))
    # keep request-level HTTP chatter out of the function logs
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.INFO)


_configure_logging()
