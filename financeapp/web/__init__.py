# financeapp/web/__init__.py
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask

from financeapp.config import FLASK_SECRET_KEY
from financeapp.core.schemas import PAYMENT_METHOD_LABELS
from financeapp.utils.text_utils import format_currency, format_date, format_month, mask_short, format_expiration

PACKAGE_ROOT = Path(__file__).resolve().parent


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    """Cria a aplicação Flask com as páginas do FinanceApp."""
    app = Flask(
        __name__,
        template_folder=str(PACKAGE_ROOT / "templates"),
        static_folder=str(PACKAGE_ROOT / "static"),
    )
    app.config["SECRET_KEY"] = FLASK_SECRET_KEY
    if config:
        app.config.update(config)

    app.jinja_env.filters["currency"] = format_currency
    app.jinja_env.filters["date"] = format_date
    app.jinja_env.filters["month"] = format_month
    app.jinja_env.filters["mask_short"] = mask_short
    app.jinja_env.globals["format_expiration"] = format_expiration
    app.jinja_env.globals["PAYMENT_METHOD_LABELS"] = PAYMENT_METHOD_LABELS

    from financeapp.web import auth, views
    app.register_blueprint(auth.bp)
    app.register_blueprint(views.bp)

    return app
