# financeapp/web/auth.py
import logging
from functools import wraps

from flask import Blueprint, flash, g, redirect, render_template, request, session, url_for

from financeapp.core import db

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)


@bp.before_app_request
def load_logged_in_user() -> None:
    g.user = session.get("user")


def login_required(view):
    @wraps(view)
    def wrapped_view(**kwargs):
        if g.get("user") is None:
            return redirect(url_for("auth.login"))
        return view(**kwargs)

    return wrapped_view


def current_client():
    """Cliente Supabase da requisição, autenticado com o token do usuário logado."""
    if "supabase" not in g:
        token = (g.get("user") or {}).get("access_token")
        g.supabase = db.get_supabase_client(token)
    return g.supabase


def current_user_id() -> str:
    return g.user["user_id"]


@bp.route("/login", methods=["GET", "POST"])
def login():
    if g.get("user") is not None:
        return redirect(url_for("pages.dashboard"))

    email = ""
    if request.method == "POST":
        email = (request.form.get("email") or "").strip()
        password = request.form.get("password") or ""
        if not email or not password:
            flash("Informe e-mail e senha", "error")
        else:
            user = db.sign_in(current_client(), email, password)
            if user is None:
                flash("E-mail ou senha inválidos", "error")
            else:
                session.clear()
                session["user"] = user
                logger.info("Usuário %s autenticado", user["user_id"])
                return redirect(url_for("pages.dashboard"))

    return render_template("login.html", email=email)


@bp.route("/logout", methods=["POST"])
@login_required
def logout():
    db.sign_out(current_client())
    session.clear()
    return redirect(url_for("auth.login"))
