# financeapp/web/views.py
import datetime

from flask import Blueprint, abort, flash, redirect, render_template, request, send_file, url_for
from pydantic import ValidationError

from financeapp.core import db
from financeapp.core import charts
from financeapp.core import dashboard
from financeapp.core import invoice_service
from financeapp.core import invoices
from financeapp.core.card_presets import CARD_COLOR_PRESETS, card_theme
from financeapp.core.card_wizard import CardWizard
from financeapp.core.categories import get_category_display
from financeapp.core.filters import (
    DATE_RANGES, FilterState, current_month_range, has_active_filters, safe_date, source_label, source_options,
)
from financeapp.core.installments import advance_installment, calculate_installment_status
from financeapp.core.models import Profile
from financeapp.core.schemas import (
    CARD_BRANDS, BankForm, InvoicePaymentForm, ProfileForm, TransactionForm, error_messages,
)
from financeapp.utils.text_utils import month_key, parse_month
from financeapp.web.auth import current_client, current_user_id, login_required

bp = Blueprint("pages", __name__)

OVERVIEW_TYPES = {"all": "Todas", "expense": "Despesas", "income": "Receitas"}


def _flash_errors(error: ValidationError) -> None:
    for message in error_messages(error):
        flash(message, "error")


def _shift_month(month: datetime.date, delta: int) -> datetime.date:
    index = month.year * 12 + (month.month - 1) + delta
    return datetime.date(index // 12, index % 12 + 1, 1)


def _parse_month_or_404(month: str) -> datetime.date:
    try:
        return parse_month(month)
    except ValueError:
        abort(404)


# --- Dashboard ---
@bp.route("/")
@login_required
def index():
    return redirect(url_for("pages.dashboard"))


@bp.route("/dashboard", endpoint="dashboard")
@login_required
def dashboard_page():
    client, user_id = current_client(), current_user_id()
    filters = FilterState.from_args(request.args)

    transactions = db.get_transactions(client, user_id, filters=filters)
    categories = db.get_categories(client, user_id)
    cards = db.get_cards(client, user_id)
    banks = db.get_banks(client, user_id)

    recent = [
        {
            "transaction": t,
            "category": get_category_display(t.get("categories")),
            "source": source_label(t, cards, banks),
            "installment": calculate_installment_status(t),
        }
        for t in dashboard.recent_transactions(transactions)
    ]

    return render_template(
        "dashboard.html",
        filters=filters,
        date_ranges=DATE_RANGES,
        has_filters=has_active_filters(filters),
        categories=categories,
        sources=source_options(cards, banks),
        summary=dashboard.summarize(transactions),
        recent=recent,
        breakdown=dashboard.category_breakdown(transactions, categories),
        trend=dashboard.monthly_trend(transactions),
        chart_args=filters.to_args(),
    )


# --- Transações ---
@bp.route("/transactions", methods=["GET", "POST"])
@login_required
def transactions():
    client, user_id = current_client(), current_user_id()
    transaction_type = request.values.get("type", "expense")
    if transaction_type not in ("expense", "income"):
        transaction_type = "expense"

    if request.method == "POST":
        try:
            form = TransactionForm(**request.form.to_dict())
        except ValidationError as e:
            _flash_errors(e)
        else:
            if db.add_transaction(client, form.to_row(user_id)):
                flash("Transação adicionada com sucesso!", "success")
                return redirect(url_for("pages.transactions", type=form.type))
            flash("Erro ao adicionar transação", "error")

    all_categories = db.ensure_default_categories(client, user_id)
    categories = [cat for cat in all_categories if cat.get("type") == transaction_type]
    cards = db.get_cards(client, user_id)
    banks = db.get_banks(client, user_id)
    history = [
        {
            "transaction": t,
            "category": get_category_display(t.get("categories")),
            "source": source_label(t, cards, banks),
            "installment": calculate_installment_status(t),
        }
        for t in db.get_transactions(client, user_id)
    ]

    return render_template(
        "transactions.html",
        transaction_type=transaction_type,
        categories=categories,
        sources=source_options(cards, banks)[1:],
        history=history,
        form=request.form,
        today=datetime.date.today().isoformat(),
    )


@bp.route("/transactions/<transaction_id>/delete", methods=["POST"])
@login_required
def delete_transaction(transaction_id):
    if db.delete_transaction(current_client(), current_user_id(), transaction_id):
        flash("Transação excluída", "success")
    else:
        flash("Erro ao excluir transação", "error")
    return redirect(request.referrer or url_for("pages.transactions"))


@bp.route("/transactions/<transaction_id>/pay-installment", methods=["POST"])
@login_required
def pay_installment(transaction_id):
    client = current_client()
    transaction = db.get_transaction(client, current_user_id(), transaction_id)
    if transaction is None:
        abort(404)

    status = calculate_installment_status(transaction)
    if status.is_paid_off:
        flash("Todas as parcelas já estão pagas", "info")
    elif db.update_transaction(client, transaction_id, {"installment_number": advance_installment(transaction)}):
        flash("Parcela marcada como paga", "success")
    else:
        flash("Erro ao atualizar a parcela", "error")
    return redirect(request.referrer or url_for("pages.overview"))


# --- Visão geral ---
@bp.route("/overview")
@login_required
def overview():
    client, user_id = current_client(), current_user_id()
    month_start, month_end = current_month_range()
    start_date = safe_date(request.args.get("start_date")) or month_start
    end_date = safe_date(request.args.get("end_date")) or month_end
    transaction_type = request.args.get("type", "all")
    if transaction_type not in OVERVIEW_TYPES:
        transaction_type = "all"

    transactions = db.get_transactions(
        client, user_id,
        transaction_type=transaction_type,
        start_date=start_date.isoformat(),
        end_date=end_date.isoformat(),
    )
    return render_template(
        "overview.html",
        start_date=start_date,
        end_date=end_date,
        transaction_type=transaction_type,
        overview_types=OVERVIEW_TYPES,
        summary=dashboard.summarize(transactions),
        rows=dashboard.installment_rows(transactions),
    )


# --- Cartões e bancos ---
@bp.route("/cards")
@login_required
def cards():
    client, user_id = current_client(), current_user_id()
    current_month = month_key(datetime.date.today())

    card_views = []
    for card in db.get_cards(client, user_id):
        card_transactions = db.get_card_transactions(client, user_id, card["id"])
        open_amount = invoices.open_amount_for_card(card_transactions, card["id"])
        card_views.append({
            "card": card,
            "theme": card_theme(card),
            "open_amount": open_amount,
            "available_limit": invoices.available_limit(card, open_amount),
            "current_invoice": invoices.invoice_total(
                invoices.invoice_items(card_transactions, card["id"], current_month)
            ),
            "invoices": db.get_invoices(client, card["id"])[:6],
        })

    return render_template(
        "cards.html",
        cards=card_views,
        banks=db.get_banks(client, user_id),
        current_month=current_month,
        status_labels=invoices.STATUS_LABELS,
    )


@bp.route("/cards/new", methods=["GET", "POST"])
@login_required
def new_card():
    if request.method == "GET":
        wizard = CardWizard()
    else:
        wizard = CardWizard.from_form(request.form)
        action = request.form.get("action", "next")
        if action == "prev":
            wizard.prev_step()
        elif action.startswith("preset:"):
            wizard.apply_preset(action.split(":", 1)[1])
        elif action == "reset":
            wizard.reset()
        elif action == "submit" and wizard.is_last_step:
            row = wizard.submit(current_user_id())
            if row is not None:
                if db.add_card(current_client(), row):
                    flash("Cartão adicionado com sucesso!", "success")
                    return redirect(url_for("pages.cards"))
                flash("Erro ao adicionar cartão", "error")
        else:
            wizard.next_step()

        for message in wizard.errors:
            flash(message, "error")

    return render_template(
        "card_wizard.html",
        wizard=wizard,
        preview=wizard.preview(),
        theme=card_theme(wizard.preview()),
        presets=CARD_COLOR_PRESETS,
        brands=CARD_BRANDS,
    )


@bp.route("/cards/<card_id>/delete", methods=["POST"])
@login_required
def delete_card(card_id):
    if db.delete_card(current_client(), current_user_id(), card_id):
        flash("Cartão removido", "success")
    else:
        flash("Erro ao remover cartão", "error")
    return redirect(url_for("pages.cards"))


@bp.route("/banks", methods=["POST"])
@login_required
def add_bank():
    try:
        form = BankForm(**request.form.to_dict())
    except ValidationError as e:
        _flash_errors(e)
    else:
        if db.add_bank(current_client(), form.to_row(current_user_id())):
            flash("Banco adicionado com sucesso!", "success")
        else:
            flash("Erro ao adicionar banco", "error")
    return redirect(url_for("pages.cards"))


@bp.route("/banks/<bank_id>/delete", methods=["POST"])
@login_required
def delete_bank(bank_id):
    if db.delete_bank(current_client(), current_user_id(), bank_id):
        flash("Banco removido", "success")
    else:
        flash("Erro ao remover banco", "error")
    return redirect(url_for("pages.cards"))


# --- Faturas ---
@bp.route("/cards/<card_id>/invoices/<month>")
@login_required
def invoice(card_id, month):
    client, user_id = current_client(), current_user_id()
    month_date = _parse_month_or_404(month)
    card = db.get_card(client, user_id, card_id)
    if card is None:
        abort(404)

    reconciled = invoice_service.reconcile_invoice(client, user_id, card, month_date)
    if reconciled is None:
        flash("Erro ao carregar a fatura", "error")
        return redirect(url_for("pages.cards"))

    total = float(reconciled["invoice"].get("total_amount") or 0)
    paid = float(reconciled["invoice"].get("paid_amount") or 0)
    return render_template(
        "invoice.html",
        card=card,
        theme=card_theme(card),
        month=month_key(month_date),
        month_date=month_date,
        prev_month=month_key(_shift_month(month_date, -1)),
        next_month=month_key(_shift_month(month_date, 1)),
        invoice=reconciled["invoice"],
        items=reconciled["items"],
        due_date=reconciled["due_date"],
        remaining=max(round(total - paid, 2), 0.0),
        status_label=invoices.STATUS_LABELS.get(reconciled["invoice"].get("status"), ""),
    )


@bp.route("/cards/<card_id>/invoices/<month>/pay", methods=["POST"])
@login_required
def pay_invoice(card_id, month):
    client, user_id = current_client(), current_user_id()
    month_date = _parse_month_or_404(month)
    card = db.get_card(client, user_id, card_id)
    if card is None:
        abort(404)

    try:
        form = InvoicePaymentForm(**request.form.to_dict())
    except ValidationError as e:
        _flash_errors(e)
    else:
        result = invoice_service.pay_invoice(client, user_id, card, month_date, form.amount)
        if result is None:
            flash("Erro ao registrar pagamento", "error")
        elif result["invoice"].get("status") == invoices.STATUS_PAID:
            flash("Fatura paga!", "success")
        else:
            flash("Pagamento registrado", "success")
    return redirect(url_for("pages.invoice", card_id=card_id, month=month_key(month_date)))


# --- Perfil ---
@bp.route("/profile", methods=["GET", "POST"])
@login_required
def profile():
    client, user_id = current_client(), current_user_id()
    if request.method == "POST":
        try:
            form = ProfileForm(**request.form.to_dict())
        except ValidationError as e:
            _flash_errors(e)
        else:
            if db.upsert_profile(client, form.to_row(user_id)):
                flash("Perfil atualizado com sucesso!", "success")
                return redirect(url_for("pages.profile"))
            flash("Erro ao atualizar perfil", "error")

    row = db.get_profile(client, user_id)
    profile = Profile.model_validate(row) if row else Profile(id=user_id)
    return render_template("profile.html", profile=profile)


# --- Gráficos ---
@bp.route("/charts/monthly.png")
@login_required
def monthly_chart():
    filters = FilterState.from_args(request.args)
    transactions = db.get_transactions(current_client(), current_user_id(), filters=filters)
    chart_buffer = charts.generate_monthly_trend_chart(dashboard.monthly_trend(transactions))
    if chart_buffer is None:
        return "", 204
    return send_file(chart_buffer, mimetype="image/png")


@bp.route("/charts/categories.png")
@login_required
def categories_chart():
    client, user_id = current_client(), current_user_id()
    filters = FilterState.from_args(request.args)
    transactions = db.get_transactions(client, user_id, filters=filters)
    breakdown = dashboard.category_breakdown(transactions, db.get_categories(client, user_id))
    chart_buffer = charts.generate_category_pie_chart(breakdown)
    if chart_buffer is None:
        return "", 204
    return send_file(chart_buffer, mimetype="image/png")
