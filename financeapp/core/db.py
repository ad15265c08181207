# financeapp/core/db.py
import logging
from typing import Any, Dict, List, Union

from supabase import create_client, Client

from financeapp.config import SUPABASE_URL, SUPABASE_KEY
from financeapp.core.categories import default_categories_for
from financeapp.core.filters import FilterState, resolve_date_range
from financeapp.utils.text_utils import parse_month

logger = logging.getLogger(__name__)


def get_supabase_client(access_token: Union[str, None] = None) -> Client:
    """Retorna uma instância do cliente Supabase, autenticada com o token do usuário quando houver."""
    client = create_client(SUPABASE_URL, SUPABASE_KEY)
    if access_token:
        client.postgrest.auth(access_token)
    return client


# --- Autenticação ---
def sign_in(supabase_client: Client, email: str, password: str) -> Union[Dict[str, Any], None]:
    """Faz login por e-mail e senha. Retorna os dados que ficam na sessão, ou None."""
    try:
        response = supabase_client.auth.sign_in_with_password({"email": email, "password": password})
    except Exception as e:
        logger.error("Erro ao autenticar '%s' no Supabase: %s", email, e)
        return None
    if not response.user or not response.session:
        return None
    metadata = response.user.user_metadata or {}
    return {
        "user_id": response.user.id,
        "email": response.user.email,
        "full_name": metadata.get("full_name"),
        "access_token": response.session.access_token,
    }


def sign_out(supabase_client: Client) -> None:
    try:
        supabase_client.auth.sign_out()
    except Exception as e:
        logger.warning("Erro ao encerrar sessão no Supabase: %s", e)


# --- Funções para Transações ---
def get_transactions(supabase_client: Client, user_id: str,
                     filters: Union[FilterState, None] = None,
                     transaction_type: Union[str, None] = None,
                     start_date: Union[str, None] = None,
                     end_date: Union[str, None] = None,
                     limit: Union[int, None] = None) -> list:
    """Obtém as transações do usuário com a categoria, das mais recentes para as mais antigas."""
    try:
        query = supabase_client.table('transactions').select('*, categories(*)').eq('user_id', user_id)

        if filters is not None:
            filter_start, filter_end = resolve_date_range(filters)
            start_date = start_date or (filter_start.isoformat() if filter_start else None)
            end_date = end_date or (filter_end.isoformat() if filter_end else None)
            if filters.category_id:
                query = query.eq('category_id', filters.category_id)
            if filters.source_id and filters.source_type:
                query = query.eq('source_type', filters.source_type).eq('source_id', filters.source_id)

        if start_date:
            query = query.gte('transaction_date', start_date)
        if end_date:
            query = query.lte('transaction_date', end_date)
        if transaction_type and transaction_type != 'all':
            query = query.eq('type', transaction_type)

        query = query.order('transaction_date', desc=True)
        if limit:
            query = query.limit(limit)
        return query.execute().data
    except Exception as e:
        logger.error("Erro ao obter transações do Supabase: %s", e)
        return []


def get_transaction(supabase_client: Client, user_id: str, transaction_id: str) -> Union[Dict[str, Any], None]:
    try:
        response = supabase_client.table('transactions').select('*').eq('id', transaction_id).eq('user_id', user_id).limit(1).execute()
        return response.data[0] if response.data else None
    except Exception as e:
        logger.error("Erro ao obter a transação %s: %s", transaction_id, e)
        return None


def get_card_transactions(supabase_client: Client, user_id: str, card_id: str, strict: bool = False) -> list:
    """
    Despesas lançadas em um cartão, usadas para montar as faturas.
    Com strict=True a falha de leitura é propagada em vez de virar lista vazia.
    """
    try:
        response = supabase_client.table('transactions').select('*').eq('user_id', user_id).eq('source_type', 'card').eq('source_id', card_id).eq('type', 'expense').order('transaction_date').execute()
        return response.data
    except Exception as e:
        logger.error("Erro ao obter transações do cartão %s: %s", card_id, e)
        if strict:
            raise
        return []


def add_transaction(supabase_client: Client, row: Dict[str, Any]) -> bool:
    try:
        supabase_client.table('transactions').insert(row).execute()
        return True
    except Exception as e:
        logger.error("Erro ao adicionar transação ao Supabase: %s", e)
        return False


def update_transaction(supabase_client: Client, transaction_id: str, changes: Dict[str, Any]) -> bool:
    try:
        supabase_client.table('transactions').update(changes).eq('id', transaction_id).execute()
        return True
    except Exception as e:
        logger.error("Erro ao atualizar a transação %s: %s", transaction_id, e)
        return False


def delete_transaction(supabase_client: Client, user_id: str, transaction_id: str) -> bool:
    try:
        supabase_client.table('transactions').delete().eq('id', transaction_id).eq('user_id', user_id).execute()
        return True
    except Exception as e:
        logger.error("Erro ao excluir a transação %s: %s", transaction_id, e)
        return False


# --- Funções para Categorias ---
def get_categories(supabase_client: Client, user_id: str, category_type: Union[str, None] = None) -> list:
    """Obtém as categorias do usuário, opcionalmente só de um tipo (expense/income)."""
    try:
        query = supabase_client.table('categories').select('*').eq('user_id', user_id)
        if category_type:
            query = query.eq('type', category_type)
        return query.order('name').execute().data
    except Exception as e:
        logger.error("Erro ao obter categorias do Supabase: %s", e)
        return []


def add_categories(supabase_client: Client, rows: List[Dict[str, Any]]) -> bool:
    try:
        supabase_client.table('categories').insert(rows).execute()
        return True
    except Exception as e:
        logger.error("Erro ao adicionar categorias ao Supabase: %s", e)
        return False


def ensure_default_categories(supabase_client: Client, user_id: str) -> list:
    """
    Garante que o usuário tenha categorias de despesa e de receita.
    Cria o conjunto padrão do tipo que estiver vazio e devolve a lista atualizada.
    """
    categories = get_categories(supabase_client, user_id)
    created = False
    for category_type in ('expense', 'income'):
        if not any(cat.get('type') == category_type for cat in categories):
            created = add_categories(supabase_client, default_categories_for(user_id, category_type)) or created
    if created:
        categories = get_categories(supabase_client, user_id)
    return categories


# --- Funções para Cartões ---
def get_cards(supabase_client: Client, user_id: str) -> list:
    try:
        response = supabase_client.table('cards').select('*').eq('user_id', user_id).order('card_nickname').execute()
        return response.data
    except Exception as e:
        logger.error("Erro ao obter cartões do Supabase: %s", e)
        return []


def get_card(supabase_client: Client, user_id: str, card_id: str) -> Union[Dict[str, Any], None]:
    try:
        response = supabase_client.table('cards').select('*').eq('id', card_id).eq('user_id', user_id).limit(1).execute()
        return response.data[0] if response.data else None
    except Exception as e:
        logger.error("Erro ao obter o cartão %s: %s", card_id, e)
        return None


def add_card(supabase_client: Client, row: Dict[str, Any]) -> bool:
    try:
        supabase_client.table('cards').insert(row).execute()
        return True
    except Exception as e:
        logger.error("Erro ao adicionar cartão ao Supabase: %s", e)
        return False


def delete_card(supabase_client: Client, user_id: str, card_id: str) -> bool:
    try:
        supabase_client.table('cards').delete().eq('id', card_id).eq('user_id', user_id).execute()
        return True
    except Exception as e:
        logger.error("Erro ao excluir o cartão %s: %s", card_id, e)
        return False


# --- Funções para Bancos ---
def get_banks(supabase_client: Client, user_id: str) -> list:
    try:
        response = supabase_client.table('banks').select('*').eq('user_id', user_id).order('bank_name').execute()
        return response.data
    except Exception as e:
        logger.error("Erro ao obter bancos do Supabase: %s", e)
        return []


def add_bank(supabase_client: Client, row: Dict[str, Any]) -> bool:
    try:
        supabase_client.table('banks').insert(row).execute()
        return True
    except Exception as e:
        logger.error("Erro ao adicionar banco ao Supabase: %s", e)
        return False


def delete_bank(supabase_client: Client, user_id: str, bank_id: str) -> bool:
    try:
        supabase_client.table('banks').delete().eq('id', bank_id).eq('user_id', user_id).execute()
        return True
    except Exception as e:
        logger.error("Erro ao excluir o banco %s: %s", bank_id, e)
        return False


# --- Funções para Perfis ---
def get_profile(supabase_client: Client, user_id: str) -> Union[Dict[str, Any], None]:
    try:
        response = supabase_client.table('profiles').select('*').eq('id', user_id).limit(1).execute()
        return response.data[0] if response.data else None
    except Exception as e:
        logger.error("Erro ao obter o perfil %s: %s", user_id, e)
        return None


def upsert_profile(supabase_client: Client, row: Dict[str, Any]) -> bool:
    try:
        supabase_client.table('profiles').upsert(row).execute()
        return True
    except Exception as e:
        logger.error("Erro ao salvar o perfil %s: %s", row.get('id'), e)
        return False


# --- Funções para Faturas ---
def get_invoice(supabase_client: Client, card_id: str, month, strict: bool = False) -> Union[Dict[str, Any], None]:
    """Fatura gravada do cartão no mês, ou None se não existir. Com strict=True erros são propagados."""
    try:
        response = supabase_client.table('card_invoices').select('*').eq('card_id', card_id).eq('month', parse_month(month).isoformat()).limit(1).execute()
        return response.data[0] if response.data else None
    except Exception as e:
        logger.error("Erro ao obter a fatura do cartão %s (%s): %s", card_id, month, e)
        if strict:
            raise
        return None


def get_invoices(supabase_client: Client, card_id: str) -> list:
    try:
        response = supabase_client.table('card_invoices').select('*').eq('card_id', card_id).order('month', desc=True).execute()
        return response.data
    except Exception as e:
        logger.error("Erro ao obter faturas do cartão %s: %s", card_id, e)
        return []


def upsert_invoice(supabase_client: Client, row: Dict[str, Any]) -> Union[Dict[str, Any], None]:
    """Grava a fatura pela chave (card_id, month) e devolve a linha gravada."""
    try:
        response = supabase_client.table('card_invoices').upsert(row, on_conflict='card_id,month').execute()
        return response.data[0] if response.data else row
    except Exception as e:
        logger.error("Erro ao salvar a fatura do cartão %s (%s): %s", row.get('card_id'), row.get('month'), e)
        return None
