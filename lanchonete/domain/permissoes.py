"""
Perfis de acesso e permissões estáticas.

A sessão informa apenas o perfil; o núcleo só consulta
``tem_permissao(perfil, permissao)`` antes de cada operação.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Optional


PERMISSOES: Dict[str, FrozenSet[str]] = {
    "admin": frozenset({
        "view_dashboard", "view_pos", "view_inventory", "view_shopping_list",
        "view_purchases", "view_financial", "view_reports",
        "manage_products", "manage_suppliers", "manage_customers", "manage_users",
        "register_sale", "manage_comandas", "register_purchase", "manage_shopping_list",
        "delete_items",
    }),
    "operador": frozenset({
        "view_dashboard", "view_pos", "view_inventory", "view_shopping_list",
        "view_purchases", "view_reports",
        "manage_products", "manage_customers",
        "register_sale", "manage_comandas", "register_purchase", "manage_shopping_list",
    }),
    "caixa": frozenset({
        "view_pos", "view_dashboard",
        "register_sale", "manage_comandas", "manage_customers",
    }),
}


def tem_permissao(perfil: Optional[str], permissao: str) -> bool:
    """Perfil desconhecido não tem nenhuma permissão."""
    if not perfil:
        return False
    return permissao in PERMISSOES.get(perfil, frozenset())
