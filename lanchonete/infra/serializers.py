"""
Conversão entre as dataclasses do domínio e o formato persistido.

O formato persistido (documento JSON e linhas do SQLite) usa as chaves
camelCase do documento de backup (export/import-json), por exemplo:

    Produto: {id, name, type, price, cost, stock, minStock, unit,
              supplierId, category, recipe?: [{ingredientId, quantity}]}

Campos opcionais ausentes (None) são omitidos na serialização.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from lanchonete.domain.models import (
    STATUS_COMANDA_ABERTA, STATUS_COMPRA_RECEBIDA, TIPO_INSUMO, TIPO_PRATO,
    Cliente, Comanda, Compra, EstadoApp, Fornecedor, ItemCarrinho,
    ItemListaCompras, ItemReceita, Produto, Venda,
)


def _sem_nulos(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


def _float(val: Any, default: float = 0.0) -> float:
    if val is None or val == "":
        return default
    try:
        return float(val)
    except (TypeError, ValueError):
        return default


def _int_opt(val: Any) -> Optional[int]:
    if val is None or val == "":
        return None
    return int(float(val))


# -------------------------
# Itens
# -------------------------

def item_to_dict(i: ItemCarrinho) -> Dict[str, Any]:
    return {
        "productId": i.produto_id,
        "productName": i.produto_nome,
        "quantity": i.quantidade,
        "unitPrice": i.preco_unitario,
    }


def item_from_dict(d: Dict[str, Any]) -> ItemCarrinho:
    return ItemCarrinho(
        produto_id=str(d["productId"]),
        produto_nome=d.get("productName") or "",
        quantidade=_float(d.get("quantity")),
        preco_unitario=_float(d.get("unitPrice")),
    )


# -------------------------
# Produto
# -------------------------

def produto_to_dict(p: Produto) -> Dict[str, Any]:
    d = {
        "id": p.id,
        "name": p.nome,
        "type": p.tipo,
        "price": p.preco,
        "cost": p.custo,
        "stock": p.estoque,
        "minStock": p.estoque_minimo,
        "unit": p.unidade,
        "supplierId": p.fornecedor_id,
        "category": p.categoria,
    }
    if p.tipo == TIPO_PRATO:
        d["recipe"] = [{"ingredientId": r.ingrediente_id, "quantity": r.quantidade} for r in p.receita]
    return d


def produto_from_dict(d: Dict[str, Any]) -> Produto:
    tipo = d.get("type") or TIPO_INSUMO
    receita = [
        ItemReceita(ingrediente_id=str(r["ingredientId"]), quantidade=_float(r.get("quantity")))
        for r in (d.get("recipe") or [])
    ]
    return Produto(
        id=str(d["id"]),
        nome=d.get("name") or "",
        tipo=tipo,
        preco=_float(d.get("price")),
        custo=_float(d.get("cost")),
        estoque=0.0 if tipo == TIPO_PRATO else _float(d.get("stock")),
        estoque_minimo=_float(d.get("minStock")),
        unidade=d.get("unit") or "un",
        fornecedor_id=d.get("supplierId") or None,
        categoria=d.get("category") or "Geral",
        receita=receita if tipo == TIPO_PRATO else [],
    )


# -------------------------
# Venda / Compra
# -------------------------

def venda_to_dict(v: Venda) -> Dict[str, Any]:
    return _sem_nulos({
        "id": v.id,
        "date": v.data,
        "items": [item_to_dict(i) for i in v.itens],
        "subtotal": v.subtotal,
        "discount": v.desconto,
        "discountPercent": v.desconto_percentual,
        "total": v.total,
        "loyaltyPointsUsed": v.pontos_usados,
        "loyaltyPointsEarned": v.pontos_ganhos,
        "paymentMethod": v.forma_pagamento,
        "customerId": v.cliente_id,
        "customerName": v.cliente_nome,
        "comandaId": v.comanda_id,
    })


def venda_from_dict(d: Dict[str, Any]) -> Venda:
    itens = [item_from_dict(i) for i in (d.get("items") or [])]
    sub = d.get("subtotal")
    return Venda(
        id=str(d["id"]),
        data=d.get("date") or "",
        itens=itens,
        subtotal=_float(sub) if sub is not None else _float(d.get("total")),
        desconto=_float(d.get("discount")),
        desconto_percentual=_float(d["discountPercent"]) if d.get("discountPercent") is not None else None,
        total=_float(d.get("total")),
        pontos_usados=_int_opt(d.get("loyaltyPointsUsed")),
        pontos_ganhos=_int_opt(d.get("loyaltyPointsEarned")) or 0,
        forma_pagamento=d.get("paymentMethod") or "cash",
        cliente_id=d.get("customerId") or None,
        cliente_nome=d.get("customerName") or None,
        comanda_id=d.get("comandaId") or None,
    )


def compra_to_dict(c: Compra) -> Dict[str, Any]:
    return {
        "id": c.id,
        "date": c.data,
        "supplierId": c.fornecedor_id,
        "items": [item_to_dict(i) for i in c.itens],
        "total": c.total,
        "status": c.status,
    }


def compra_from_dict(d: Dict[str, Any]) -> Compra:
    return Compra(
        id=str(d["id"]),
        data=d.get("date") or "",
        fornecedor_id=d.get("supplierId") or "",
        itens=[item_from_dict(i) for i in (d.get("items") or [])],
        total=_float(d.get("total")),
        status=d.get("status") or STATUS_COMPRA_RECEBIDA,
    )


# -------------------------
# Comanda / Lista de compras
# -------------------------

def comanda_to_dict(c: Comanda) -> Dict[str, Any]:
    return {
        "id": c.id,
        "customerName": c.cliente_nome,
        "openedAt": c.aberta_em,
        "items": [item_to_dict(i) for i in c.itens],
        "total": c.total,
        "status": c.status,
    }


def comanda_from_dict(d: Dict[str, Any]) -> Comanda:
    return Comanda(
        id=str(d["id"]),
        cliente_nome=d.get("customerName") or "",
        aberta_em=d.get("openedAt") or "",
        itens=[item_from_dict(i) for i in (d.get("items") or [])],
        total=_float(d.get("total")),
        status=d.get("status") or STATUS_COMANDA_ABERTA,
    )


def item_lista_to_dict(i: ItemListaCompras) -> Dict[str, Any]:
    return {"id": i.id, "productId": i.produto_id, "quantity": i.quantidade}


def item_lista_from_dict(d: Dict[str, Any]) -> ItemListaCompras:
    return ItemListaCompras(id=str(d["id"]), produto_id=str(d["productId"]), quantidade=_float(d.get("quantity")))


# -------------------------
# Cliente / Fornecedor
# -------------------------

def cliente_to_dict(c: Cliente) -> Dict[str, Any]:
    return {
        "id": c.id,
        "nome": c.nome,
        "sobrenome": c.sobrenome,
        "fone": c.fone,
        "loyaltyPoints": c.pontos_fidelidade,
        "created_at": c.criado_em,
        "updated_at": c.atualizado_em,
    }


def cliente_from_dict(d: Dict[str, Any]) -> Cliente:
    return Cliente(
        id=str(d["id"]),
        nome=d.get("nome") or "",
        sobrenome=d.get("sobrenome") or None,
        fone=d.get("fone") or None,
        pontos_fidelidade=_int_opt(d.get("loyaltyPoints")) or 0,
        criado_em=d.get("created_at") or None,
        atualizado_em=d.get("updated_at") or None,
    )


def fornecedor_to_dict(f: Fornecedor) -> Dict[str, Any]:
    return {"id": f.id, "name": f.nome, "contact": f.contato, "email": f.email}


def fornecedor_from_dict(d: Dict[str, Any]) -> Fornecedor:
    return Fornecedor(
        id=str(d["id"]),
        nome=d.get("name") or "",
        contato=d.get("contact") or None,
        email=d.get("email") or None,
    )


# -------------------------
# Estado completo
# -------------------------

def estado_to_dict(e: EstadoApp) -> Dict[str, List[Dict[str, Any]]]:
    return {
        "products": [produto_to_dict(p) for p in e.produtos],
        "suppliers": [fornecedor_to_dict(f) for f in e.fornecedores],
        "customers": [cliente_to_dict(c) for c in e.clientes],
        "sales": [venda_to_dict(v) for v in e.vendas],
        "purchases": [compra_to_dict(c) for c in e.compras],
        "shoppingList": [item_lista_to_dict(i) for i in e.lista_compras],
        "activeComandas": [comanda_to_dict(c) for c in e.comandas_ativas],
    }


def estado_from_dict(d: Dict[str, Any]) -> EstadoApp:
    """Coleções ausentes no documento viram listas vazias."""
    return EstadoApp(
        produtos=[produto_from_dict(x) for x in d.get("products") or []],
        fornecedores=[fornecedor_from_dict(x) for x in d.get("suppliers") or []],
        clientes=[cliente_from_dict(x) for x in d.get("customers") or []],
        vendas=[venda_from_dict(x) for x in d.get("sales") or []],
        compras=[compra_from_dict(x) for x in d.get("purchases") or []],
        lista_compras=[item_lista_from_dict(x) for x in d.get("shoppingList") or []],
        comandas_ativas=[comanda_from_dict(x) for x in d.get("activeComandas") or []],
    )
