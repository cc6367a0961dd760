"""
UC: Cadastros (produtos, fornecedores e clientes).

- cadastrar_produto(): valida e inclui (ou substitui) um produto.
- atualizar_estoque_minimo(): ajusta o limite de reposição de um insumo.
- cadastrar_fornecedor(): inclui um fornecedor.
- cadastrar_cliente() / atualizar_cliente(): manutenção de clientes.
- propor_exclusao_cliente() / excluir_cliente(): exclusão em duas fases.

Obs.:
- Prato é sempre gravado com estoque 0; a disponibilidade vem da receita.
- A receita de um prato só pode referenciar insumos existentes e com
  quantidade positiva. Um insumo usado em alguma receita não pode virar prato.
- A exclusão de cliente exige o token devolvido pela proposta. O token
  muda se o cliente for alterado entre as duas fases.
"""

from __future__ import annotations

import hashlib
from dataclasses import replace
from typing import Any, Dict, Optional, Tuple

from lanchonete.domain.errors import ValidacaoError
from lanchonete.domain.models import (
    TIPO_INSUMO, TIPO_PRATO, TIPOS_PRODUTO, UNIDADES,
    Cliente, EstadoApp, Fornecedor, Produto,
)
from lanchonete.infra.logger import log_system_event, log_transaction
from lanchonete.usecases.comum import agora_iso, normaliza_str, novo_id


def validar_produto(estado: EstadoApp, produto: Produto) -> Produto:
    """Valida um produto contra o catálogo e devolve a versão normalizada."""
    nome = normaliza_str(produto.nome)
    if not nome:
        raise ValidacaoError("Nome do produto obrigatório")
    if produto.tipo not in TIPOS_PRODUTO:
        raise ValidacaoError(f"Tipo inválido: {produto.tipo!r} (use insumo ou prato)")
    if produto.unidade not in UNIDADES:
        raise ValidacaoError(f"Unidade inválida: {produto.unidade!r}")
    if produto.preco < 0 or produto.custo < 0:
        raise ValidacaoError("Preço e custo não podem ser negativos")
    if produto.estoque_minimo < 0:
        raise ValidacaoError("Estoque mínimo não pode ser negativo")

    if produto.tipo != TIPO_INSUMO and estado.produto(produto.id) is not None:
        usado_em = [
            p.nome for p in estado.produtos
            if p.id != produto.id and any(r.ingrediente_id == produto.id for r in p.receita)
        ]
        if usado_em:
            raise ValidacaoError(f"{nome} é insumo das receitas de {', '.join(usado_em)}; não pode virar prato")

    if produto.tipo == TIPO_PRATO:
        if produto.estoque:
            log_system_event("prato_estoque_ignorado", {"produto_id": produto.id, "estoque": produto.estoque})
        for linha in produto.receita:
            ingrediente = estado.produto(linha.ingrediente_id)
            if ingrediente is None or ingrediente.id == produto.id:
                raise ValidacaoError(f"Receita de {nome}: insumo não encontrado ({linha.ingrediente_id})")
            if not ingrediente.is_insumo:
                raise ValidacaoError(f"Receita de {nome}: {ingrediente.nome} não é insumo")
            if linha.quantidade <= 0:
                raise ValidacaoError(f"Receita de {nome}: quantidade de {ingrediente.nome} deve ser positiva")
        return replace(produto, nome=nome, estoque=0.0, receita=list(produto.receita))

    if produto.receita:
        raise ValidacaoError("Insumo não possui receita")
    return replace(produto, nome=nome)


def cadastrar_produto(estado: EstadoApp, produto: Produto) -> Tuple[EstadoApp, Produto]:
    """Inclui o produto; se o id já existe, substitui mantendo a posição."""
    if not normaliza_str(produto.id):
        produto = replace(produto, id=novo_id())
    produto = validar_produto(estado, produto)

    existe = estado.produto(produto.id) is not None
    if existe:
        produtos = [produto if p.id == produto.id else p for p in estado.produtos]
    else:
        produtos = [*estado.produtos, produto]
    log_transaction("cadastrar_produto", {"produto_id": produto.id, "tipo": produto.tipo}, result="update" if existe else "insert")
    return replace(estado, produtos=produtos), produto


def atualizar_estoque_minimo(estado: EstadoApp, produto_id: str, estoque_minimo: float) -> EstadoApp:
    if estoque_minimo is None or estoque_minimo < 0:
        raise ValidacaoError("Estoque mínimo não pode ser negativo")
    if estado.produto(produto_id) is None:
        raise ValidacaoError(f"Produto não encontrado: {produto_id}")
    return replace(
        estado,
        produtos=[replace(p, estoque_minimo=estoque_minimo) if p.id == produto_id else p for p in estado.produtos],
    )


def cadastrar_fornecedor(
    estado: EstadoApp,
    nome: str,
    contato: Optional[str] = None,
    email: Optional[str] = None,
    fornecedor_id: Optional[str] = None,
) -> Tuple[EstadoApp, Fornecedor]:
    nome = normaliza_str(nome)
    if not nome:
        raise ValidacaoError("Nome do fornecedor obrigatório")
    fornecedor = Fornecedor(
        id=normaliza_str(fornecedor_id) or novo_id(),
        nome=nome,
        contato=normaliza_str(contato),
        email=normaliza_str(email),
    )
    if any(f.id == fornecedor.id for f in estado.fornecedores):
        raise ValidacaoError(f"Fornecedor já cadastrado: {fornecedor.id}")
    return replace(estado, fornecedores=[*estado.fornecedores, fornecedor]), fornecedor


def cadastrar_cliente(
    estado: EstadoApp,
    nome: str,
    sobrenome: Optional[str] = None,
    fone: Optional[str] = None,
) -> Tuple[EstadoApp, Cliente]:
    nome = normaliza_str(nome)
    if not nome:
        raise ValidacaoError("Nome do cliente obrigatório")
    agora = agora_iso()
    cliente = Cliente(
        id=novo_id(),
        nome=nome,
        sobrenome=normaliza_str(sobrenome),
        fone=normaliza_str(fone),
        pontos_fidelidade=0,
        criado_em=agora,
        atualizado_em=agora,
    )
    log_transaction("cadastrar_cliente", {"nome": nome}, result=cliente.id)
    return replace(estado, clientes=[*estado.clientes, cliente]), cliente


_CAMPOS_EDITAVEIS = ("nome", "sobrenome", "fone")


def atualizar_cliente(estado: EstadoApp, cliente_id: str, dados: Dict[str, Any]) -> EstadoApp:
    """Atualiza nome/sobrenome/fone. Pontos só mudam pelas vendas."""
    cliente = estado.cliente(cliente_id)
    if cliente is None:
        raise ValidacaoError(f"Cliente não encontrado: {cliente_id}")
    invalidos = set(dados) - set(_CAMPOS_EDITAVEIS)
    if invalidos:
        raise ValidacaoError(f"Campos não editáveis: {', '.join(sorted(invalidos))}")
    mudancas = {k: normaliza_str(v) for k, v in dados.items()}
    if "nome" in mudancas and not mudancas["nome"]:
        raise ValidacaoError("Nome do cliente obrigatório")
    atualizado = replace(cliente, atualizado_em=agora_iso(), **mudancas)
    return replace(estado, clientes=[atualizado if c.id == cliente_id else c for c in estado.clientes])


def _token_exclusao(cliente: Cliente) -> str:
    base = f"{cliente.id}|{cliente.atualizado_em}|{cliente.pontos_fidelidade}"
    return hashlib.sha256(base.encode("utf-8")).hexdigest()[:12]


def propor_exclusao_cliente(estado: EstadoApp, cliente_id: str) -> str:
    """Primeira fase: devolve o token que confirma a exclusão."""
    cliente = estado.cliente(cliente_id)
    if cliente is None:
        raise ValidacaoError(f"Cliente não encontrado: {cliente_id}")
    return _token_exclusao(cliente)


def excluir_cliente(estado: EstadoApp, cliente_id: str, token: str) -> EstadoApp:
    """Segunda fase: exclui somente com o token da proposta."""
    cliente = estado.cliente(cliente_id)
    if cliente is None:
        raise ValidacaoError(f"Cliente não encontrado: {cliente_id}")
    if token != _token_exclusao(cliente):
        raise ValidacaoError("Confirmação de exclusão inválida ou expirada")
    log_transaction("excluir_cliente", {"cliente_id": cliente_id}, result="deleted")
    return replace(estado, clientes=[c for c in estado.clientes if c.id != cliente_id])
