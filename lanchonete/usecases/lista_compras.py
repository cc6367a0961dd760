"""
UC: LISTA DE COMPRAS (reposição de insumos).

- adicionar_a_lista(): cria a linha ou acumula a quantidade.
- remover_da_lista(): retira linhas pelo id.
- preencher_estoque_baixo(): sugere insumos com estoque <= mínimo.
- processar_lista_para_compra(): converte linhas selecionadas em compra.

Obs.:
- O preenchimento automático nunca altera uma linha já existente: uma
  quantidade digitada à mão prevalece sobre a sugestão.
- Na compra, o preço unitário é o custo ATUAL do produto.
- Compra, entrada de estoque e remoção das linhas acontecem no mesmo
  estado novo; se a compra falhar, nada muda.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Tuple

from lanchonete.config import DEFAULTS
from lanchonete.domain.errors import ValidacaoError
from lanchonete.domain.models import Compra, EstadoApp, ItemCarrinho, ItemListaCompras
from lanchonete.domain.policies import precisa_repor, sugestao_reposicao
from lanchonete.infra.logger import log_system_event, log_transaction
from lanchonete.usecases.comum import novo_id
from lanchonete.usecases.registrar_compra import registrar_compra


def adicionar_a_lista(estado: EstadoApp, produto_id: str, quantidade: float) -> EstadoApp:
    if quantidade is None or quantidade <= 0:
        raise ValidacaoError("Quantidade deve ser positiva")
    produto = estado.produto(produto_id)
    if produto is None:
        raise ValidacaoError(f"Produto não encontrado: {produto_id}")
    if not produto.is_insumo:
        raise ValidacaoError(f"Apenas insumos entram na lista de compras: {produto.nome}")

    lista: List[ItemListaCompras] = []
    acumulou = False
    for item in estado.lista_compras:
        if item.produto_id == produto_id and not acumulou:
            item = replace(item, quantidade=item.quantidade + quantidade)
            acumulou = True
        lista.append(item)
    if not acumulou:
        lista.append(ItemListaCompras(id=novo_id(), produto_id=produto_id, quantidade=quantidade))

    log_transaction("adicionar_lista", {"produto_id": produto_id, "quantidade": quantidade}, result="acumulado" if acumulou else "novo")
    return replace(estado, lista_compras=lista)


def remover_da_lista(estado: EstadoApp, ids: Iterable[str]) -> EstadoApp:
    ids = set(ids)
    return replace(estado, lista_compras=[i for i in estado.lista_compras if i.id not in ids])


def preencher_estoque_baixo(
    estado: EstadoApp,
    fator: float = DEFAULTS.fator_reposicao,
) -> Tuple[EstadoApp, List[ItemListaCompras]]:
    """Adiciona insumos com estoque baixo que ainda não estão na lista.

    Sugestão: ``estoque_minimo * fator - estoque`` (fator padrão 2), apenas
    quando positiva. Devolve ``(novo_estado, itens_adicionados)``.
    """
    presentes = {i.produto_id for i in estado.lista_compras}
    adicionados: List[ItemListaCompras] = []
    for p in estado.produtos:
        if not p.is_insumo or p.id in presentes:
            continue
        if not precisa_repor(p.estoque, p.estoque_minimo):
            continue
        sugerido = sugestao_reposicao(p.estoque, p.estoque_minimo, fator)
        if sugerido > 0:
            adicionados.append(ItemListaCompras(id=novo_id(), produto_id=p.id, quantidade=sugerido))
            presentes.add(p.id)

    log_system_event("lista_auto_preenchida", {"adicionados": len(adicionados)})
    if not adicionados:
        return estado, []
    return replace(estado, lista_compras=[*estado.lista_compras, *adicionados]), adicionados


def processar_lista_para_compra(
    estado: EstadoApp,
    ids_selecionados: Iterable[str],
    fornecedor_id: str,
) -> Tuple[EstadoApp, Compra]:
    ids = set(ids_selecionados)
    selecionados = [i for i in estado.lista_compras if i.id in ids]
    if not selecionados:
        raise ValidacaoError("Nenhum item da lista selecionado")

    itens: List[ItemCarrinho] = []
    for linha in selecionados:
        produto = estado.produto(linha.produto_id)
        itens.append(
            ItemCarrinho(
                produto_id=linha.produto_id,
                produto_nome=produto.nome if produto else "Desconhecido",
                quantidade=linha.quantidade,
                preco_unitario=produto.custo if produto else 0.0,
            )
        )

    novo, compra = registrar_compra(estado, fornecedor_id, itens)
    novo = remover_da_lista(novo, ids)
    log_transaction("processar_lista", {"itens": len(itens), "fornecedor_id": fornecedor_id}, result=compra.id)
    return novo, compra
