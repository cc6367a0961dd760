"""
CLI da lanchonete (Typer).

Comandos principais:
- migrate                      -> cria/atualiza o banco SQLite
- produto add/list/import      -> catálogo de insumos e pratos
- fornecedor add/list          -> fornecedores
- cliente add/list/edit/delete -> clientes e fidelidade
- cliente historico            -> compras e favoritos do cliente
- venda <itens>                -> venda rápida (baixa insumos das receitas)
- compra <fornecedor> <itens>  -> compra recebida (entrada de estoque)
- comanda abrir/salvar/fechar  -> contas abertas
- lista add/auto/comprar       -> lista de compras
- rel ...                      -> relatórios gerenciais
- insight / sugestao-compra    -> assistente de IA
- export / import-json         -> backup do estado completo em JSON

Itens são informados como "produto_id:quantidade[@preco]".
"""

from __future__ import annotations

import asyncio
import functools
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from lanchonete.config import DB_PATH
from lanchonete.adapters.catalogo_loader import load_produtos
from lanchonete.adapters.parsers import parse_item_raw, parse_receita_raw
from lanchonete.domain.errors import LanchoneteError, ValidacaoError
from lanchonete.domain.models import ItemCarrinho, ItemReceita, Produto
from lanchonete.domain.policies import (
    proxima_recompensa, recompensa_por_pontos, recompensas_disponiveis,
)
from lanchonete.infra import assistente
from lanchonete.infra.logger import log_file_operation
from lanchonete.infra.migrations import apply_migrations
from lanchonete.infra.serializers import estado_from_dict, estado_to_dict
from lanchonete.usecases.lanchonete import Lanchonete
from lanchonete.usecases.relatorios import (
    historico_cliente,
    lucratividade,
    relatorio_estoque,
    resumo_financeiro,
    top_produtos,
    vendas_por_categoria,
    vendas_por_pagamento,
    vendas_ultimos_dias,
)


app = typer.Typer(help="Lanchonete: PDV e estoque por receitas")
console = Console()


# -----------------------
# util
# -----------------------

def _fmt_num(val: Any) -> str:
    """Formato brasileiro: 1.234,50."""
    return f"{val:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


def _display_table(data: List[Dict[str, Any]] | Dict[str, Any], title: str = "Resultado") -> None:
    """Exibe os dados em tabelas formatadas usando Rich."""
    if not data:
        console.print(Panel("Nenhum dado encontrado", title=title, border_style="yellow"))
        return

    if isinstance(data, dict):
        table = Table(title=title, box=box.ROUNDED)
        table.add_column("Campo")
        table.add_column("Valor", justify="right")
        for chave, valor in data.items():
            if isinstance(valor, float):
                valor = _fmt_num(valor)
            table.add_row(str(chave), str(valor))
        console.print(table)
        return

    table = Table(title=title, box=box.ROUNDED)
    columns = list(data[0].keys())
    for column in columns:
        if column in ("estoque", "estoque_minimo", "disponivel", "quantidade", "receita", "total", "preco", "custo"):
            table.add_column(column, justify="right")
        else:
            table.add_column(column)

    for row in data:
        values = []
        for col in columns:
            val = row.get(col, "")
            if col == "status":
                cor = {"CRITICO": "bold red", "BAIXO": "bold yellow", "OK": "bold green"}.get(str(val))
                values.append(f"[{cor}]{val}[/]" if cor else str(val))
            elif isinstance(val, float):
                values.append(_fmt_num(val))
            elif val is None:
                values.append("-")
            else:
                values.append(str(val))
        table.add_row(*values)
    console.print(table)


def _trata_erros(fn):
    """Converte falhas do domínio em mensagem + código de saída 1."""
    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except LanchoneteError as e:
            console.print(Panel(str(e), title="Erro", border_style="red"))
            raise typer.Exit(code=1)
    return wrapper


def _abrir(db_path: str, perfil: Optional[str] = None) -> Lanchonete:
    return Lanchonete.abrir(db_path, perfil=perfil)


def _itens(loja: Lanchonete, brutos: List[str], usar_custo: bool = False) -> List[ItemCarrinho]:
    """Monta itens de carrinho com nome e preço congelados do catálogo."""
    itens: List[ItemCarrinho] = []
    for bruto in brutos:
        produto_id, qtd, preco = parse_item_raw(bruto)
        if not produto_id or qtd is None:
            raise ValidacaoError(f"Item inválido: {bruto!r} (use produto_id:quantidade[@preco])")
        if preco is None and "@" in bruto:
            raise ValidacaoError(f"Preço inválido em {bruto!r}")
        produto = loja.estado.produto(produto_id)
        if produto is None:
            raise ValidacaoError(f"Produto não encontrado: {produto_id}")
        if preco is None:
            preco = produto.custo if usar_custo else produto.preco
        itens.append(ItemCarrinho(produto_id, produto.nome, qtd, preco))
    return itens


def _venda_dict(venda) -> Dict[str, Any]:
    return {
        "venda": venda.id,
        "cliente": venda.cliente_nome or "-",
        "subtotal": venda.subtotal,
        "desconto": venda.desconto,
        "total": venda.total,
        "pontos_ganhos": venda.pontos_ganhos,
        "pagamento": venda.forma_pagamento,
    }


_DB_HELP = "Caminho do SQLite"
_PERFIL_HELP = "Perfil da sessão (admin | operador | caixa)"


# -----------------------
# comandos de infra
# -----------------------

@app.command("migrate")
def cmd_migrate(db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP)):
    """Aplica migrações do banco."""
    apply_migrations(db_path)
    typer.echo(f">> Migrações aplicadas em: {db_path}")


@app.command("export")
def cmd_export(
    path: str = typer.Argument(..., help="Arquivo JSON de destino"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
):
    """Exporta o estado completo (formato persistido) para JSON."""
    loja = _abrir(db_path)
    doc = estado_to_dict(loja.estado)
    Path(path).write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")
    log_file_operation("export", path, rows_processed=sum(len(v) for v in doc.values()))
    typer.echo(f">> Estado exportado para: {path}")


@app.command("import-json")
@_trata_erros
def cmd_import_json(
    path: str = typer.Argument(..., help="Arquivo JSON exportado"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
    perfil: Optional[str] = typer.Option(None, "--perfil", "--role", envvar="LANCHONETE_PERFIL", help=_PERFIL_HELP),
):
    """Substitui o estado atual pelo conteúdo de um JSON exportado."""
    try:
        doc = json.loads(Path(path).read_text(encoding="utf-8"))
        estado = estado_from_dict(doc)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ValidacaoError(f"Documento de estado inválido: {e!r}") from e
    loja = _abrir(db_path, perfil)
    loja.substituir_estado(estado)
    log_file_operation("import", path, rows_processed=sum(len(v) for v in doc.values() if isinstance(v, list)))
    typer.echo(f">> Estado importado de: {path}")


# -----------------------
# produtos
# -----------------------

produto_app = typer.Typer(help="Catálogo de insumos e pratos")
app.add_typer(produto_app, name="produto")


@produto_app.command("add")
@_trata_erros
def cmd_produto_add(
    nome: str = typer.Option(..., help="Nome do produto"),
    tipo: str = typer.Option("insumo", help="insumo | prato"),
    produto_id: Optional[str] = typer.Option(None, "--id", help="Id (gerado se omitido)"),
    preco: float = typer.Option(0.0, help="Preço de venda"),
    custo: float = typer.Option(0.0, help="Custo de compra"),
    estoque: float = typer.Option(0.0, help="Estoque inicial (insumos)"),
    minimo: float = typer.Option(0.0, help="Estoque mínimo"),
    unidade: str = typer.Option("un", help="un | kg | g | l | ml"),
    fornecedor: Optional[str] = typer.Option(None, help="Id do fornecedor"),
    categoria: str = typer.Option("Geral", help="Categoria"),
    receita: Optional[str] = typer.Option(None, help='Receita do prato: "insumo:qtd;insumo:qtd"'),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
    perfil: Optional[str] = typer.Option(None, "--perfil", "--role", envvar="LANCHONETE_PERFIL", help=_PERFIL_HELP),
):
    """Cadastra (ou substitui) um produto."""
    try:
        linhas = parse_receita_raw(receita)
    except ValueError as e:
        raise ValidacaoError(str(e)) from e
    loja = _abrir(db_path, perfil)
    produto = loja.cadastrar_produto(Produto(
        id=produto_id or "",
        nome=nome,
        tipo=tipo,
        preco=preco,
        custo=custo,
        estoque=estoque,
        estoque_minimo=minimo,
        unidade=unidade,
        fornecedor_id=fornecedor,
        categoria=categoria,
        receita=[ItemReceita(i, q) for i, q in linhas],
    ))
    typer.echo(f">> Produto cadastrado: {produto.id}")


@produto_app.command("list")
def cmd_produto_list(db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP)):
    """Lista o catálogo com a disponibilidade atual."""
    loja = _abrir(db_path)
    disp = loja.disponibilidade()
    linhas = [
        {
            "id": p.id,
            "nome": p.nome,
            "tipo": p.tipo,
            "categoria": p.categoria,
            "preco": float(p.preco),
            "estoque": float(p.estoque) if p.is_insumo else None,
            "disponivel": disp[p.id],
            "unidade": p.unidade,
        }
        for p in loja.estado.produtos
    ]
    _display_table(linhas, title="Catálogo")


@produto_app.command("import")
@_trata_erros
def cmd_produto_import(
    path: str = typer.Argument(..., help="CSV ou XLSX do catálogo"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
    perfil: Optional[str] = typer.Option(None, "--perfil", "--role", envvar="LANCHONETE_PERFIL", help=_PERFIL_HELP),
):
    """Importa produtos de uma planilha (insumos são cadastrados antes dos pratos)."""
    try:
        produtos = load_produtos(path)
    except ValueError as e:
        raise ValidacaoError(str(e)) from e
    n = _abrir(db_path, perfil).importar_produtos(produtos)
    typer.echo(f">> {n} produtos importados de {path}")


@produto_app.command("minimo")
@_trata_erros
def cmd_produto_minimo(
    produto_id: str = typer.Argument(..., help="Id do insumo"),
    valor: float = typer.Argument(..., help="Novo estoque mínimo"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
    perfil: Optional[str] = typer.Option(None, "--perfil", "--role", envvar="LANCHONETE_PERFIL", help=_PERFIL_HELP),
):
    """Altera o estoque mínimo de um produto."""
    _abrir(db_path, perfil).atualizar_estoque_minimo(produto_id, valor)
    typer.echo(">> Estoque mínimo atualizado.")


# -----------------------
# fornecedores e clientes
# -----------------------

fornecedor_app = typer.Typer(help="Fornecedores")
app.add_typer(fornecedor_app, name="fornecedor")


@fornecedor_app.command("add")
@_trata_erros
def cmd_fornecedor_add(
    nome: str = typer.Argument(..., help="Nome do fornecedor"),
    fornecedor_id: Optional[str] = typer.Option(None, "--id", help="Id (gerado se omitido)"),
    contato: Optional[str] = typer.Option(None, help="Telefone/contato"),
    email: Optional[str] = typer.Option(None, help="E-mail"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
    perfil: Optional[str] = typer.Option(None, "--perfil", "--role", envvar="LANCHONETE_PERFIL", help=_PERFIL_HELP),
):
    """Cadastra um fornecedor."""
    f = _abrir(db_path, perfil).cadastrar_fornecedor(nome, contato, email, fornecedor_id)
    typer.echo(f">> Fornecedor cadastrado: {f.id}")


@fornecedor_app.command("list")
def cmd_fornecedor_list(db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP)):
    loja = _abrir(db_path)
    _display_table(
        [{"id": f.id, "nome": f.nome, "contato": f.contato, "email": f.email} for f in loja.estado.fornecedores],
        title="Fornecedores",
    )


cliente_app = typer.Typer(help="Clientes e programa de fidelidade")
app.add_typer(cliente_app, name="cliente")


@cliente_app.command("add")
@_trata_erros
def cmd_cliente_add(
    nome: str = typer.Argument(..., help="Nome"),
    sobrenome: Optional[str] = typer.Option(None, help="Sobrenome"),
    fone: Optional[str] = typer.Option(None, help="Telefone"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
    perfil: Optional[str] = typer.Option(None, "--perfil", "--role", envvar="LANCHONETE_PERFIL", help=_PERFIL_HELP),
):
    """Cadastra um cliente."""
    c = _abrir(db_path, perfil).cadastrar_cliente(nome, sobrenome, fone)
    typer.echo(f">> Cliente cadastrado: {c.id}")


@cliente_app.command("list")
def cmd_cliente_list(db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP)):
    loja = _abrir(db_path)
    _display_table(
        [
            {"id": c.id, "nome": c.nome_completo, "fone": c.fone, "pontos": c.pontos_fidelidade}
            for c in loja.estado.clientes
        ],
        title="Clientes",
    )


@cliente_app.command("edit")
@_trata_erros
def cmd_cliente_edit(
    cliente_id: str = typer.Argument(..., help="Id do cliente"),
    nome: Optional[str] = typer.Option(None, help="Nome"),
    sobrenome: Optional[str] = typer.Option(None, help="Sobrenome"),
    fone: Optional[str] = typer.Option(None, help="Telefone"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
    perfil: Optional[str] = typer.Option(None, "--perfil", "--role", envvar="LANCHONETE_PERFIL", help=_PERFIL_HELP),
):
    """Atualiza dados cadastrais (apenas os informados)."""
    dados = {k: v for k, v in {"nome": nome, "sobrenome": sobrenome, "fone": fone}.items() if v is not None}
    if not dados:
        typer.echo("Nada a alterar. Informe pelo menos um campo.")
        raise typer.Exit(code=1)
    _abrir(db_path, perfil).atualizar_cliente(cliente_id, dados)
    typer.echo(">> Cliente atualizado.")


@cliente_app.command("delete")
@_trata_erros
def cmd_cliente_delete(
    cliente_id: str = typer.Argument(..., help="Id do cliente"),
    confirmar: Optional[str] = typer.Option(None, help="Token de confirmação"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
    perfil: Optional[str] = typer.Option(None, "--perfil", "--role", envvar="LANCHONETE_PERFIL", help=_PERFIL_HELP),
):
    """Exclui um cliente em duas etapas: sem --confirmar, apenas mostra o token."""
    loja = _abrir(db_path, perfil)
    if confirmar is None:
        token = loja.propor_exclusao_cliente(cliente_id)
        typer.echo(f"Para confirmar: cliente delete {cliente_id} --confirmar {token}")
        return
    loja.excluir_cliente(cliente_id, confirmar)
    typer.echo(">> Cliente excluído.")


@cliente_app.command("recompensas")
@_trata_erros
def cmd_cliente_recompensas(
    cliente_id: str = typer.Argument(..., help="Id do cliente"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
):
    """Mostra o saldo de pontos e as recompensas disponíveis."""
    cliente = _abrir(db_path).estado.cliente(cliente_id)
    if cliente is None:
        raise ValidacaoError(f"Cliente não encontrado: {cliente_id}")
    disponiveis = recompensas_disponiveis(cliente.pontos_fidelidade)
    _display_table(
        [{"pontos": r.pontos, "recompensa": r.descricao} for r in disponiveis],
        title=f"{cliente.nome_completo} ({cliente.pontos_fidelidade} pontos)",
    )
    prox = proxima_recompensa(cliente.pontos_fidelidade)
    if prox:
        faltam = prox.pontos - cliente.pontos_fidelidade
        console.print(f"[dim]Próxima recompensa: {prox.descricao} (faltam {faltam} pontos)[/dim]")


@cliente_app.command("historico")
@_trata_erros
def cmd_cliente_historico(
    cliente_id: str = typer.Argument(..., help="Id do cliente"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
):
    """Histórico de compras: total gasto, ticket médio e produtos favoritos."""
    hist = historico_cliente(_abrir(db_path).estado, cliente_id)
    favoritos = hist.pop("favoritos")
    vendas = hist.pop("vendas")
    _display_table(hist, title="Histórico do cliente")
    _display_table(favoritos, title="Produtos favoritos")
    _display_table(vendas, title="Compras")


# -----------------------
# vendas e compras
# -----------------------

@app.command("venda")
@_trata_erros
def cmd_venda(
    itens: List[str] = typer.Argument(..., help="Itens: produto_id:qtd[@preco]"),
    pagamento: str = typer.Option("cash", help="cash | card | pix | credit"),
    cliente: Optional[str] = typer.Option(None, help="Id do cliente (fidelidade)"),
    desconto: Optional[float] = typer.Option(None, help="Desconto percentual (0-100)"),
    pontos: Optional[int] = typer.Option(None, help="Pontos de fidelidade usados"),
    recompensa: Optional[int] = typer.Option(None, help="Resgata a recompensa de N pontos (50, 100, 200, 300)"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
    perfil: Optional[str] = typer.Option(None, "--perfil", "--role", envvar="LANCHONETE_PERFIL", help=_PERFIL_HELP),
):
    """Registra uma venda rápida."""
    loja = _abrir(db_path, perfil)
    if recompensa is not None:
        r = recompensa_por_pontos(recompensa)
        if r is None:
            raise ValidacaoError(f"Recompensa inexistente: {recompensa} pontos")
        c = loja.estado.cliente(cliente) if cliente else None
        if c is None:
            raise ValidacaoError("Recompensa exige um cliente cadastrado")
        if c.pontos_fidelidade < r.pontos:
            raise ValidacaoError(f"Pontos insuficientes: {c.pontos_fidelidade} < {r.pontos}")
        desconto, pontos = r.desconto_percentual, r.pontos
    venda = loja.registrar_venda(
        _itens(loja, itens),
        pagamento,
        cliente_id=cliente,
        desconto_percentual=desconto,
        pontos_usados=pontos,
    )
    _display_table(_venda_dict(venda), title="Venda registrada")


@app.command("compra")
@_trata_erros
def cmd_compra(
    fornecedor: str = typer.Argument(..., help="Id do fornecedor"),
    itens: List[str] = typer.Argument(..., help="Itens: produto_id:qtd[@custo]"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
    perfil: Optional[str] = typer.Option(None, "--perfil", "--role", envvar="LANCHONETE_PERFIL", help=_PERFIL_HELP),
):
    """Registra uma compra recebida (entrada de estoque)."""
    loja = _abrir(db_path, perfil)
    compra = loja.registrar_compra(fornecedor, _itens(loja, itens, usar_custo=True))
    _display_table({"compra": compra.id, "fornecedor": compra.fornecedor_id, "itens": len(compra.itens),
                    "total": compra.total}, title="Compra registrada")


# -----------------------
# comandas
# -----------------------

comanda_app = typer.Typer(help="Comandas (contas abertas)")
app.add_typer(comanda_app, name="comanda")


@comanda_app.command("abrir")
@_trata_erros
def cmd_comanda_abrir(
    cliente_nome: str = typer.Argument(..., help='Cliente ou mesa (ex.: "Mesa 1")'),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
    perfil: Optional[str] = typer.Option(None, "--perfil", "--role", envvar="LANCHONETE_PERFIL", help=_PERFIL_HELP),
):
    """Abre uma comanda vazia e mostra o id."""
    typer.echo(_abrir(db_path, perfil).abrir_comanda(cliente_nome))


@comanda_app.command("salvar")
@_trata_erros
def cmd_comanda_salvar(
    comanda_id: str = typer.Argument(..., help="Id da comanda"),
    itens: List[str] = typer.Argument(..., help="Itens completos da comanda: produto_id:qtd[@preco]"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
    perfil: Optional[str] = typer.Option(None, "--perfil", "--role", envvar="LANCHONETE_PERFIL", help=_PERFIL_HELP),
):
    """Substitui os itens da comanda."""
    loja = _abrir(db_path, perfil)
    comanda = loja.atualizar_comanda(comanda_id, _itens(loja, itens))
    if comanda is None:
        typer.echo(f"Comanda não encontrada: {comanda_id}")
        return
    typer.echo(f">> Comanda atualizada. Total: R$ {_fmt_num(comanda.total)}")


@comanda_app.command("fechar")
@_trata_erros
def cmd_comanda_fechar(
    comanda_id: str = typer.Argument(..., help="Id da comanda"),
    pagamento: str = typer.Option("cash", help="cash | card | pix | credit"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
    perfil: Optional[str] = typer.Option(None, "--perfil", "--role", envvar="LANCHONETE_PERFIL", help=_PERFIL_HELP),
):
    """Fecha a conta: gera a venda e baixa o estoque."""
    venda = _abrir(db_path, perfil).fechar_comanda(comanda_id, pagamento)
    if venda is None:
        typer.echo(f"Comanda não encontrada: {comanda_id}")
        return
    _display_table(_venda_dict(venda), title="Conta fechada")


@comanda_app.command("list")
def cmd_comanda_list(db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP)):
    loja = _abrir(db_path)
    _display_table(
        [
            {"id": c.id, "cliente": c.cliente_nome, "aberta_em": c.aberta_em, "itens": len(c.itens), "total": float(c.total)}
            for c in loja.estado.comandas_ativas
        ],
        title="Comandas abertas",
    )


# -----------------------
# lista de compras
# -----------------------

lista_app = typer.Typer(help="Lista de compras")
app.add_typer(lista_app, name="lista")


@lista_app.command("add")
@_trata_erros
def cmd_lista_add(
    produto_id: str = typer.Argument(..., help="Id do insumo"),
    quantidade: float = typer.Argument(..., help="Quantidade"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
    perfil: Optional[str] = typer.Option(None, "--perfil", "--role", envvar="LANCHONETE_PERFIL", help=_PERFIL_HELP),
):
    """Adiciona (ou acumula) um insumo na lista."""
    _abrir(db_path, perfil).adicionar_a_lista(produto_id, quantidade)
    typer.echo(">> Item adicionado à lista.")


@lista_app.command("auto")
@_trata_erros
def cmd_lista_auto(
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
    perfil: Optional[str] = typer.Option(None, "--perfil", "--role", envvar="LANCHONETE_PERFIL", help=_PERFIL_HELP),
):
    """Adiciona os insumos com estoque baixo que ainda não estão na lista."""
    adicionados = _abrir(db_path, perfil).preencher_estoque_baixo()
    if adicionados:
        typer.echo(f"{len(adicionados)} insumos com estoque baixo adicionados à lista!")
    else:
        typer.echo("Nenhum insumo novo com estoque baixo encontrado.")


@lista_app.command("list")
def cmd_lista_list(db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP)):
    loja = _abrir(db_path)
    linhas = []
    for item in loja.estado.lista_compras:
        p = loja.estado.produto(item.produto_id)
        linhas.append({
            "id": item.id,
            "produto": p.nome if p else item.produto_id,
            "quantidade": float(item.quantidade),
            "custo": float(p.custo) if p else 0.0,
            "total": float(item.quantidade * (p.custo if p else 0.0)),
        })
    _display_table(linhas, title="Lista de compras")


@lista_app.command("comprar")
@_trata_erros
def cmd_lista_comprar(
    fornecedor: str = typer.Argument(..., help="Id do fornecedor"),
    ids: Optional[List[str]] = typer.Argument(None, help="Ids das linhas (omita com --todos)"),
    todos: bool = typer.Option(False, "--todos", help="Compra a lista inteira"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
    perfil: Optional[str] = typer.Option(None, "--perfil", "--role", envvar="LANCHONETE_PERFIL", help=_PERFIL_HELP),
):
    """Converte linhas da lista em compra recebida."""
    loja = _abrir(db_path, perfil)
    selecionados = [i.id for i in loja.estado.lista_compras] if todos else list(ids or [])
    compra = loja.processar_lista_para_compra(selecionados, fornecedor)
    _display_table({"compra": compra.id, "itens": len(compra.itens), "total": compra.total}, title="Compra registrada")


@lista_app.command("remover")
@_trata_erros
def cmd_lista_remover(
    ids: List[str] = typer.Argument(..., help="Ids das linhas"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
    perfil: Optional[str] = typer.Option(None, "--perfil", "--role", envvar="LANCHONETE_PERFIL", help=_PERFIL_HELP),
):
    _abrir(db_path, perfil).remover_da_lista(ids)
    typer.echo(">> Itens removidos da lista.")


# -----------------------
# relatórios
# -----------------------

rel_app = typer.Typer(help="Relatórios gerenciais")
app.add_typer(rel_app, name="rel")


@rel_app.command("resumo")
def rel_resumo(db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP)):
    """Resumo financeiro (receita, compras, ticket médio)."""
    _display_table(resumo_financeiro(_abrir(db_path).estado), title="Resumo financeiro")


@rel_app.command("estoque")
def rel_estoque(
    alertas: bool = typer.Option(False, "--alertas", help="Somente itens BAIXO/CRITICO"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
):
    """Status dos insumos e disponibilidade dos pratos."""
    _display_table(relatorio_estoque(_abrir(db_path).estado, apenas_alertas=alertas), title="Estoque")


@rel_app.command("top")
def rel_top(
    n: int = typer.Option(5, help="Top N produtos"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
):
    _display_table(top_produtos(_abrir(db_path).estado, n), title=f"Top {n} produtos")


@rel_app.command("categorias")
def rel_categorias(db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP)):
    _display_table(vendas_por_categoria(_abrir(db_path).estado), title="Vendas por categoria")


@rel_app.command("pagamentos")
def rel_pagamentos(db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP)):
    _display_table(vendas_por_pagamento(_abrir(db_path).estado), title="Vendas por forma de pagamento")


@rel_app.command("dias")
def rel_dias(
    dias: int = typer.Option(7, help="Quantidade de dias"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
):
    _display_table(vendas_ultimos_dias(_abrir(db_path).estado, dias), title=f"Vendas dos últimos {dias} dias")


@rel_app.command("lucratividade")
def rel_lucratividade(db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP)):
    """Custo, preço, margem (%) e lucro unitário; pratos custeados pela receita."""
    _display_table(lucratividade(_abrir(db_path).estado), title="Lucratividade")


# -----------------------
# assistente de IA
# -----------------------

@app.command("insight")
def cmd_insight(db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP)):
    """Gera um resumo executivo do negócio com IA."""
    e = _abrir(db_path).estado
    with console.status("Consultando assistente..."):
        texto = asyncio.run(assistente.gerar_insight(e.produtos, e.vendas, e.compras))
    console.print(Panel(texto, title="Análise do assistente"))


@app.command("sugestao-compra")
@_trata_erros
def cmd_sugestao_compra(
    fornecedor_id: str = typer.Argument(..., help="Id do fornecedor"),
    db_path: str = typer.Option(DB_PATH, "--db", help=_DB_HELP),
):
    """Sugere um pedido de compra para o fornecedor com IA."""
    e = _abrir(db_path).estado
    fornecedor = next((f for f in e.fornecedores if f.id == fornecedor_id), None)
    if fornecedor is None:
        raise ValidacaoError(f"Fornecedor não encontrado: {fornecedor_id}")
    with console.status("Consultando assistente..."):
        texto = asyncio.run(assistente.sugerir_reposicao(e.produtos, fornecedor))
    console.print(Panel(texto or "Sem sugestão disponível.", title=f"Sugestão para {fornecedor.nome}"))


# Entry point opcional:
def main():
    app()


if __name__ == "__main__":
    main()
