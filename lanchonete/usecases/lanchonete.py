"""
Coordenador da aplicação: dono único do snapshot `EstadoApp`.

Toda alteração passa por um método desta classe, que:
1) confere a permissão do perfil da sessão (quando há perfil);
2) calcula o estado novo com o caso de uso puro;
3) publica o estado novo numa única atribuição;
4) persiste o estado completo.

A persistência é "best effort": se a gravação falhar, o erro é registrado
no log e o estado em memória continua avançado (não há rollback nem
retentativa).
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from lanchonete.config import DB_PATH, DEFAULTS
from lanchonete.domain.disponibilidade import disponibilidade, max_produzivel
from lanchonete.domain.errors import PermissaoNegadaError, ValidacaoError
from lanchonete.domain.models import (
    Cliente, Comanda, Compra, EstadoApp, Fornecedor, ItemCarrinho,
    ItemListaCompras, Produto, Venda,
)
from lanchonete.domain.permissoes import tem_permissao
from lanchonete.infra.logger import log_system_event
from lanchonete.infra.repositories import EstadoRepo
from lanchonete.usecases import catalogo, comandas, lista_compras
from lanchonete.usecases.registrar_compra import registrar_compra
from lanchonete.usecases.registrar_venda import registrar_venda


class Lanchonete:
    def __init__(
        self,
        repo: Optional[EstadoRepo] = None,
        perfil: Optional[str] = None,
        estado: Optional[EstadoApp] = None,
        bloquear_estoque_negativo: bool = DEFAULTS.bloquear_estoque_negativo,
    ):
        self.repo = repo
        self.perfil = perfil
        self.bloquear_estoque_negativo = bloquear_estoque_negativo
        if estado is not None:
            self._estado = estado
        elif repo is not None:
            self._estado = repo.load()
        else:
            self._estado = EstadoApp()
        log_system_event("lanchonete_init", {"perfil": perfil, "produtos": len(self._estado.produtos)})

    @classmethod
    def abrir(cls, db_path: str = DB_PATH, perfil: Optional[str] = None) -> "Lanchonete":
        return cls(repo=EstadoRepo(db_path), perfil=perfil)

    @property
    def estado(self) -> EstadoApp:
        return self._estado

    # -----------------------
    # infra interna
    # -----------------------

    def _exigir(self, permissao: str) -> None:
        if self.perfil is not None and not tem_permissao(self.perfil, permissao):
            log_system_event("permissao_negada", {"perfil": self.perfil, "permissao": permissao}, level="warning")
            raise PermissaoNegadaError(f"Perfil '{self.perfil}' sem permissão: {permissao}")

    def _publicar(self, novo: EstadoApp) -> None:
        self._estado = novo
        if self.repo is None:
            return
        try:
            self.repo.save(novo)
        except Exception as e:  # gravação é best effort
            log_system_event("persistencia_falhou", {"error": str(e)}, level="error")

    # -----------------------
    # leitura
    # -----------------------

    def max_produzivel(self, produto_id: str) -> int:
        produto = self._estado.produto(produto_id)
        if produto is None:
            return 0
        return max_produzivel(produto, self._estado.produtos)

    def disponibilidade(self) -> Dict[str, int]:
        return disponibilidade(self._estado.produtos)

    def cardapio(self) -> List[Tuple[Produto, int]]:
        """Produtos vendáveis com a disponibilidade atual."""
        disp = self.disponibilidade()
        return [(p, disp[p.id]) for p in self._estado.produtos if p.is_prato or p.preco > 0]

    # -----------------------
    # vendas, compras e comandas
    # -----------------------

    def registrar_venda(
        self,
        itens: Iterable[ItemCarrinho],
        forma_pagamento: str,
        cliente_id: Optional[str] = None,
        desconto_percentual: Optional[float] = None,
        pontos_usados: Optional[int] = None,
    ) -> Venda:
        self._exigir("register_sale")
        novo, venda = registrar_venda(
            self._estado, itens, forma_pagamento,
            cliente_id=cliente_id,
            desconto_percentual=desconto_percentual,
            pontos_usados=pontos_usados,
            bloquear_estoque_negativo=self.bloquear_estoque_negativo,
        )
        self._publicar(novo)
        return venda

    def registrar_compra(self, fornecedor_id: str, itens: Iterable[ItemCarrinho]) -> Compra:
        self._exigir("register_purchase")
        novo, compra = registrar_compra(self._estado, fornecedor_id, itens)
        self._publicar(novo)
        return compra

    def abrir_comanda(self, cliente_nome: str) -> str:
        self._exigir("manage_comandas")
        novo, comanda_id = comandas.abrir_comanda(self._estado, cliente_nome)
        self._publicar(novo)
        return comanda_id

    def atualizar_comanda(self, comanda_id: str, itens: Iterable[ItemCarrinho]) -> Optional[Comanda]:
        self._exigir("manage_comandas")
        novo = comandas.atualizar_comanda(self._estado, comanda_id, itens)
        if novo is not self._estado:
            self._publicar(novo)
        return novo.comanda(comanda_id)

    def fechar_comanda(self, comanda_id: str, forma_pagamento: str) -> Optional[Venda]:
        self._exigir("manage_comandas")
        novo, venda = comandas.fechar_comanda(
            self._estado, comanda_id, forma_pagamento,
            bloquear_estoque_negativo=self.bloquear_estoque_negativo,
        )
        if venda is not None:
            self._publicar(novo)
        return venda

    # -----------------------
    # lista de compras
    # -----------------------

    def adicionar_a_lista(self, produto_id: str, quantidade: float) -> None:
        self._exigir("manage_shopping_list")
        self._publicar(lista_compras.adicionar_a_lista(self._estado, produto_id, quantidade))

    def remover_da_lista(self, ids: Iterable[str]) -> None:
        self._exigir("manage_shopping_list")
        self._publicar(lista_compras.remover_da_lista(self._estado, ids))

    def preencher_estoque_baixo(self) -> List[ItemListaCompras]:
        self._exigir("manage_shopping_list")
        novo, adicionados = lista_compras.preencher_estoque_baixo(self._estado)
        if adicionados:
            self._publicar(novo)
        return adicionados

    def processar_lista_para_compra(self, ids: Iterable[str], fornecedor_id: str) -> Compra:
        self._exigir("register_purchase")
        novo, compra = lista_compras.processar_lista_para_compra(self._estado, ids, fornecedor_id)
        self._publicar(novo)
        return compra

    # -----------------------
    # cadastros
    # -----------------------

    def cadastrar_produto(self, produto: Produto) -> Produto:
        self._exigir("manage_products")
        novo, cadastrado = catalogo.cadastrar_produto(self._estado, produto)
        self._publicar(novo)
        return cadastrado

    def importar_produtos(self, produtos: Iterable[Produto]) -> int:
        """Cadastra em sequência (insumos antes dos pratos); tudo ou nada."""
        self._exigir("manage_products")
        produtos = sorted(produtos, key=lambda p: 0 if p.is_insumo else 1)
        novo = self._estado
        for p in produtos:
            novo, _ = catalogo.cadastrar_produto(novo, p)
        self._publicar(novo)
        return len(produtos)

    def atualizar_estoque_minimo(self, produto_id: str, estoque_minimo: float) -> None:
        self._exigir("manage_products")
        self._publicar(catalogo.atualizar_estoque_minimo(self._estado, produto_id, estoque_minimo))

    def cadastrar_fornecedor(self, nome: str, contato: Optional[str] = None,
                             email: Optional[str] = None, fornecedor_id: Optional[str] = None) -> Fornecedor:
        self._exigir("manage_suppliers")
        novo, fornecedor = catalogo.cadastrar_fornecedor(self._estado, nome, contato, email, fornecedor_id)
        self._publicar(novo)
        return fornecedor

    def cadastrar_cliente(self, nome: str, sobrenome: Optional[str] = None, fone: Optional[str] = None) -> Cliente:
        self._exigir("manage_customers")
        novo, cliente = catalogo.cadastrar_cliente(self._estado, nome, sobrenome, fone)
        self._publicar(novo)
        return cliente

    def atualizar_cliente(self, cliente_id: str, dados: Dict[str, Any]) -> None:
        self._exigir("manage_customers")
        self._publicar(catalogo.atualizar_cliente(self._estado, cliente_id, dados))

    def propor_exclusao_cliente(self, cliente_id: str) -> str:
        self._exigir("delete_items")
        return catalogo.propor_exclusao_cliente(self._estado, cliente_id)

    def excluir_cliente(self, cliente_id: str, token: str) -> None:
        self._exigir("delete_items")
        self._publicar(catalogo.excluir_cliente(self._estado, cliente_id, token))

    def substituir_estado(self, estado: EstadoApp) -> None:
        """Importação de um documento completo (backup)."""
        self._exigir("manage_products")
        if not isinstance(estado, EstadoApp):
            raise ValidacaoError("Documento de estado inválido")
        self._publicar(estado)
