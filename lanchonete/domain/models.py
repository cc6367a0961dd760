# lanchonete/domain/models.py
"""
Modelos (dataclasses) do domínio.

Observação importante:
- Os casos de uso nunca alteram um objeto recebido; produzem cópias com
  `dataclasses.replace`. Assim, um `EstadoApp` já publicado permanece
  íntegro mesmo que uma operação falhe no meio do caminho.
- O formato persistido (chaves camelCase) fica em `infra/serializers.py`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


TIPO_INSUMO = "insumo"
TIPO_PRATO = "prato"
TIPOS_PRODUTO = (TIPO_INSUMO, TIPO_PRATO)

UNIDADES = ("un", "kg", "g", "l", "ml")

FORMAS_PAGAMENTO = ("cash", "card", "pix", "credit")

STATUS_COMANDA_ABERTA = "open"
STATUS_COMANDA_FECHADA = "closed"

STATUS_COMPRA_RECEBIDA = "received"


@dataclass(frozen=True)
class ItemReceita:
    """Quanto de um insumo uma unidade do prato consome."""
    ingrediente_id: str
    quantidade: float


@dataclass
class Produto:
    """Cadastro de produto: insumo (estocado) ou prato (composto por receita)."""
    id: str
    nome: str
    tipo: str = TIPO_INSUMO            # 'insumo' | 'prato'
    preco: float = 0.0                 # preço de venda
    custo: float = 0.0                 # custo de compra
    estoque: float = 0.0               # pratos sempre 0
    estoque_minimo: float = 0.0
    unidade: str = "un"
    fornecedor_id: Optional[str] = None
    categoria: str = "Geral"
    receita: List[ItemReceita] = field(default_factory=list)

    @property
    def is_prato(self) -> bool:
        return self.tipo == TIPO_PRATO

    @property
    def is_insumo(self) -> bool:
        return self.tipo == TIPO_INSUMO


@dataclass(frozen=True)
class ItemCarrinho:
    """Linha de carrinho, venda, comanda ou compra (preço congelado)."""
    produto_id: str
    produto_nome: str
    quantidade: float
    preco_unitario: float

    @property
    def valor(self) -> float:
        return self.quantidade * self.preco_unitario


@dataclass(frozen=True)
class Venda:
    id: str
    data: str
    itens: List[ItemCarrinho]
    subtotal: float
    total: float
    forma_pagamento: str
    desconto: float = 0.0
    desconto_percentual: Optional[float] = None
    pontos_usados: Optional[int] = None
    pontos_ganhos: int = 0
    cliente_id: Optional[str] = None
    cliente_nome: Optional[str] = None
    comanda_id: Optional[str] = None


@dataclass(frozen=True)
class Compra:
    id: str
    data: str
    fornecedor_id: str
    itens: List[ItemCarrinho]
    total: float
    status: str = STATUS_COMPRA_RECEBIDA


@dataclass
class Comanda:
    """Conta aberta (mesa ou cliente) que acumula itens até o fechamento."""
    id: str
    cliente_nome: str
    aberta_em: str
    itens: List[ItemCarrinho] = field(default_factory=list)
    total: float = 0.0
    status: str = STATUS_COMANDA_ABERTA


@dataclass
class ItemListaCompras:
    id: str
    produto_id: str
    quantidade: float


@dataclass
class Cliente:
    id: str
    nome: str
    sobrenome: Optional[str] = None
    fone: Optional[str] = None
    pontos_fidelidade: int = 0
    criado_em: Optional[str] = None
    atualizado_em: Optional[str] = None

    @property
    def nome_completo(self) -> str:
        return f"{self.nome} {self.sobrenome or ''}".strip()


@dataclass
class Fornecedor:
    id: str
    nome: str
    contato: Optional[str] = None
    email: Optional[str] = None


@dataclass
class EstadoApp:
    """Snapshot completo da aplicação (coleções irmãs)."""
    produtos: List[Produto] = field(default_factory=list)
    fornecedores: List[Fornecedor] = field(default_factory=list)
    clientes: List[Cliente] = field(default_factory=list)
    vendas: List[Venda] = field(default_factory=list)
    compras: List[Compra] = field(default_factory=list)
    lista_compras: List[ItemListaCompras] = field(default_factory=list)
    comandas_ativas: List[Comanda] = field(default_factory=list)

    def produto(self, produto_id: str) -> Optional[Produto]:
        for p in self.produtos:
            if p.id == produto_id:
                return p
        return None

    def cliente(self, cliente_id: str) -> Optional[Cliente]:
        for c in self.clientes:
            if c.id == cliente_id:
                return c
        return None

    def comanda(self, comanda_id: str) -> Optional[Comanda]:
        for c in self.comandas_ativas:
            if c.id == comanda_id:
                return c
        return None
