"""
Exceções do domínio.

Apenas falhas de validação de entrada (e o bloqueio opcional de estoque
negativo) são erros. Referências a produtos inexistentes, estoque negativo e
comanda não encontrada são tolerados pelos casos de uso.
"""

from __future__ import annotations


class LanchoneteError(Exception):
    """Base de todas as falhas reportadas ao chamador."""


class ValidacaoError(LanchoneteError):
    """Entrada inválida, rejeitada antes de qualquer alteração de estado."""


class EstoqueInsuficienteError(LanchoneteError):
    """Venda recusada pelo bloqueio opcional de estoque negativo."""

    def __init__(self, faltantes):
        self.faltantes = dict(faltantes)
        nomes = ", ".join(f"{k} ({v:g})" for k, v in self.faltantes.items())
        super().__init__(f"Estoque insuficiente: {nomes}")


class PermissaoNegadaError(LanchoneteError):
    """Operação não permitida para o perfil da sessão."""
