"""Demonstration dataset served when the rule service cannot be reached.

The payloads use the same mixed field spellings the live service produces so
they go through the regular translator.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Final

from .translator import parse_hierarchy

if TYPE_CHECKING:
    from anonrules.domain.model import Hierarchy

FIXTURE_DOCUMENT_CLASSES: Final[tuple[dict[str, object], ...]] = (
    {
        "id": "1",
        "name": "Certidão Civil",
        "rule": "ALLOWED",
        "documentTypes": [
            {
                "id": "1-1",
                "name": "Certidão de Nascimento",
                "rule": "RESTRICTED",
                "days": 30,
                "documentClassId": "1",
                "labels": [
                    {
                        "id": "1-1-1",
                        "name": "Nome Completo do Titular",
                        "rule": "NOT_ALLOWED",
                        "documentTypeId": "1-1",
                    },
                    {
                        "id": "1-1-2",
                        "name": "CPF do Titular",
                        "rule": "NOT_ALLOWED",
                        "documentTypeId": "1-1",
                    },
                    {
                        "id": "1-1-3",
                        "name": "Data de Nascimento",
                        "rule": "RESTRICTED",
                        "days": 90,
                        "documentTypeId": "1-1",
                    },
                ],
            },
            {
                "id": "1-2",
                "name": "Certidão de Casamento",
                "rule": "ALLOWED",
                "documentClassId": "1",
                "labels": [
                    {
                        "id": "1-2-1",
                        "name": "Nome Completo dos Cônjuges",
                        "rule": "RESTRICTED",
                        "days": 60,
                        "documentTypeId": "1-2",
                    },
                    {
                        "id": "1-2-2",
                        "name": "Data do Casamento",
                        "rule": "ALLOWED",
                        "documentTypeId": "1-2",
                    },
                ],
            },
        ],
    },
    {
        "id": "2",
        "name": "Documento Bancário",
        "rule": "RESTRICTED",
        "days": 180,
        "documentTypes": [
            {
                "id": "2-1",
                "name": "Boleto Bancário",
                "rule": "NOT_ALLOWED",
                "documentClassId": "2",
                "labels": [
                    {
                        "id": "2-1-1",
                        "name": "Nome do Pagador",
                        "rule": "NOT_ALLOWED",
                        "documentTypeId": "2-1",
                    },
                    {
                        "id": "2-1-2",
                        "name": "Valor do Boleto",
                        "rule": "RESTRICTED",
                        "days": 365,
                        "documentTypeId": "2-1",
                    },
                ],
            },
            {
                "id": "2-2",
                "name": "Comprovante de Transferência",
                "documentClassId": "2",
                "labels": [
                    {
                        "id": "2-2-1",
                        "name": "Valor da Transação",
                        "rule": "ALLOWED",
                        "documentTypeId": "2-2",
                    },
                ],
            },
        ],
    },
    {
        "id": "3",
        "name": "Documento Fiscal",
        "rule": "ALLOWED",
        "documentTypes": [
            {
                "id": "3-1",
                "name": "Nota Fiscal Eletrônica (NF-e)",
                "rule": "ALLOWED",
                "documentClassId": "3",
                "labels": [
                    {
                        "id": "3-1-1",
                        "name": "Chave de Acesso da NF-e",
                        "rule": "ALLOWED",
                        "documentTypeId": "3-1",
                    },
                    {
                        "id": "3-1-2",
                        "name": "Nome do Consumidor",
                        "rule": "RESTRICTED",
                        "days": 120,
                        "documentTypeId": "3-1",
                    },
                ],
            },
        ],
    },
)


@lru_cache(maxsize=1)
def fixture_hierarchy() -> Hierarchy:
    return parse_hierarchy(list(FIXTURE_DOCUMENT_CLASSES))
