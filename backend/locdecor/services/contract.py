"""
Contrato de locação
Projeto: LocDecor (Gestão de Locação de Decorações)

Monta o contrato de locação de um pedido. O mesmo ContractDocument
alimenta a versão em texto puro e o template HTML usado no PDF.
A geração é somente leitura: nada no pedido é alterado.
"""

import datetime
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from locdecor.core.config import Settings

CONTRACT_TITLE = "CONTRATO DE LOCAÇÃO DE MATERIAIS"
ACCEPTANCE = "Estou ciente do contrato que li e aceito."


def format_money(value: Optional[Decimal]) -> str:
    """Valor com duas casas decimais (ex.: 130.00)."""
    return f"{Decimal(value or 0):.2f}"


def format_cpf(document: Optional[str]) -> str:
    """CPF no formato 000.000.000-00; outros valores são devolvidos como vieram."""
    if not document or len(document) != 11 or not document.isdigit():
        return document or ""
    return f"{document[:3]}.{document[3:6]}.{document[6:9]}-{document[9:]}"


def format_date(value: datetime.date) -> str:
    return value.strftime("%d/%m/%Y")


def format_time(value: datetime.time) -> str:
    return value.strftime("%H:%M")


@dataclass
class DamageValue:
    """Valor de reposição de um item locado (cláusula 5)."""
    name: str
    acquisition_price: Optional[Decimal]

    def __str__(self) -> str:
        price = format_money(self.acquisition_price) if self.acquisition_price is not None else "N/A"
        return f"{self.name}: R$ {price}"


@dataclass
class ContractDocument:
    """Campos calculados do contrato, prontos para texto ou HTML."""
    order_number: str
    lessor_name: str
    lessor_document: str
    lessor_address: str
    lessee_name: str
    lessee_document: str
    lessee_address: str
    lessee_phone: str
    pickup: str
    return_: str
    total_amount: str
    payment_terms: str
    clauses: list[str] = field(default_factory=list)
    city: str = ""
    signed_on: str = ""

    @property
    def file_name(self) -> str:
        slug = "-".join(self.lessee_name.lower().split())
        return f"contrato-{slug}.pdf"


def _clauses(settings: Settings, damages: list[DamageValue]) -> list[str]:
    fine = format_money(settings.late_return_fine).replace(".", ",")
    damage_list = " / ".join(str(d) for d in damages)
    return [
        "Pelo presente contrato de locação, é dever do locador oferecer o serviço de "
        "locação ao locatário, respeitando dia e horário marcados;",

        "É dever do locatário para locação durante a semana, respeitar o período de 24h "
        "de locação e para os finais de semana fica combinado que o locatário deverá "
        "retirar o kit na sexta-feira das 10h às 18h e realizar a devolução na "
        "segunda-feira das 10h às 18h. O DESCUMPRIMENTO DA DATA COMBINADA PARA A "
        "DEVOLUÇÃO ACARRETARÁ EM MULTA NO MESMO VALOR DA LOCAÇÃO "
        f"(R$ {fine}), exceto se houver uma justificativa anterior;",

        "O locatário deve ficar ciente de que, se não devolver o kit, será denunciado "
        f"por furto pela empresa {settings.company_name}. Isso se dará através de uma "
        "ação pelo advogado da empresa, que usará o número do documento do locador, "
        "citado acima;",

        "Durante o período de locação, fica o locatário responsável por qualquer dano "
        "causado aos objetos de decoração, estando portanto, ciente que deverá pagar "
        "taxas correspondentes aos danos e caso o material seja entregue sujo será cobrado;",

        "MATERIAL LOCADO ENTREGUES COM AVARIAS/MANCHADOS OU QUEBRADOS SERÁ COBRADO O "
        f"VALOR TOTAL NA ENTREGA DO MESMO:\n{damage_list}",

        "O locatário deve estar ciente de que não pode utilizar nenhum tipo de cola nas "
        "capas de cilindros/painel ou em qualquer outro item do kit locado. Deve-se tomar "
        "cuidado com velas nas capas, pois pode queimá-las e estragá-las. Não colocar "
        "copos ou latas de bebidas em cima da mesa de cilindros pois pode molhar e "
        "estragar o MDF. Nossas boleiras e bandejas são de acrílico/plástico, se cair "
        "podem quebrar;",

        "Os móveis e itens decorativos devem ficar em local coberto e seco;",

        "Não é permitido retirar ou devolver o kit por aplicativo de entrega (Uber, 99, "
        "Lalamove), exceto se o cliente estiver presente;",

        "Caso haja desistência o valor não será devolvido. Se avisado previamente, o "
        "valor pago ficará como crédito para uma próxima locação, sendo que para troca "
        "de data verificaremos se a data haverá disponibilidade.",

        "DEPOIS DE FECHADO O CONTRATO NÃO PODERÁ ALTERAR O TEMA ESCOLHIDO.",
    ]


def build_contract(order, settings: Settings, today: datetime.date) -> ContractDocument:
    """
    Monta o contrato de um pedido.

    Args:
        order: Pedido com client e items (cada linha com o item do acervo) carregados
        settings: Configuração com os dados do locador
        today: Data de assinatura

    Returns:
        ContractDocument
    """
    client = order.client
    address = f"{client.address or ''}, {client.address_number or ''} - {client.neighborhood or ''}"
    damages = [
        DamageValue(name=line.item.name, acquisition_price=line.item.acquisition_price)
        for line in order.items
    ]

    return ContractDocument(
        order_number=order.order_number,
        lessor_name=settings.lessor_name,
        lessor_document=format_cpf(settings.lessor_document),
        lessor_address=settings.lessor_address,
        lessee_name=client.name,
        lessee_document=format_cpf(client.document),
        lessee_address=address,
        lessee_phone=client.phone or "",
        pickup=f"{format_date(order.pickup_date)} às {format_time(order.pickup_time)}",
        return_=f"{format_date(order.return_date)} às {format_time(order.return_time)}",
        total_amount=format_money(order.total_amount),
        payment_terms=settings.contract_payment_terms,
        clauses=_clauses(settings, damages),
        city=settings.contract_city,
        signed_on=format_date(today),
    )


def render_contract_text(doc: ContractDocument) -> str:
    """Versão em texto puro do contrato."""
    numbered = "\n\n".join(f"{i}º {clause}" for i, clause in enumerate(doc.clauses, start=1))
    return f"""{CONTRACT_TITLE}

LOCADOR:
{doc.lessor_name}
CPF: {doc.lessor_document}
End: {doc.lessor_address}

LOCATÁRIO:
{doc.lessee_name}
CPF: {doc.lessee_document}
Endereço: {doc.lessee_address}
Contato: {doc.lessee_phone}

Data de Retirada: {doc.pickup}
Data de Devolução: {doc.return_}
Valor total da locação: R$ {doc.total_amount}
Forma de pagamento: {doc.payment_terms}

CLÁUSULAS

{numbered}

{ACCEPTANCE}

{doc.city}, {doc.signed_on}

_______________________          _______________________
        LOCADOR                        LOCATÁRIO
"""


__all__ = [
    "CONTRACT_TITLE",
    "ContractDocument",
    "DamageValue",
    "build_contract",
    "render_contract_text",
    "format_cpf",
    "format_money",
]
