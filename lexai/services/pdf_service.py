"""
PDF generation for client documents and the financial report.

Layout uses fixed A4 constants: a dark header band with a gold rule, 25 mm
margins for client documents and 15 mm for the report.
"""
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas
from datetime import date
from typing import Iterable, Optional, Tuple
import base64
import io
import logging
import re
import unicodedata

from lexai.models import ClientOrigin
from lexai.services import ledger_service
from lexai.utils.format import format_currency, format_date, format_payment_month, long_date

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
HEADER_DARK = (15 / 255, 23 / 255, 42 / 255)
HEADER_GOLD = (245 / 255, 158 / 255, 11 / 255)
TEXT_COLOR = (51 / 255, 65 / 255, 85 / 255)
LABEL_COLOR = (180 / 255, 83 / 255, 9 / 255)
BODY_FONT_SIZE = 11
LINE_HEIGHT = BODY_FONT_SIZE * 1.5

DOCUMENT_KINDS = {
    "procuration": ("PROCURAÇÃO", "PROCURACAO"),
    "contract": ("CONTRATO DE PRESTAÇÃO DE SERVIÇOS JURÍDICOS", "CONTRATO_HONORARIOS"),
    "declaration": ("DECLARAÇÃO DE HIPOSSUFICIÊNCIA", "DECLARACAO"),
}

POWERS_TEXT = (
    "Pelo presente instrumento, o outorgante nomeia e constitui o outorgado seu procurador, a quem confere "
    "os amplos poderes contidos na cláusula 'ad judicia et extra', para o foro em geral, em qualquer Instância, "
    "Tribunal ou Juízo, bem como os poderes especiais para transigir, desistir, firmar compromissos, receber e "
    "dar quitação, reconhecer procedência de pedido, renunciar a direito sobre o qual se funda a ação, e praticar "
    "todos os demais atos necessários ao bom e fiel desempenho deste mandato, inclusive substabelecer, com ou sem "
    "reserva de poderes."
)


class UnknownDocumentKind(ValueError):
    pass


def _logo_reader(logo: Optional[str]) -> Optional[ImageReader]:
    if not logo or not logo.startswith("data:image"):
        return None
    try:
        encoded = logo.split(",", 1)[1]
        reader = ImageReader(io.BytesIO(base64.b64decode(encoded)))
        reader.getSize()
        return reader
    except Exception as e:
        logger.warning(f"Could not decode logo, falling back to text header: {e}")
        return None


def _draw_header(pdf: canvas.Canvas, settings, header_height: float, margin: float,
                 max_logo: Tuple[float, float], fallback_title: str) -> None:
    pdf.setFillColorRGB(*HEADER_DARK)
    pdf.rect(0, PAGE_HEIGHT - header_height, PAGE_WIDTH, header_height, stroke=0, fill=1)
    pdf.setFillColorRGB(*HEADER_GOLD)
    pdf.rect(0, PAGE_HEIGHT - header_height, PAGE_WIDTH, 1 * mm, stroke=0, fill=1)

    logo = _logo_reader(getattr(settings, "logo", None))
    if logo is not None:
        width, height = logo.getSize()
        ratio = width / height
        max_w, max_h = max_logo
        logo_w = max_w
        logo_h = logo_w / ratio
        if logo_h > max_h:
            logo_h = max_h
            logo_w = logo_h * ratio
        top = 5 * mm + (max_h - logo_h) / 2
        pdf.drawImage(logo, margin, PAGE_HEIGHT - top - logo_h, logo_w, logo_h, mask="auto")
    else:
        pdf.setFillColorRGB(1, 1, 1)
        pdf.setFont("Helvetica-Bold", 20)
        pdf.drawString(margin, PAGE_HEIGHT - header_height + 15 * mm, (getattr(settings, "name", "") or fallback_title).upper())


def _qualification(client) -> str:
    rg_body = f" ({client.rg_issuing_body})" if client.rg_issuing_body else ""
    return (
        f"{client.name.upper()}, {client.nationality or 'brasileiro(a)'}, {client.marital_status or 'solteiro(a)'}, "
        f"{client.profession or 'profissional'}, portador(a) do RG nº {client.rg or '...'}{rg_body} e inscrito(a) "
        f"no CPF sob o nº {client.cpf_cnpj}, endereço eletrônico {client.email or 'não informado'}, residente e "
        f"domiciliado(a) na {client.address or '...'}, nº {client.address_number or ''}, {client.neighborhood or ''}, "
        f"na cidade de {client.city or '...'} - {client.state or '...'}, CEP: {client.zip_code or '...'}"
    )


class _Writer:
    """Keeps the vertical cursor and breaks pages while writing wrapped text."""

    def __init__(self, pdf: canvas.Canvas, margin: float, top: float):
        self.pdf = pdf
        self.margin = margin
        self.width = PAGE_WIDTH - 2 * margin
        self.y = top

    def ensure(self, needed: float) -> None:
        if self.y - needed < 25 * mm:
            self.pdf.showPage()
            self.y = PAGE_HEIGHT - 30 * mm

    def section(self, label: Optional[str], content: str) -> None:
        if label:
            self.ensure(12 * mm)
            self.pdf.setFillColorRGB(248 / 255, 250 / 255, 252 / 255)
            self.pdf.rect(self.margin - 1 * mm, self.y - 2 * mm, self.width + 2 * mm, 6 * mm, stroke=0, fill=1)
            self.pdf.setFillColorRGB(*LABEL_COLOR)
            self.pdf.setFont("Helvetica-Bold", 9)
            self.pdf.drawString(self.margin, self.y, label.upper())
            self.y -= 10 * mm

        self.pdf.setFont("Helvetica", BODY_FONT_SIZE)
        self.pdf.setFillColorRGB(*TEXT_COLOR)
        for paragraph in content.split("\n"):
            for line in simpleSplit(paragraph, "Helvetica", BODY_FONT_SIZE, self.width) or [""]:
                self.ensure(LINE_HEIGHT)
                self.pdf.drawString(self.margin, self.y, line)
                self.y -= LINE_HEIGHT
        self.y -= 10 * mm


def _file_label(name: str) -> str:
    ascii_name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    return re.sub(r"\s", "_", ascii_name)


def generate_client_pdf(kind: str, client, settings, today: Optional[date] = None) -> Tuple[bytes, str]:
    """Render a procuration, services contract or income declaration for a client."""
    if kind not in DOCUMENT_KINDS:
        raise UnknownDocumentKind(kind)

    today = today or date.today()
    title, file_label = DOCUMENT_KINDS[kind]
    margin = 25 * mm
    header_height = 35 * mm

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle(title)
    _draw_header(pdf, settings, header_height, margin, (70 * mm, 22 * mm), "ADVOGADO")

    pdf.setFillColorRGB(1, 1, 1)
    pdf.setFont("Helvetica", 7)
    pdf.drawRightString(PAGE_WIDTH - margin, PAGE_HEIGHT - header_height + 18 * mm, (settings.address or "").upper())
    pdf.drawRightString(
        PAGE_WIDTH - margin, PAGE_HEIGHT - header_height + 13 * mm,
        f"OAB: {settings.oab or '...'} | {settings.email or '...'}"
    )

    y = PAGE_HEIGHT - header_height - 25 * mm
    pdf.setFillColorRGB(30 / 255, 41 / 255, 59 / 255)
    pdf.setFont("Helvetica-Bold", 16)
    pdf.drawCentredString(PAGE_WIDTH / 2, y, title)
    y -= 3 * mm
    pdf.setStrokeColorRGB(*HEADER_GOLD)
    pdf.setLineWidth(0.8 * mm)
    pdf.line(PAGE_WIDTH / 2 - 20 * mm, y, PAGE_WIDTH / 2 + 20 * mm, y)

    writer = _Writer(pdf, margin, y - 20 * mm)
    lawyer = (settings.name or "").upper()

    if kind == "procuration":
        writer.section("Outorgante", f"{_qualification(client)}.")
        writer.section(
            "Outorgado",
            f"{lawyer}, brasileiro, advogado devidamente inscrito nos quadros da Ordem dos Advogados do Brasil, "
            f"sob o nº {settings.oab}, e inscrito no CPF sob o nº {settings.cpf}, com escritório profissional "
            f"localizado à {settings.address}."
        )
        writer.section("Poderes", POWERS_TEXT)
    elif kind == "contract":
        fin = ledger_service.financials_of(client)
        total = format_currency(fin.total_agreed if fin else 0)
        entry = format_currency(fin.initial_payment or 0 if fin else 0)
        writer.section("Contratante", f"{_qualification(client)}, doravante denominado CONTRATANTE.")
        writer.section(
            "Contratado",
            f"{lawyer}, OAB {settings.oab}, com endereço profissional à {settings.address}, "
            "doravante denominado CONTRATADO."
        )
        writer.section(
            "Dos Honorários",
            f"Pelos serviços ora pactuados, o CONTRATANTE pagará ao CONTRATADO o valor total de {total}, "
            f"sendo {entry} pago a título de entrada/sinal no ato da assinatura."
        )
    else:
        income = format_currency(client.monthly_income or 0)
        writer.section(None, (
            f"{_qualification(client)}, declara, sob as penas da lei, e nos termos do artigo 1º da Lei 7.115 de "
            "29.08.1983 e artigos 2º e 4º da Lei 1.060 de 05.01.1950 que é pessoa pobre no sentido legal do termo, "
            "não tendo condições de prover as despesas do processo sem privar-se dos recursos indispensáveis ao "
            f"próprio sustento e de sua família, estando percebendo a quantia de {income} mensais.\n"
            "Responsabiliza-se o(a) infra-assinado(a) pelo teor da presente declaração, ciente de que poderá se "
            "sujeitar as sanções civis e criminais no caso de não ser a presente declaração verdadeira.\n"
            "Para maior clareza e os devidos fins de Direito, firma-se a presente Declaração."
        ))

    # Signature block
    writer.y -= 20 * mm
    writer.ensure(60 * mm)
    pdf.setFont("Helvetica", BODY_FONT_SIZE)
    pdf.setFillColorRGB(*TEXT_COLOR)
    pdf.drawCentredString(PAGE_WIDTH / 2, writer.y, f"{client.city or 'Sertãozinho'}, {long_date(today)}.")
    writer.y -= 35 * mm
    pdf.setStrokeColorRGB(0.78, 0.78, 0.78)
    pdf.setLineWidth(0.2 * mm)
    pdf.line(PAGE_WIDTH / 2 - 45 * mm, writer.y, PAGE_WIDTH / 2 + 45 * mm, writer.y)
    writer.y -= 6 * mm
    pdf.setFont("Helvetica-Bold", 10)
    pdf.drawCentredString(PAGE_WIDTH / 2, writer.y, "REQUERENTE")
    writer.y -= 5 * mm
    pdf.setFont("Helvetica", 9)
    pdf.drawCentredString(PAGE_WIDTH / 2, writer.y, client.name.upper())

    pdf.showPage()
    pdf.save()
    return buffer.getvalue(), f"{file_label}_{_file_label(client.name)}.pdf"


def generate_financial_report(clients: Iterable, settings, today: Optional[date] = None) -> Tuple[bytes, str]:
    """Render totals and every ledger line of the given clients, grouped per client."""
    today = today or date.today()
    margin = 15 * mm
    header_height = 30 * mm

    items = ledger_service.expand_ledger(clients, today)
    totals = ledger_service.aggregate(items)
    groups = ledger_service.group_by_client(items)

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle("Relatório Financeiro")
    _draw_header(pdf, settings, header_height, margin, (50 * mm, 18 * mm), "RELATÓRIO JURÍDICO")

    pdf.setFillColorRGB(1, 1, 1)
    pdf.setFont("Helvetica", 8)
    pdf.drawRightString(
        PAGE_WIDTH - margin, PAGE_HEIGHT - 20 * mm,
        f"RELATÓRIO FINANCEIRO GERADO EM {format_date(today)}"
    )

    y = PAGE_HEIGHT - header_height - 15 * mm
    pdf.setFillColorRGB(*TEXT_COLOR)
    pdf.setFont("Helvetica-Bold", 10)
    summary = [
        ("RECEITA CONFIRMADA", totals.received),
        ("PARTICULAR PENDENTE", totals.receivable),
        ("DEFENSORIA (ESTIMADO)", totals.pending_by_institution),
    ]
    column = (PAGE_WIDTH - 2 * margin) / len(summary)
    for i, (label, value) in enumerate(summary):
        x = margin + i * column
        pdf.setFont("Helvetica-Bold", 8)
        pdf.drawString(x, y, label)
        pdf.setFont("Helvetica-Bold", 13)
        pdf.drawString(x, y - 7 * mm, format_currency(value))
    y -= 20 * mm

    for group in groups:
        if y < 40 * mm:
            pdf.showPage()
            y = PAGE_HEIGHT - 25 * mm
        pdf.setFillColorRGB(*LABEL_COLOR)
        pdf.setFont("Helvetica-Bold", 9)
        origin = group.items[0].origin
        tag = "PARTICULAR" if origin == ClientOrigin.PRIVATE else "DEFENSORIA"
        pdf.drawString(margin, y, f"{group.client_name.upper()}  ·  {tag}")
        y -= 6 * mm

        pdf.setFillColorRGB(*TEXT_COLOR)
        pdf.setFont("Helvetica", 8)
        for item in group.items:
            if y < 25 * mm:
                pdf.showPage()
                y = PAGE_HEIGHT - 25 * mm
                pdf.setFont("Helvetica", 8)
            pdf.drawString(margin, y, item.label)
            when = format_payment_month(item.payment_month) if item.payment_month else format_date(item.item_date)
            pdf.drawString(margin + 70 * mm, y, when or "A definir")
            pdf.drawString(margin + 100 * mm, y, item.status.upper())
            pdf.drawRightString(PAGE_WIDTH - margin, y, format_currency(item.value))
            y -= 5 * mm
        y -= 4 * mm

    pdf.showPage()
    pdf.save()
    stamp = int(today.strftime("%Y%m%d"))
    return buffer.getvalue(), f"Relatorio_Financeiro_{stamp}.pdf"
