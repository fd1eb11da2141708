from fpdf import FPDF

from dimerr.models.orders import PaymentType
from dimerr.utils.invoice import build_invoice, format_quantity

# Core PDF fonts only cover latin-1
_PDF_REPLACEMENTS = {"₱": "PHP ", "—": "-", "•": "/", "×": "x"}


def _pdf_text(value) -> str:
    text = str(value)
    for src, dst in _PDF_REPLACEMENTS.items():
        text = text.replace(src, dst)
    return text.encode("latin-1", "replace").decode("latin-1")


def _money(amount) -> str:
    return f"PHP {amount:,.2f}"


class PDFInvoice(FPDF):
    def header(self):
        self.set_font('Arial', 'B', 18)
        self.set_text_color(33, 37, 41)  # Dark gray
        self.cell(0, 10, 'Dimerr - Seller tools. simplified', 0, 1, 'L')

        self.set_font('Arial', '', 10)
        self.set_text_color(108, 117, 125)  # Gray
        self.cell(0, 5, 'For PC, Avon, Natasha & more', 0, 1, 'L')
        self.ln(5)

        self.set_draw_color(200, 200, 200)
        self.line(10, 35, 200, 35)
        self.ln(10)

    def footer(self):
        self.set_y(-15)
        self.set_font('Arial', 'I', 8)
        self.set_text_color(128)
        self.cell(0, 10, f'Page {self.page_no()}', 0, 0, 'C')


def generate_invoice_pdf(order) -> bytes:
    invoice = build_invoice(order)

    pdf = PDFInvoice()
    pdf.add_page()
    pdf.set_auto_page_break(auto=True, margin=15)

    # --- INVOICE META ---
    pdf.set_font("Arial", "B", 14)
    pdf.set_text_color(0, 0, 0)
    pdf.cell(100, 10, f"SALES INVOICE {invoice['number']}", 0, 0, 'L')

    pdf.set_font("Arial", "", 10)
    pdf.set_text_color(50, 50, 50)
    pdf.cell(90, 10, _pdf_text(f"Date: {invoice['order_date']}"), 0, 1, 'R')
    pdf.cell(0, 6, _pdf_text(f"Payment: {invoice['payment_label']}"), 0, 1, 'R')
    if invoice["due_date"]:
        pdf.cell(0, 6, f"Due date: {invoice['due_date']}", 0, 1, 'R')

    pdf.ln(5)

    # --- BILL TO ---
    pdf.set_fill_color(245, 247, 250)
    pdf.rect(10, pdf.get_y(), 190, 15, 'F')

    pdf.set_xy(15, pdf.get_y() + 5)
    pdf.set_font("Arial", "B", 10)
    pdf.cell(20, 5, "Bill to:", 0, 0)
    pdf.set_font("Arial", "", 10)
    pdf.cell(100, 5, _pdf_text(invoice["customer_name"]), 0, 1)

    pdf.ln(10)

    # --- TABLE HEADER ---
    pdf.set_font("Arial", "B", 9)
    pdf.set_fill_color(33, 37, 41)
    pdf.set_text_color(255, 255, 255)

    # Columns: Product(100), Qty(20), Price(35), Total(35)
    pdf.cell(100, 8, "PRODUCT", 0, 0, 'L', True)
    pdf.cell(20, 8, "QTY", 0, 0, 'C', True)
    pdf.cell(35, 8, "PRICE", 0, 0, 'R', True)
    pdf.cell(35, 8, "TOTAL", 0, 1, 'R', True)

    # --- TABLE BODY ---
    pdf.set_text_color(0, 0, 0)
    pdf.set_font("Arial", "", 9)
    fill = False

    if not invoice["items"]:
        pdf.cell(190, 8, "No items recorded for this order.", 0, 1, 'C')

    for line in invoice["items"]:
        pdf.set_fill_color(248, 249, 250) if fill else pdf.set_fill_color(255, 255, 255)

        pdf.cell(100, 8, _pdf_text(line["label"])[:60], 0, 0, 'L', fill)
        pdf.cell(20, 8, format_quantity(line['quantity']), 0, 0, 'C', fill)
        pdf.cell(35, 8, _money(line["srp_each"]), 0, 0, 'R', fill)
        pdf.cell(35, 8, _money(line["line_total"]), 0, 1, 'R', fill)

        fill = not fill
        pdf.set_draw_color(230, 230, 230)
        pdf.line(10, pdf.get_y(), 200, pdf.get_y())

    # --- TOTALS ---
    pdf.ln(5)
    x_totals = 120

    pdf.set_x(x_totals)
    pdf.set_font("Arial", "", 10)
    pdf.cell(45, 6, "Subtotal", 0, 0, 'R')
    pdf.cell(35, 6, _money(invoice["subtotal"]), 0, 1, 'R')

    pdf.set_x(x_totals)
    pdf.cell(45, 6, "Amount paid", 0, 0, 'R')
    pdf.cell(35, 6, _money(invoice["paid_amount"]), 0, 1, 'R')

    pdf.set_x(x_totals)
    pdf.set_font("Arial", "B", 12)
    pdf.set_fill_color(240, 240, 240)
    pdf.cell(45, 10, "Balance due", 0, 0, 'R', True)
    pdf.cell(35, 10, _money(invoice["balance"]), 0, 1, 'R', True)

    # --- NOTES ---
    pdf.ln(15)
    pdf.set_font("Arial", "B", 9)
    pdf.cell(0, 5, "Notes:", 0, 1, 'L')
    pdf.set_font("Arial", "", 8)
    pdf.multi_cell(0, 4, invoice["notes"])

    if order.payment_type == PaymentType.CREDIT and invoice["balance"] > 0:
        pdf.ln(3)
        pdf.multi_cell(0, 4, "Please settle the remaining balance on or before the due date.")

    return bytes(pdf.output())
