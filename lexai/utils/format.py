from datetime import date

MONTHS_PT = [
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
]


def _brl(value: float, decimals: int) -> str:
    formatted = f"{abs(value):,.{decimals}f}"
    # Swap separators to the Brazilian convention: 1.234,56
    formatted = formatted.replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if value < 0 else ""
    return f"{sign}R$ {formatted}"


def format_currency(value: float) -> str:
    return _brl(value or 0, 2)


def format_currency_short(value: float) -> str:
    return _brl(value or 0, 0)


def format_date(value) -> str:
    if not value:
        return ""
    return value.strftime("%d/%m/%Y")


def format_payment_month(month: str) -> str:
    """'2026-03' -> 'MAR. 2026'"""
    if not month:
        return ""
    try:
        year, mon = month.split("-")
        index = int(mon) - 1
    except ValueError:
        return month
    if not 0 <= index < 12:
        return month
    return f"{MONTHS_PT[index][:3].upper()}. {year}"


def long_date(day: date) -> str:
    return f"{day.day} de {MONTHS_PT[day.month - 1]} de {day.year}"


def get_initials(name: str) -> str:
    if not name:
        return ""
    return "".join(part[0] for part in name.split(" ") if part)[:3].upper()
