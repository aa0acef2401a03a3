"""Utility functions for the application"""


def number_to_words(number):
    """Convert a number to words (Indian numbering system)"""

    if number == 0:
        return "ZERO ONLY"

    if isinstance(number, float):
        number = int(round(number))

    ones = ["", "ONE", "TWO", "THREE", "FOUR", "FIVE", "SIX", "SEVEN", "EIGHT", "NINE"]
    tens = ["", "", "TWENTY", "THIRTY", "FORTY", "FIFTY", "SIXTY", "SEVENTY", "EIGHTY", "NINETY"]
    teens = ["TEN", "ELEVEN", "TWELVE", "THIRTEEN", "FOURTEEN", "FIFTEEN", "SIXTEEN", "SEVENTEEN", "EIGHTEEN", "NINETEEN"]

    def below_thousand(n):
        if n == 0:
            return ""
        if n < 10:
            return ones[n]
        if n < 20:
            return teens[n - 10]
        if n < 100:
            return tens[n // 10] + (" " + ones[n % 10] if n % 10 else "")
        return ones[n // 100] + " HUNDRED" + (" " + below_thousand(n % 100) if n % 100 else "")

    if number < 0:
        return "MINUS " + number_to_words(abs(number))

    # Indian grouping: crore (10^7), lakh (10^5), thousand (10^3), then the rest
    parts = []
    for divisor, name in ((10000000, "CRORE"), (100000, "LAKH"), (1000, "THOUSAND")):
        chunk, number = divmod(number, divisor)
        if chunk:
            parts.append(f"{number_to_words(chunk)[:-len(' ONLY')] if chunk >= 1000 else below_thousand(chunk)} {name}")
    if number:
        parts.append(below_thousand(number))

    return " ".join(parts).strip() + " ONLY"


def format_amount(value) -> str:
    """Format a rupee amount with two decimals and thousands separators."""
    return f"{float(value or 0):,.2f}"
