"""Currency -- ISO 4217 minor units for estate rounding."""

from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single ISO 4217 currency."""

    code: str
    decimal_places: int
    name: str

    @property
    def minor_unit(self) -> Decimal:
        """Smallest representable amount, e.g. 0.01 for two decimal places."""
        return Decimal(1).scaleb(-self.decimal_places)


class CurrencyRegistry:
    """Registry of ISO 4217 currencies an estate may be denominated in."""

    DEFAULT_CODE: ClassVar[str] = "SAR"

    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        # Gulf and Middle East
        "SAR": CurrencyInfo("SAR", 2, "Saudi Riyal"),
        "AED": CurrencyInfo("AED", 2, "UAE Dirham"),
        "QAR": CurrencyInfo("QAR", 2, "Qatari Riyal"),
        "EGP": CurrencyInfo("EGP", 2, "Egyptian Pound"),
        "SYP": CurrencyInfo("SYP", 2, "Syrian Pound"),
        "LBP": CurrencyInfo("LBP", 2, "Lebanese Pound"),
        "YER": CurrencyInfo("YER", 2, "Yemeni Rial"),
        "IRR": CurrencyInfo("IRR", 2, "Iranian Rial"),
        "TRY": CurrencyInfo("TRY", 2, "Turkish Lira"),
        # Three decimal currencies
        "BHD": CurrencyInfo("BHD", 3, "Bahraini Dinar"),
        "IQD": CurrencyInfo("IQD", 3, "Iraqi Dinar"),
        "JOD": CurrencyInfo("JOD", 3, "Jordanian Dinar"),
        "KWD": CurrencyInfo("KWD", 3, "Kuwaiti Dinar"),
        "LYD": CurrencyInfo("LYD", 3, "Libyan Dinar"),
        "OMR": CurrencyInfo("OMR", 3, "Omani Rial"),
        "TND": CurrencyInfo("TND", 3, "Tunisian Dinar"),
        # North Africa
        "MAD": CurrencyInfo("MAD", 2, "Moroccan Dirham"),
        "DZD": CurrencyInfo("DZD", 2, "Algerian Dinar"),
        "SDG": CurrencyInfo("SDG", 2, "Sudanese Pound"),
        # South and Southeast Asia
        "PKR": CurrencyInfo("PKR", 2, "Pakistani Rupee"),
        "INR": CurrencyInfo("INR", 2, "Indian Rupee"),
        "BDT": CurrencyInfo("BDT", 2, "Bangladeshi Taka"),
        "AFN": CurrencyInfo("AFN", 2, "Afghan Afghani"),
        "MYR": CurrencyInfo("MYR", 2, "Malaysian Ringgit"),
        "IDR": CurrencyInfo("IDR", 2, "Indonesian Rupiah"),
        "BND": CurrencyInfo("BND", 2, "Brunei Dollar"),
        # Zero decimal currencies
        "JPY": CurrencyInfo("JPY", 0, "Japanese Yen"),
        "KRW": CurrencyInfo("KRW", 0, "South Korean Won"),
        "XOF": CurrencyInfo("XOF", 0, "West African CFA Franc"),
        "XAF": CurrencyInfo("XAF", 0, "Central African CFA Franc"),
        "GNF": CurrencyInfo("GNF", 0, "Guinean Franc"),
        "DJF": CurrencyInfo("DJF", 0, "Djiboutian Franc"),
        "KMF": CurrencyInfo("KMF", 0, "Comorian Franc"),
        # Major currencies
        "USD": CurrencyInfo("USD", 2, "US Dollar"),
        "EUR": CurrencyInfo("EUR", 2, "Euro"),
        "GBP": CurrencyInfo("GBP", 2, "Pound Sterling"),
        "CHF": CurrencyInfo("CHF", 2, "Swiss Franc"),
        "CAD": CurrencyInfo("CAD", 2, "Canadian Dollar"),
        "AUD": CurrencyInfo("AUD", 2, "Australian Dollar"),
    }

    @classmethod
    def is_valid(cls, code: str) -> bool:
        return code.upper().strip() in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        return cls._CURRENCIES.get(code.upper().strip())

    @classmethod
    def get_minor_unit(cls, code: str) -> Decimal:
        """One unit of the currency's smallest denomination."""
        info = cls.get_info(code)
        if info is None:
            raise ValueError(f"Invalid ISO 4217 currency code: {code}")
        return info.minor_unit
