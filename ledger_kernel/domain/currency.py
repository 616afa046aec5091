"""Currency -- ISO 4217 registry and minor-unit precision."""

from dataclasses import dataclass
from typing import ClassVar

from ledger_kernel.exceptions import InvalidCurrencyError


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single ISO 4217 currency."""

    code: str
    decimal_places: int
    name: str

    @property
    def minor_unit_denominator(self) -> int:
        """Denominator of one minor unit: 100 for cents, 1 for zero-decimal currencies."""
        return 10**self.decimal_places


def _table(decimal_places: int, entries: dict[str, str]) -> dict[str, CurrencyInfo]:
    return {
        code: CurrencyInfo(code, decimal_places, name)
        for code, name in entries.items()
    }


class CurrencyRegistry:
    """Registry of ISO 4217 currencies keyed by code, with their minor-unit counts."""

    # Source: https://www.iso.org/iso-4217-currency-codes.html
    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        **_table(0, {
            "BIF": "Burundian Franc",
            "CLP": "Chilean Peso",
            "DJF": "Djiboutian Franc",
            "GNF": "Guinean Franc",
            "ISK": "Icelandic Krona",
            "JPY": "Japanese Yen",
            "KMF": "Comorian Franc",
            "KRW": "South Korean Won",
            "PYG": "Paraguayan Guarani",
            "RWF": "Rwandan Franc",
            "UGX": "Ugandan Shilling",
            "UYI": "Uruguay Peso en Unidades Indexadas",
            "VND": "Vietnamese Dong",
            "VUV": "Vanuatu Vatu",
            "XAF": "Central African CFA Franc",
            "XOF": "West African CFA Franc",
            "XPF": "CFP Franc",
            # Metals and special codes carry no minor unit
            "XAG": "Silver (troy ounce)",
            "XAU": "Gold (troy ounce)",
            "XDR": "Special Drawing Rights",
            "XPD": "Palladium (troy ounce)",
            "XPT": "Platinum (troy ounce)",
            "XTS": "Testing Code",
            "XXX": "No currency",
        }),
        **_table(2, {
            "AED": "UAE Dirham",
            "AFN": "Afghan Afghani",
            "ALL": "Albanian Lek",
            "AMD": "Armenian Dram",
            "AOA": "Angolan Kwanza",
            "ARS": "Argentine Peso",
            "AUD": "Australian Dollar",
            "AWG": "Aruban Florin",
            "AZN": "Azerbaijan Manat",
            "BAM": "Convertible Mark",
            "BBD": "Barbadian Dollar",
            "BDT": "Bangladeshi Taka",
            "BGN": "Bulgarian Lev",
            "BMD": "Bermudian Dollar",
            "BND": "Brunei Dollar",
            "BOB": "Bolivian Boliviano",
            "BRL": "Brazilian Real",
            "BSD": "Bahamian Dollar",
            "BTN": "Bhutanese Ngultrum",
            "BWP": "Botswana Pula",
            "BYN": "Belarusian Ruble",
            "BZD": "Belize Dollar",
            "CAD": "Canadian Dollar",
            "CDF": "Congolese Franc",
            "CHF": "Swiss Franc",
            "CNY": "Chinese Yuan",
            "COP": "Colombian Peso",
            "CRC": "Costa Rican Colon",
            "CUP": "Cuban Peso",
            "CVE": "Cape Verdean Escudo",
            "CZK": "Czech Koruna",
            "DKK": "Danish Krone",
            "DOP": "Dominican Peso",
            "DZD": "Algerian Dinar",
            "EGP": "Egyptian Pound",
            "ERN": "Eritrean Nakfa",
            "ETB": "Ethiopian Birr",
            "EUR": "Euro",
            "FJD": "Fijian Dollar",
            "FKP": "Falkland Islands Pound",
            "GBP": "Pound Sterling",
            "GEL": "Georgian Lari",
            "GHS": "Ghanaian Cedi",
            "GIP": "Gibraltar Pound",
            "GMD": "Gambian Dalasi",
            "GTQ": "Guatemalan Quetzal",
            "GYD": "Guyanese Dollar",
            "HKD": "Hong Kong Dollar",
            "HNL": "Honduran Lempira",
            "HTG": "Haitian Gourde",
            "HUF": "Hungarian Forint",
            "IDR": "Indonesian Rupiah",
            "ILS": "Israeli New Shekel",
            "INR": "Indian Rupee",
            "IRR": "Iranian Rial",
            "JMD": "Jamaican Dollar",
            "KES": "Kenyan Shilling",
            "KGS": "Kyrgyzstani Som",
            "KHR": "Cambodian Riel",
            "KPW": "North Korean Won",
            "KYD": "Cayman Islands Dollar",
            "KZT": "Kazakhstani Tenge",
            "LAK": "Lao Kip",
            "LBP": "Lebanese Pound",
            "LKR": "Sri Lankan Rupee",
            "LRD": "Liberian Dollar",
            "LSL": "Lesotho Loti",
            "MAD": "Moroccan Dirham",
            "MDL": "Moldovan Leu",
            "MGA": "Malagasy Ariary",
            "MKD": "Macedonian Denar",
            "MMK": "Myanmar Kyat",
            "MNT": "Mongolian Tugrik",
            "MOP": "Macanese Pataca",
            "MRU": "Mauritanian Ouguiya",
            "MUR": "Mauritian Rupee",
            "MVR": "Maldivian Rufiyaa",
            "MWK": "Malawian Kwacha",
            "MXN": "Mexican Peso",
            "MYR": "Malaysian Ringgit",
            "MZN": "Mozambican Metical",
            "NAD": "Namibian Dollar",
            "NGN": "Nigerian Naira",
            "NIO": "Nicaraguan Cordoba",
            "NOK": "Norwegian Krone",
            "NPR": "Nepalese Rupee",
            "NZD": "New Zealand Dollar",
            "PAB": "Panamanian Balboa",
            "PEN": "Peruvian Sol",
            "PGK": "Papua New Guinean Kina",
            "PHP": "Philippine Peso",
            "PKR": "Pakistani Rupee",
            "PLN": "Polish Zloty",
            "QAR": "Qatari Riyal",
            "RON": "Romanian Leu",
            "RSD": "Serbian Dinar",
            "RUB": "Russian Ruble",
            "SAR": "Saudi Riyal",
            "SBD": "Solomon Islands Dollar",
            "SCR": "Seychellois Rupee",
            "SDG": "Sudanese Pound",
            "SEK": "Swedish Krona",
            "SGD": "Singapore Dollar",
            "SHP": "Saint Helena Pound",
            "SLE": "Sierra Leonean Leone",
            "SOS": "Somali Shilling",
            "SRD": "Surinamese Dollar",
            "SSP": "South Sudanese Pound",
            "STN": "Sao Tome and Principe Dobra",
            "SYP": "Syrian Pound",
            "SZL": "Swazi Lilangeni",
            "THB": "Thai Baht",
            "TJS": "Tajikistani Somoni",
            "TMT": "Turkmenistan Manat",
            "TOP": "Tongan Paanga",
            "TRY": "Turkish Lira",
            "TTD": "Trinidad and Tobago Dollar",
            "TWD": "New Taiwan Dollar",
            "TZS": "Tanzanian Shilling",
            "UAH": "Ukrainian Hryvnia",
            "USD": "US Dollar",
            "UYU": "Uruguayan Peso",
            "UZS": "Uzbekistani Som",
            "VES": "Venezuelan Bolivar Soberano",
            "WST": "Samoan Tala",
            "XCD": "East Caribbean Dollar",
            "YER": "Yemeni Rial",
            "ZAR": "South African Rand",
            "ZMW": "Zambian Kwacha",
            "ZWL": "Zimbabwean Dollar",
        }),
        **_table(3, {
            "BHD": "Bahraini Dinar",
            "IQD": "Iraqi Dinar",
            "JOD": "Jordanian Dinar",
            "KWD": "Kuwaiti Dinar",
            "LYD": "Libyan Dinar",
            "OMR": "Omani Rial",
            "TND": "Tunisian Dinar",
        }),
        **_table(4, {
            "CLF": "Chilean Unidad de Fomento",
            "UYW": "Unidad Previsional",
        }),
    }

    @classmethod
    def is_valid(cls, code: str) -> bool:
        """Check if a currency code is a known ISO 4217 code."""
        if not code or not isinstance(code, str):
            return False
        return code.upper().strip() in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        """Get currency information by code."""
        if not code or not isinstance(code, str):
            return None
        return cls._CURRENCIES.get(code.upper().strip())

    @classmethod
    def get_decimal_places(cls, code: str) -> int:
        """Number of minor-unit digits of a known currency."""
        return cls.require(code).decimal_places

    @classmethod
    def require(cls, code: str) -> CurrencyInfo:
        """Get currency information, raising InvalidCurrencyError for unknown codes."""
        info = cls.get_info(code)
        if info is None:
            raise InvalidCurrencyError(str(code))
        return info

    @classmethod
    def validate(cls, code: str) -> str:
        """Validate and normalize a currency code."""
        return cls.require(code).code

    @classmethod
    def all_codes(cls) -> frozenset[str]:
        """Get all valid currency codes."""
        return frozenset(cls._CURRENCIES)
