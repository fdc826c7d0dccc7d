"""
Listed company master record.
"""

from dataclasses import asdict, dataclass

from .parsing import safe_str


@dataclass(frozen=True)
class CompanyRecord:
    """
    One listed company as published by /listed/info.

    Replaced wholesale on refresh, never patched.
    """

    code: str
    company_name: str
    company_name_english: str = ""
    sector17_code: str = ""
    sector17_code_name: str = ""
    sector33_code: str = ""
    sector33_code_name: str = ""
    scale_category: str = ""
    market_code: str = ""
    market_code_name: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "CompanyRecord":
        """Create CompanyRecord from a snapshot row."""
        return cls(
            code=safe_str(data["code"]),
            company_name=safe_str(data.get("company_name")),
            company_name_english=safe_str(data.get("company_name_english")),
            sector17_code=safe_str(data.get("sector17_code")),
            sector17_code_name=safe_str(data.get("sector17_code_name")),
            sector33_code=safe_str(data.get("sector33_code")),
            sector33_code_name=safe_str(data.get("sector33_code_name")),
            scale_category=safe_str(data.get("scale_category")),
            market_code=safe_str(data.get("market_code")),
            market_code_name=safe_str(data.get("market_code_name")),
        )

    @classmethod
    def from_api(cls, item: dict) -> "CompanyRecord":
        """Create CompanyRecord from a J-Quants ``info`` entry."""
        return cls(
            code=safe_str(item["Code"]),
            company_name=safe_str(item.get("CompanyName")),
            company_name_english=safe_str(item.get("CompanyNameEnglish")),
            sector17_code=safe_str(item.get("Sector17Code")),
            sector17_code_name=safe_str(item.get("Sector17CodeName")),
            sector33_code=safe_str(item.get("Sector33Code")),
            sector33_code_name=safe_str(item.get("Sector33CodeName")),
            scale_category=safe_str(item.get("ScaleCategory")),
            market_code=safe_str(item.get("MarketCode")),
            market_code_name=safe_str(item.get("MarketCodeName")),
        )
