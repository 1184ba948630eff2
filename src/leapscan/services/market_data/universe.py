"""Ticker universes and sector lookup for screening."""

from typing import Dict, List

DEFAULT_UNIVERSE = (
    ("AAPL", "Apple Inc."),
    ("MSFT", "Microsoft Corporation"),
    ("GOOGL", "Alphabet Inc."),
    ("AMZN", "Amazon.com Inc."),
    ("NVDA", "NVIDIA Corporation"),
    ("TSLA", "Tesla Inc."),
    ("META", "Meta Platforms Inc."),
    ("NFLX", "Netflix Inc."),
    ("AMD", "Advanced Micro Devices"),
    ("CRM", "Salesforce Inc."),
    ("ADBE", "Adobe Inc."),
    ("PYPL", "PayPal Holdings"),
    ("INTC", "Intel Corporation"),
    ("CSCO", "Cisco Systems"),
    ("ORCL", "Oracle Corporation"),
    ("IBM", "IBM"),
    ("UBER", "Uber Technologies"),
    ("SNOW", "Snowflake Inc."),
    ("ZM", "Zoom Video Communications"),
    ("DOCU", "DocuSign Inc."),
    ("SHOP", "Shopify Inc."),
    ("SQ", "Block Inc."),
    ("ROKU", "Roku Inc."),
    ("TWLO", "Twilio Inc."),
    ("OKTA", "Okta Inc."),
    ("CRWD", "CrowdStrike Holdings"),
    ("ZS", "Zscaler Inc."),
    ("DDOG", "Datadog Inc."),
    ("NET", "Cloudflare Inc."),
    ("FSLY", "Fastly Inc."),
    ("JPM", "JPMorgan Chase"),
    ("BAC", "Bank of America"),
    ("WFC", "Wells Fargo"),
    ("GS", "Goldman Sachs"),
    ("MS", "Morgan Stanley"),
    ("C", "Citigroup Inc."),
    ("AXP", "American Express"),
    ("V", "Visa Inc."),
    ("MA", "Mastercard Inc."),
    ("COST", "Costco Wholesale"),
    ("WMT", "Walmart Inc."),
    ("HD", "Home Depot"),
    ("LOW", "Lowe's Companies"),
    ("TGT", "Target Corporation"),
    ("SBUX", "Starbucks Corporation"),
    ("MCD", "McDonald's Corporation"),
    ("NKE", "Nike Inc."),
    ("DIS", "Walt Disney Company"),
    ("BA", "Boeing Company"),
    ("CAT", "Caterpillar Inc."),
)

_SP500_RAW = (
    # Large cap technology
    "AAPL MSFT GOOGL GOOG AMZN NVDA TSLA META NFLX ADBE "
    "CRM ORCL AVGO CSCO INTC AMD NOW INTU IBM QCOM "
    "AMAT ADI MU LRCX KLAC MCHP SNPS CDNS FTNT PANW "
    # Financials
    "JPM BAC WFC GS MS C AXP BLK SCHW SPGI "
    "CME ICE AON MMC AIG PGR TRV ALL MET PRU "
    # Healthcare
    "JNJ PFE ABT TMO DHR BMY ABBV MRK LLY UNH "
    "MDT ISRG GILD VRTX REGN BIIB AMGN ZTS SYK BSX "
    # Consumer discretionary
    "AMZN TSLA HD MCD LOW SBUX NKE TJX BKNG CMG "
    "LULU RCL CCL MAR HLT MGM WYNN LVS NCLH DRI "
    # Consumer staples
    "WMT PG KO PEP COST WBA CVS KMB CL GIS "
    "K TSN HSY MKC CAG CPB SJM HRL CHD CLX "
    # Energy
    "XOM CVX COP EOG SLB MPC PSX VLO HES BKR "
    "HAL DVN FANG EQT MRO APA OXY KMI WMB EPD "
    # Industrials
    "BA CAT GE HON UPS RTX LMT DE FDX WM "
    "EMR ETN ITW MMM GD NOC CSX UNP NSC LUV "
    # Communication services
    "GOOGL META NFLX DIS CMCSA VZ T TMUS CHTR PARA "
    # Utilities
    "NEE DUK SO D AEP EXC SRE PEG XEL ED "
    # Materials
    "LIN APD ECL SHW FCX NUE DOW DD PPG IFF "
    # Real estate
    "AMT PLD CCI EQIX WELL DLR PSA O CBRE AVB "
    # High-volume option underlyings
    "SPY QQQ IWM GDX EEM FXI EWZ USO SLV GLD "
    "ARKK SQQQ TQQQ SPXU UVXY VXX VIXY SVXY TMF TLT "
    # Growth names with listed LEAPS
    "GME AMC BB PLTR SOFI HOOD COIN RBLX U SNOW "
    "NET CRWD ZS OKTA DDOG MDB FSLY TWLO ZM DOCU "
    "RIVN LCID F GM NIO XPEV LI BYDDY FSR RIDE"
)

# Several names are listed under more than one sector above
SP500_TICKERS = tuple(dict.fromkeys(_SP500_RAW.split()))

SECTOR_MAPPING: Dict[str, tuple] = {
    "Technology": (
        "AAPL", "MSFT", "GOOGL", "GOOG", "AMZN", "NVDA", "META", "NFLX",
        "ADBE", "CRM", "ORCL", "AVGO", "CSCO", "INTC", "AMD",
    ),
    "Financial": ("JPM", "BAC", "WFC", "GS", "MS", "C", "AXP", "BLK", "SCHW", "SPGI"),
    "Healthcare": ("JNJ", "PFE", "ABT", "TMO", "DHR", "BMY", "ABBV", "MRK", "LLY", "UNH"),
    "Consumer": ("HD", "MCD", "LOW", "SBUX", "NKE", "WMT", "PG", "KO", "PEP", "COST"),
    "Energy": ("XOM", "CVX", "COP", "EOG", "SLB", "MPC", "PSX", "VLO", "HES", "BKR"),
    "Industrial": ("BA", "CAT", "GE", "HON", "UPS", "RTX", "LMT", "DE", "FDX", "WM"),
}

_SECTOR_BY_TICKER = {
    ticker: sector for sector, tickers in SECTOR_MAPPING.items() for ticker in tickers
}
_NAME_BY_TICKER = dict(DEFAULT_UNIVERSE)


def default_tickers() -> List[str]:
    return [ticker for ticker, _ in DEFAULT_UNIVERSE]


UNIVERSES = ("default", "sp500")


def universe_tickers(name: str = "default") -> List[str]:
    """Tickers of a named universe: the 50 default names or the S&P 500 list."""
    name = name.lower()
    if name == "sp500":
        return list(SP500_TICKERS)
    if name == "default":
        return default_tickers()
    raise ValueError(f"Universe must be one of: {list(UNIVERSES)}")


def sector_for(ticker: str) -> str:
    return _SECTOR_BY_TICKER.get(ticker.upper(), "Unknown")


def company_name(ticker: str) -> str:
    ticker = ticker.upper()
    return _NAME_BY_TICKER.get(ticker, f"{ticker} Corporation")


def normalize_tickers(raw: str, limit: int = 50) -> List[str]:
    """
    Parse a comma separated ticker list.

    Symbols are upper-cased, blanks and duplicates dropped, order kept.
    """
    tickers = [t.strip().upper() for t in raw.split(",") if t.strip()]
    return list(dict.fromkeys(tickers))[:limit]
