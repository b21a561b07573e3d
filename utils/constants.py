"""Symbol universes and reference tables for synthetic estimates."""

QUOTE_ASSET = "USDT"

# Full scan universe (Binance USDT pairs)
ALL_SYMBOLS = [
    # Majors
    "BTCUSDT", "ETHUSDT", "BNBUSDT", "XRPUSDT", "SOLUSDT", "DOGEUSDT", "ADAUSDT", "DOTUSDT", "LTCUSDT", "BCHUSDT",
    # DeFi & Layer 1
    "AVAXUSDT", "LINKUSDT", "MATICUSDT", "UNIUSDT", "ATOMUSDT", "FTMUSDT", "NEARUSDT", "ALGOUSDT", "VETUSDT",
    "ICPUSDT",
    # Layer 2
    "ARBUSDT", "OPUSDT", "LRCUSDT", "IMXUSDT", "STRKUSDT",
    # Meme
    "SHIBUSDT", "PEPEUSDT", "FLOKIUSDT", "BONKUSDT", "WIFUSDT", "BOMEUSDT", "MEMEUSDT",
    # AI
    "AIUSDT", "FETUSDT", "AGIXUSDT", "RNDRUSDT", "OCEANUSDT", "THETAUSDT", "FILUSDT",
    # Gaming & metaverse
    "AXSUSDT", "SANDUSDT", "MANAUSDT", "ENJUSDT", "GALAUSDT", "CHZUSDT", "FLOWUSDT",
    # DeFi blue chips
    "CAKEUSDT", "CRVUSDT", "COMPUSDT", "MKRUSDT", "AAVEUSDT", "SUSHIUSDT", "1INCHUSDT",
    # Storage & infrastructure
    "ARUSDT", "STORJUSDT", "SCUSDT", "ZENUSDT", "HBARUSDT", "IOTAUSDT",
    # Privacy
    "XMRUSDT", "ZECUSDT", "DASHUSDT", "ZRXUSDT",
    # Enterprise
    "XLMUSDT", "TRXUSDT", "EOSUSDT", "NEOUSDT", "ONTUSDT", "QTUMUSDT",
    # Newer listings
    "SUIUSDT", "APTUSDT", "INJUSDT", "SEIUSDT", "TIAUSDT", "DYMUSDT", "ARKMUSDT", "PYTHUSDT",
    "JUPUSDT", "ALTUSDT", "MANTAUSDT", "STXUSDT", "ACEUSDT", "ORDIUSDT",
    # Others
    "ETCUSDT", "XTZUSDT", "RVNUSDT", "ZILUSDT", "BATUSDT", "KNCUSDT", "KSMUSDT", "RUNEUSDT", "PAXGUSDT",
]

# Default set for the opportunities search
CURATED_SYMBOLS = [
    "BTCUSDT", "ETHUSDT", "BNBUSDT", "XRPUSDT", "SOLUSDT",
    "DOGEUSDT", "ADAUSDT", "DOTUSDT", "LTCUSDT", "BCHUSDT",
    "AVAXUSDT", "LINKUSDT", "MATICUSDT", "UNIUSDT", "ATOMUSDT",
]

PRIORITY_SYMBOLS = ("BTCUSDT", "ETHUSDT", "BNBUSDT", "XRPUSDT", "SOLUSDT")

# Price oracle: symbol → (baseline USD, symmetric jitter)
REFERENCE_PRICES = {
    "BTCUSDT": (113_500, 2_000),
    "ETHUSDT": (4_100, 200),
    "BNBUSDT": (720, 50),
    "XRPUSDT": (2.8, 0.3),
    "SOLUSDT": (250, 20),
    "DOGEUSDT": (0.41, 0.05),
    "ADAUSDT": (1.2, 0.1),
    "DOTUSDT": (8.5, 1),
    "LTCUSDT": (120, 10),
    "BCHUSDT": (520, 50),
    "AVAXUSDT": (45, 5),
    "LINKUSDT": (28, 3),
    "MATICUSDT": (0.55, 0.05),
    "UNIUSDT": (15, 2),
    "ATOMUSDT": (8, 1),
    "FTMUSDT": (0.95, 0.1),
    "NEARUSDT": (6.5, 0.5),
    "ALGOUSDT": (0.45, 0.05),
    "VETUSDT": (0.055, 0.005),
    "ICPUSDT": (12, 1),
    "ARBUSDT": (1.2, 0.1),
    "OPUSDT": (2.8, 0.3),
    "IMXUSDT": (1.8, 0.2),
    "SHIBUSDT": (0.000028, 0.000005),
    "PEPEUSDT": (0.000021, 0.000003),
    "FLOKIUSDT": (0.00025, 0.00003),
    "BONKUSDT": (0.000035, 0.000005),
    "WIFUSDT": (3.2, 0.5),
    "FETUSDT": (1.8, 0.2),
    "RNDRUSDT": (8.5, 1),
    "FILUSDT": (6.8, 0.8),
    "AXSUSDT": (8.5, 1),
    "SANDUSDT": (0.55, 0.08),
    "MANAUSDT": (0.65, 0.08),
    "MKRUSDT": (1_850, 200),
    "AAVEUSDT": (380, 40),
    "XMRUSDT": (185, 20),
    "XLMUSDT": (0.125, 0.015),
    "TRXUSDT": (0.085, 0.01),
    "SUIUSDT": (4.8, 0.5),
    "APTUSDT": (12, 1.5),
    "INJUSDT": (28, 3),
    "TIAUSDT": (6.8, 0.8),
    "ETCUSDT": (35, 4),
    "ORDIUSDT": (45, 5),
}

# Fallback range for symbols missing from REFERENCE_PRICES
UNKNOWN_PRICE_RANGE = (0.1, 50.0)

# Relative liquidation activity by base asset; anything unlisted weighs 1.0
LIQUIDATION_POPULARITY = {
    "btc": 10.0,
    "eth": 8.0,
    "bnb": 6.0,
    "sol": 5.5,
    "xrp": 5.0,
    "doge": 4.5,
    "ada": 4.0,
    "dot": 3.5,
    "ltc": 3.0,
    "bch": 2.8,
    "avax": 2.5,
    "link": 2.3,
    "matic": 2.0,
    "uni": 1.8,
    "atom": 1.5,
}


def base_asset(symbol):
    """BTCUSDT → BTC"""
    symbol = symbol.upper()
    if symbol.endswith(QUOTE_ASSET):
        return symbol[: -len(QUOTE_ASSET)]
    return symbol
