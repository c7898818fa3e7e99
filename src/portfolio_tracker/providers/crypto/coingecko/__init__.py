"""CoinGecko integration."""
