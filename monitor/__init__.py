"""Market data collection: snapshots, liquidations, news and indicators."""
