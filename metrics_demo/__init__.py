"""Instrumented single-endpoint web service exporting counters and gauges for scraping."""
