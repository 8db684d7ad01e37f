"""
Cyber Morning Report Aggregator.

Collects recent open-web items from a search API or RSS/Atom feeds,
sorts them into fixed topical categories and returns a windowed report.
"""
