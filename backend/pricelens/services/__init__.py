"""
Services Layer

- indicators: pure NumPy indicator engine
- market_data: price series, symbol normalization, provider adapters
- analysis: report assembly and request-level orchestration
"""
